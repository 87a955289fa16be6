"""HTTP client for the posts table, and the record mapping at its boundary."""

from typing import Any, Optional, Protocol

import httpx
from pydantic import ValidationError

from shared.schemas import Post
from wall_client.errors import FetchFailed, RecordInvalid, ReactionWriteFailed, SubmitFailed
from wall_client.logging_setup import get_logger

log = get_logger(__name__)

SUBMIT_FAILED_MESSAGE = "Something went wrong while posting. Please try again."


class PostTable(Protocol):
    """The three calls the client core needs from the external store."""

    async def fetch_all(self) -> list[dict]:
        """Return every raw post record, nominally newest first.

        Raises:
            FetchFailed: The snapshot could not be retrieved.
        """
        ...

    async def insert(self, record: dict) -> dict:
        """Insert a record and return it with its server-assigned id and created_at.

        Raises:
            SubmitFailed: The insert did not succeed.
        """
        ...

    async def update_reactions(self, post_id: str, reactions: dict[str, int]) -> None:
        """Replace a post's whole reaction map.

        Raises:
            ReactionWriteFailed: The write did not succeed.
        """
        ...


class StoreClient:
    """PostTable implementation speaking to the AnonWall store over HTTP."""

    def __init__(self, endpoint: str = "http://localhost:8000", timeout: float = 10.0,
                 client: Optional[httpx.AsyncClient] = None):
        self._client = client or httpx.AsyncClient(base_url=endpoint, timeout=timeout)

    async def fetch_all(self) -> list[dict]:
        try:
            response = await self._client.get("/posts", params={"order": "created_at.desc"})
            response.raise_for_status()
            posts = response.json()["posts"]
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            raise FetchFailed(f"could not load posts: {e}") from e
        if not isinstance(posts, list):
            raise FetchFailed("could not load posts: malformed response")
        return posts

    async def insert(self, record: dict) -> dict:
        try:
            response = await self._client.post("/posts", json=record)
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            log.error("post_insert_failed", error=str(e))
            raise SubmitFailed(SUBMIT_FAILED_MESSAGE) from e

    async def update_reactions(self, post_id: str, reactions: dict[str, int]) -> None:
        try:
            response = await self._client.patch(
                f"/posts/{post_id}/reactions",
                json={"reactions": reactions}
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise ReactionWriteFailed(f"could not update reactions for {post_id}: {e}") from e

    async def aclose(self) -> None:
        await self._client.aclose()


def parse_record(record: Any) -> Post:
    """Map one raw record into a Post.

    Raises:
        RecordInvalid: The record is missing required fields or is malformed.
    """
    if not isinstance(record, dict):
        raise RecordInvalid(f"expected a mapping, got {type(record).__name__}")
    try:
        return Post.from_record(record)
    except ValidationError as e:
        raise RecordInvalid(str(e)) from e


def parse_records(records: list[Any]) -> list[Post]:
    """Map a snapshot's records, skipping (and logging) any that are malformed."""
    posts = []
    for record in records:
        try:
            posts.append(parse_record(record))
        except RecordInvalid as e:
            record_id = record.get("id") if isinstance(record, dict) else None
            log.warning("record_skipped", record_id=record_id, error=str(e))
    return posts
