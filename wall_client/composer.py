"""Client-side validation and submission of new confessions."""

from typing import Callable, Optional

from shared.catalog import MAX_TEXT_LENGTH, MIN_TEXT_LENGTH, empty_tally, tag_option
from shared.schemas import Identity, Post
from wall_client.errors import RecordInvalid, SubmitFailed, ValidationFailed
from wall_client.logging_setup import get_logger
from wall_client.post_store import PostStore
from wall_client.store_client import SUBMIT_FAILED_MESSAGE, PostTable, parse_record

log = get_logger(__name__)

MIN_LENGTH = MIN_TEXT_LENGTH
MAX_LENGTH = MAX_TEXT_LENGTH

TOO_SHORT_MESSAGE = "Write at least a few words to share your confession."
TOO_LONG_MESSAGE = f"Keep it to {MAX_LENGTH} characters or fewer so it fits on the wall."


def validate_text(text: Optional[str]) -> str:
    """Return the trimmed text, or raise ValidationFailed."""
    trimmed = (text or "").strip()
    if len(trimmed) < MIN_LENGTH:
        raise ValidationFailed(TOO_SHORT_MESSAGE)
    if len(trimmed) > MAX_LENGTH:
        raise ValidationFailed(TOO_LONG_MESSAGE)
    return trimmed


class Composer:
    """Holds the draft and turns it into a post.

    The draft is cleared only after the store accepts the post, so a failed
    submit can be retried without retyping.
    """

    def __init__(
        self,
        client: PostTable,
        store: PostStore,
        identity: Identity,
        on_submitted: Optional[Callable[[], None]] = None,
    ):
        self.client = client
        self.store = store
        self.identity = identity
        self.on_submitted = on_submitted
        self.draft = ""
        self.tag = "general"

    async def submit(self) -> Post:
        """Validate and insert the draft.

        Raises:
            ValidationFailed: The draft is too short or too long; nothing was sent.
            SubmitFailed: The store rejected or never answered the insert.
        """
        text = validate_text(self.draft)
        option = tag_option(self.tag)
        record = {
            "text": text,
            "tag": option.value,
            "tag_label": option.label,
            "reactions": empty_tally(),
            "author_id": self.identity.id,
            "author_nickname": self.identity.nickname,
            "author_color": self.identity.color,
        }

        created = await self.client.insert(record)
        try:
            post = parse_record(created)
        except RecordInvalid as e:
            log.error("post_insert_unreadable", error=str(e))
            raise SubmitFailed(SUBMIT_FAILED_MESSAGE) from e

        self.store.insert_local(post)
        self.draft = ""
        log.info("post_submitted", post_id=post.id, tag=post.tag)
        if self.on_submitted is not None:
            self.on_submitted()
        return post
