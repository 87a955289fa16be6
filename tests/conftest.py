"""Pytest fixtures for AnonWall test suite."""

import asyncio
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

import pytest

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from shared.catalog import empty_tally  # noqa: E402
from shared.schemas import Post  # noqa: E402
from wall_client.errors import FetchFailed, ReactionWriteFailed, SubmitFailed  # noqa: E402
from wall_client.store_client import SUBMIT_FAILED_MESSAGE  # noqa: E402

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FakeTable:
    """In-memory stand-in for the posts table with switchable failures."""

    def __init__(self):
        self.records: list[dict] = []
        self.fetch_calls = 0
        self.insert_calls = 0
        self.updates: list[tuple[str, dict]] = []
        self.fail_fetch = False
        self.fail_insert = False
        self.fail_update = False
        # When set, fetch_all blocks until the event is set.
        self.fetch_gate: Optional[asyncio.Event] = None

    async def fetch_all(self) -> list[dict]:
        self.fetch_calls += 1
        if self.fetch_gate is not None:
            await self.fetch_gate.wait()
        if self.fail_fetch:
            raise FetchFailed("store unreachable")
        return [dict(record) for record in self.records]

    async def insert(self, record: dict) -> dict:
        self.insert_calls += 1
        if self.fail_insert:
            raise SubmitFailed(SUBMIT_FAILED_MESSAGE)
        created = {
            **record,
            "id": f"post-{len(self.records) + 1}",
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        self.records.append(created)
        return dict(created)

    async def update_reactions(self, post_id: str, reactions: dict[str, int]) -> None:
        self.updates.append((post_id, dict(reactions)))
        if self.fail_update:
            raise ReactionWriteFailed("store unreachable")
        for record in self.records:
            if record["id"] == post_id:
                record["reactions"] = dict(reactions)


@pytest.fixture
def fake_table():
    return FakeTable()


@pytest.fixture
def make_post():
    """Factory for posts with a given age and reaction tally."""
    def _make_post(post_id: str, minutes: int = 0, **reactions: int) -> Post:
        tally = empty_tally()
        tally.update(reactions)
        return Post(
            id=post_id,
            text=f"confession {post_id}",
            created_at=BASE_TIME + timedelta(minutes=minutes),
            reactions=tally,
        )
    return _make_post


@pytest.fixture
def make_record():
    """Factory for raw posts-table records."""
    def _make_record(post_id: str, minutes: int = 0, **reactions: int) -> dict:
        tally = empty_tally()
        tally.update(reactions)
        return {
            "id": post_id,
            "text": f"confession {post_id}",
            "tag": "general",
            "tag_label": "General",
            "created_at": (BASE_TIME + timedelta(minutes=minutes)).isoformat(),
            "reactions": tally,
        }
    return _make_record


@pytest.fixture
def storage(tmp_path):
    """Local storage backed by a file in a per-test directory."""
    from wall_client.local_storage import LocalStorage
    return LocalStorage(tmp_path / "storage.json")


@pytest.fixture
def broken_storage(tmp_path):
    """Local storage whose path is a directory, so every read and write fails."""
    from wall_client.local_storage import LocalStorage
    path = tmp_path / "not-a-file"
    path.mkdir()
    return LocalStorage(path)


@pytest.fixture(scope="function")
def test_db(tmp_path):
    """Create a fresh store database for each test."""
    from wall_server.db import database as db_module

    test_db_path = tmp_path / "test_wall.db"

    # Store original path
    original_path = db_module.DB_PATH

    # Set test database path
    db_module.DB_PATH = test_db_path

    # Initialize the test database
    db_module.init_db()

    yield db_module

    # Restore original path
    db_module.DB_PATH = original_path


@pytest.fixture(scope="function")
async def test_client(test_db):
    """Create an httpx client talking to the store app in-process."""
    from httpx import ASGITransport, AsyncClient
    from wall_server.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def store_client(test_client):
    """StoreClient wired to the in-process store."""
    from wall_client.store_client import StoreClient
    return StoreClient(client=test_client)
