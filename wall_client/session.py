"""Process-scoped state for one AnonWall client."""

from typing import Optional, Union

from shared.schemas import Post
from wall_client.composer import Composer
from wall_client.config import Settings, settings as default_settings
from wall_client.identity import IdentityProvider
from wall_client.local_storage import LocalStorage
from wall_client.logging_setup import get_logger
from wall_client.ordering import SortMode, order
from wall_client.post_store import PostStore
from wall_client.preferences import ThemePreference
from wall_client.reactions import ReactionAggregator
from wall_client.store_client import PostTable, StoreClient
from wall_client.synchronizer import FeedSynchronizer

log = get_logger(__name__)


class WallSession:
    """Wires identity, post store, synchronizer, reactions and composer together.

    Everything the components share is owned here and passed in explicitly,
    so each piece can be built on its own in tests.
    """

    def __init__(self, client: PostTable, storage: LocalStorage,
                 settings: Optional[Settings] = None):
        self.settings = settings or default_settings
        self.client = client
        self.storage = storage

        self.identity_provider = IdentityProvider(storage)
        self.identity = self.identity_provider.get_or_create_identity()
        self.theme = ThemePreference(storage)
        self.theme.load()

        self.posts = PostStore()
        self.synchronizer = FeedSynchronizer(
            client,
            self.posts,
            interval=self.settings.poll_interval,
            max_backoff=self.settings.max_poll_backoff,
        )
        self.reactions = ReactionAggregator(client, self.posts)
        self.composer = Composer(
            client,
            self.posts,
            self.identity,
            on_submitted=self.synchronizer.request_refresh,
        )
        self.sort_mode = SortMode.NEWEST

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "WallSession":
        settings = settings or default_settings
        client = StoreClient(settings.store_endpoint, timeout=settings.request_timeout)
        return cls(client, LocalStorage(settings.storage_path), settings)

    def feed(self, mode: Union[str, SortMode, None] = None) -> list[Post]:
        if mode is not None:
            self.sort_mode = SortMode.parse(mode)
        return order(self.posts.all(), self.sort_mode)

    async def start(self) -> None:
        log.info(
            "session_start",
            endpoint=self.settings.store_endpoint,
            nickname=self.identity.nickname,
        )
        self.synchronizer.start()

    async def close(self) -> None:
        await self.synchronizer.stop()
        await self.reactions.drain()
        aclose = getattr(self.client, "aclose", None)
        if aclose is not None:
            await aclose()
        log.info("session_stop")
