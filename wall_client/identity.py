"""Anonymous identity: load from local storage or generate once per profile."""

import random
import uuid
from typing import Optional

from shared.schemas import Identity
from wall_client.errors import PersistenceUnavailable
from wall_client.local_storage import LocalStorage
from wall_client.logging_setup import get_logger

log = get_logger(__name__)

IDENTITY_ID_KEY = "anonWallIdentityId"
IDENTITY_NICKNAME_KEY = "anonWallNickname"
IDENTITY_COLOR_KEY = "anonWallColor"

NICKNAMES: list[str] = [
    "Quiet Otter",
    "Sleepy Fox",
    "Gentle Owl",
    "Curious Cat",
    "Brave Sparrow",
    "Lost Penguin",
    "Calm Koala",
    "Shy Deer",
    "Midnight Moth",
    "Hopeful Hedgehog",
    "Wandering Whale",
    "Soft Panda",
]

COLORS: list[str] = [
    "#f97316",
    "#ec4899",
    "#8b5cf6",
    "#3b82f6",
    "#10b981",
    "#eab308",
    "#ef4444",
    "#14b8a6",
]

FALLBACK_NICKNAME = "anon"
FALLBACK_COLOR = "#9ca3af"


class IdentityProvider:
    """Derives the device-local identity, memoized for the provider's lifetime.

    The three identity fields are read and written together; if any one of
    them is missing the whole triple is regenerated. When storage fails the
    provider hands out an ephemeral neutral identity instead of raising.
    """

    def __init__(self, storage: LocalStorage, rng: Optional[random.Random] = None):
        self.storage = storage
        self._rng = rng or random.Random()
        self._identity: Optional[Identity] = None

    def get_or_create_identity(self) -> Identity:
        if self._identity is None:
            self._identity = self._load_or_generate()
        return self._identity

    def _load_or_generate(self) -> Identity:
        try:
            stored = self.storage.get_many(
                IDENTITY_ID_KEY, IDENTITY_NICKNAME_KEY, IDENTITY_COLOR_KEY
            )
            if all(stored.values()):
                return Identity(
                    id=stored[IDENTITY_ID_KEY],
                    nickname=stored[IDENTITY_NICKNAME_KEY],
                    color=stored[IDENTITY_COLOR_KEY],
                )

            identity = self._generate()
            self.storage.set_many({
                IDENTITY_ID_KEY: identity.id,
                IDENTITY_NICKNAME_KEY: identity.nickname,
                IDENTITY_COLOR_KEY: identity.color,
            })
            log.info("identity_created", nickname=identity.nickname)
            return identity
        except PersistenceUnavailable as e:
            log.warning("identity_storage_unavailable", error=str(e))
            return ephemeral_identity()

    def _generate(self) -> Identity:
        return Identity(
            id=uuid.uuid4().hex,
            nickname=self._rng.choice(NICKNAMES),
            color=self._rng.choice(COLORS),
        )

    def reset(self) -> None:
        """Forget the persisted identity; the next call generates a new one."""
        self._identity = None
        try:
            self.storage.remove(IDENTITY_ID_KEY, IDENTITY_NICKNAME_KEY, IDENTITY_COLOR_KEY)
        except PersistenceUnavailable as e:
            log.warning("identity_storage_unavailable", error=str(e))


def ephemeral_identity() -> Identity:
    """An in-memory identity used when nothing can be persisted."""
    return Identity(id=uuid.uuid4().hex, nickname=FALLBACK_NICKNAME, color=FALLBACK_COLOR)
