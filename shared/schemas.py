"""Shared data models for AnonWall."""

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Annotated, Any, Optional

from pydantic import (
    BaseModel,
    Field,
    NonNegativeInt,
    StringConstraints,
    field_validator,
    model_validator,
)

from shared.catalog import (
    MAX_TEXT_LENGTH,
    MIN_TEXT_LENGTH,
    REACTION_IDS,
    empty_tally,
    is_known_tag,
    tag_option,
)


class Identity(BaseModel):
    """An anonymous, device-local identity."""
    id: str
    nickname: str
    color: str


def normalize_tally(raw: Any) -> dict[str, int]:
    """Coerce a raw reaction mapping into a complete, non-negative tally.

    Every known reaction kind gets an entry; unknown kinds are kept as-is so
    they survive a round trip through the client.
    """
    tally = empty_tally()
    if not isinstance(raw, Mapping):
        return tally
    for kind, count in raw.items():
        try:
            value = int(count or 0)
        except (TypeError, ValueError, OverflowError):
            value = 0
        tally[str(kind)] = max(value, 0)
    return tally


class Post(BaseModel):
    """A confession as known to the client."""
    id: str
    text: str
    tag: str = "general"
    tag_label: str = "General"
    created_at: datetime
    reactions: dict[str, int] = Field(default_factory=empty_tally)
    author: Optional[Identity] = None

    @model_validator(mode="before")
    @classmethod
    def _resolve_tag(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        option = tag_option(data.get("tag"))
        if not is_known_tag(data.get("tag")):
            data["tag"] = option.value
            data["tag_label"] = option.label
        elif not data.get("tag_label"):
            data["tag_label"] = option.label
        return data

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        if value is None or str(value) == "":
            raise ValueError("post id is required")
        return str(value)

    @field_validator("created_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @field_validator("reactions", mode="before")
    @classmethod
    def _complete_tally(cls, value: Any) -> dict[str, int]:
        return normalize_tally(value)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Post":
        """Map a raw row from the posts table into a Post."""
        author = None
        if record.get("author_id"):
            author = Identity(
                id=str(record["author_id"]),
                nickname=record.get("author_nickname") or "anon",
                color=record.get("author_color") or "#9ca3af",
            )
        return cls(
            id=record.get("id"),
            text=record.get("text"),
            tag=record.get("tag"),
            tag_label=record.get("tag_label"),
            created_at=record.get("created_at"),
            reactions=record.get("reactions"),
            author=author,
        )

    def visible_reactions(self) -> dict[str, int]:
        """Counts for the known reaction kinds only, in display order."""
        return {kind: self.reactions.get(kind, 0) for kind in REACTION_IDS}


class PostCreate(BaseModel):
    """Request to add a row to the posts table."""
    text: Annotated[
        str,
        StringConstraints(strip_whitespace=True, min_length=MIN_TEXT_LENGTH, max_length=MAX_TEXT_LENGTH),
    ]
    tag: str = "general"
    tag_label: str = "General"
    reactions: dict[str, NonNegativeInt] = Field(default_factory=empty_tally)
    author_id: Optional[str] = None
    author_nickname: Optional[str] = None
    author_color: Optional[str] = None

    @field_validator("tag")
    @classmethod
    def _known_tag(cls, value: str) -> str:
        if not is_known_tag(value):
            raise ValueError(f"unknown tag: {value}")
        return value


class PostRecord(PostCreate):
    """A row of the posts table as the store returns it."""
    id: str
    created_at: datetime


class ReactionsUpdate(BaseModel):
    """Replacement reaction map for one post."""
    reactions: dict[str, NonNegativeInt]
