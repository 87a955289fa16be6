"""Closed reaction and tag sets shared by the wall client and store."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ReactionOption:
    """A reaction users can add to a post."""
    id: str
    emoji: str
    label: str


@dataclass(frozen=True)
class TagOption:
    """A category a confession can be filed under."""
    value: str
    label: str


REACTIONS: list[ReactionOption] = [
    ReactionOption("heart", "❤️", "Love"),
    ReactionOption("support", "🤝", "Support"),
    ReactionOption("hug", "🤗", "Hug"),
    ReactionOption("relatable", "🔥", "Relatable"),
    ReactionOption("sad", "😢", "Felt this"),
]

REACTION_IDS: tuple[str, ...] = tuple(r.id for r in REACTIONS)

TAG_OPTIONS: list[TagOption] = [
    TagOption("general", "General"),
    TagOption("love", "Love & Relationships"),
    TagOption("family", "Family"),
    TagOption("school", "School / College"),
    TagOption("work", "Work / Career"),
    TagOption("mental", "Mental Health"),
    TagOption("random", "Random Thoughts"),
]

DEFAULT_TAG = TAG_OPTIONS[0]

# Bounds on a confession after surrounding whitespace is trimmed.
MIN_TEXT_LENGTH = 5
MAX_TEXT_LENGTH = 400


def tag_option(value: Optional[str]) -> TagOption:
    """Look up a tag, falling back to General for anything unknown."""
    for option in TAG_OPTIONS:
        if option.value == value:
            return option
    return DEFAULT_TAG


def is_known_tag(value: Optional[str]) -> bool:
    return any(option.value == value for option in TAG_OPTIONS)


def empty_tally() -> dict[str, int]:
    """A tally with a zero entry for every reaction kind."""
    return {kind: 0 for kind in REACTION_IDS}
