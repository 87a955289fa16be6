"""Tests for mapping raw store records into posts."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from shared.schemas import Post, PostCreate
from wall_client.errors import RecordInvalid
from wall_client.store_client import parse_record, parse_records


def record(**overrides):
    data = {
        "id": "p1",
        "text": "something I never said out loud",
        "tag": "family",
        "tag_label": "Family",
        "created_at": "2024-05-01T12:00:00+00:00",
        "reactions": {"heart": 2},
    }
    data.update(overrides)
    return data


def test_missing_reaction_kinds_default_to_zero():
    post = Post.from_record(record())
    assert post.reactions == {"heart": 2, "support": 0, "hug": 0, "relatable": 0, "sad": 0}


def test_unknown_reaction_kinds_preserved_but_not_visible():
    post = Post.from_record(record(reactions={"heart": 1, "party": 4}))

    assert post.reactions["party"] == 4
    assert "party" not in post.visible_reactions()
    assert list(post.visible_reactions()) == ["heart", "support", "hug", "relatable", "sad"]


def test_bad_counts_are_clamped():
    post = Post.from_record(record(reactions={"heart": -3, "hug": None, "sad": "x"}))
    assert post.reactions["heart"] == 0
    assert post.reactions["hug"] == 0
    assert post.reactions["sad"] == 0


def test_null_reactions():
    post = Post.from_record(record(reactions=None))
    assert sum(post.reactions.values()) == 0


def test_unknown_tag_becomes_general():
    post = Post.from_record(record(tag="gossip", tag_label="Gossip"))
    assert post.tag == "general"
    assert post.tag_label == "General"


def test_missing_tag_label_filled_from_catalog():
    post = Post.from_record(record(tag="school", tag_label=None))
    assert post.tag_label == "School / College"


def test_numeric_id_coerced_to_string():
    assert Post.from_record(record(id=42)).id == "42"


def test_epoch_and_naive_timestamps_become_utc():
    from_epoch = Post.from_record(record(created_at=1714564800))
    naive = Post.from_record(record(created_at="2024-05-01T12:00:00"))
    offset = Post.from_record(record(created_at="2024-05-01T14:00:00+02:00"))

    expected = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    assert from_epoch.created_at == expected
    assert naive.created_at == expected
    assert offset.created_at == expected
    assert offset.created_at.tzinfo == timezone.utc


def test_author_fields_become_snapshot():
    post = Post.from_record(record(
        author_id="abc", author_nickname="Shy Deer", author_color="#10b981"
    ))
    assert post.author.nickname == "Shy Deer"
    assert Post.from_record(record()).author is None


def test_missing_id_rejected():
    with pytest.raises(ValidationError):
        Post.from_record(record(id=None))


def test_parse_record_wraps_errors():
    with pytest.raises(RecordInvalid):
        parse_record(record(created_at=None))
    with pytest.raises(RecordInvalid):
        parse_record(["not", "a", "record"])


def test_non_finite_counts_are_clamped():
    post = Post.from_record(record(reactions={"heart": float("inf"), "hug": float("nan"), "sad": 2}))
    assert post.reactions["heart"] == 0
    assert post.reactions["hug"] == 0
    assert post.reactions["sad"] == 2


def test_parse_records_skips_bad_rows():
    posts = parse_records([record(id="ok"), record(id=None), "garbage"])
    assert [p.id for p in posts] == ["ok"]


def test_parse_records_keeps_good_rows_beside_infinite_counts():
    posts = parse_records([record(id="ok"), record(id="inf", reactions={"heart": float("inf")})])
    assert [p.id for p in posts] == ["ok", "inf"]
    assert posts[1].reactions["heart"] == 0


@pytest.mark.parametrize("text", ["abcd", "   abcd   ", "x" * 401])
def test_post_create_enforces_text_length(text):
    with pytest.raises(ValidationError):
        PostCreate(text=text)


def test_post_create_strips_text_and_accepts_bounds():
    assert PostCreate(text="  hello  ").text == "hello"
    assert len(PostCreate(text="y" * 400).text) == 400


def test_post_create_rejects_unknown_tag():
    with pytest.raises(ValidationError):
        PostCreate(text="a real confession", tag="gossip")
