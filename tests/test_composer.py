"""Tests for validating and submitting confessions."""

import pytest

from shared.schemas import Identity
from wall_client.composer import TOO_LONG_MESSAGE, TOO_SHORT_MESSAGE, Composer, validate_text
from wall_client.errors import SubmitFailed, ValidationFailed
from wall_client.post_store import PostStore

IDENTITY = Identity(id="me", nickname="Quiet Otter", color="#3b82f6")


def make_composer(table, refreshed=None):
    return Composer(
        table,
        PostStore(),
        IDENTITY,
        on_submitted=(lambda: refreshed.append(True)) if refreshed is not None else None,
    )


async def test_four_characters_rejected_without_network(fake_table):
    """Test that a too-short draft never reaches the store."""
    composer = make_composer(fake_table)
    composer.draft = "abcd"

    with pytest.raises(ValidationFailed, match=TOO_SHORT_MESSAGE):
        await composer.submit()

    assert fake_table.insert_calls == 0
    assert composer.draft == "abcd"


async def test_whitespace_does_not_count(fake_table):
    composer = make_composer(fake_table)
    composer.draft = "   abcd \n\t "

    with pytest.raises(ValidationFailed):
        await composer.submit()
    assert fake_table.insert_calls == 0


async def test_over_limit_rejected_without_network(fake_table):
    composer = make_composer(fake_table)
    composer.draft = "x" * 401

    assert "400 characters or fewer" in TOO_LONG_MESSAGE
    with pytest.raises(ValidationFailed, match=TOO_LONG_MESSAGE):
        await composer.submit()
    assert fake_table.insert_calls == 0


@pytest.mark.parametrize("length", [5, 400])
async def test_boundary_lengths_accepted(fake_table, length):
    composer = make_composer(fake_table)
    composer.draft = "y" * length

    post = await composer.submit()

    assert len(post.text) == length
    assert fake_table.insert_calls == 1


def test_validate_text_trims():
    assert validate_text("  hello world  ") == "hello world"


async def test_submit_inserts_locally_and_triggers_refresh(fake_table):
    """Test that the author sees their post at once and a poll is requested."""
    refreshed = []
    composer = make_composer(fake_table, refreshed)
    composer.draft = "  I never told anyone this.  "
    composer.tag = "mental"

    post = await composer.submit()

    assert composer.store.get(post.id) == post
    assert post.text == "I never told anyone this."
    assert post.tag_label == "Mental Health"
    assert post.author == IDENTITY
    assert composer.draft == ""
    assert refreshed == [True]


async def test_submit_sends_zero_tally_and_author(fake_table):
    composer = make_composer(fake_table)
    composer.draft = "sending my first confession"

    await composer.submit()

    record = fake_table.records[0]
    assert record["reactions"] == {"heart": 0, "support": 0, "hug": 0, "relatable": 0, "sad": 0}
    assert record["author_id"] == "me"
    assert record["author_nickname"] == "Quiet Otter"
    assert record["author_color"] == "#3b82f6"


async def test_unknown_tag_posts_as_general(fake_table):
    composer = make_composer(fake_table)
    composer.draft = "tagged with something odd"
    composer.tag = "gossip"

    post = await composer.submit()

    assert post.tag == "general"
    assert fake_table.records[0]["tag_label"] == "General"


async def test_failed_submit_keeps_draft(fake_table):
    """Test that a store failure surfaces a message and preserves the draft."""
    fake_table.fail_insert = True
    refreshed = []
    composer = make_composer(fake_table, refreshed)
    composer.draft = "please do not lose this"

    with pytest.raises(SubmitFailed, match="Please try again"):
        await composer.submit()

    assert composer.draft == "please do not lose this"
    assert len(composer.store) == 0
    assert refreshed == []
