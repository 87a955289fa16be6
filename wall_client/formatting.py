"""Plain-text rendering helpers for the feed."""

from datetime import datetime, timezone
from typing import Optional

from shared.catalog import REACTIONS
from shared.schemas import Post


def format_time_ago(created_at: datetime, now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    diff_minutes = int((now - created_at).total_seconds() // 60)
    diff_hours = diff_minutes // 60
    diff_days = diff_hours // 24

    if diff_minutes < 1:
        return "Just now"
    if diff_minutes < 60:
        return f"{diff_minutes} min ago"
    if diff_hours < 24:
        return f"{diff_hours} hr ago"
    if diff_days < 7:
        return f"{diff_days} day{'s' if diff_days > 1 else ''} ago"
    return created_at.strftime("%d %b %Y · %H:%M")


def post_count_label(count: int) -> str:
    if count == 0:
        return "No posts yet"
    if count == 1:
        return "1 anonymous confession"
    return f"{count} anonymous confessions"


def render_post(post: Post, now: Optional[datetime] = None) -> str:
    author = post.author.nickname if post.author else "anon"
    reactions = "  ".join(
        f"{r.emoji} {r.label} {post.reactions.get(r.id, 0)}" for r in REACTIONS
    )
    return (
        f"[{post.tag_label or 'General'}] {post.id}\n"
        f"{post.text}\n"
        f"👤 {author} · {format_time_ago(post.created_at, now)}\n"
        f"{reactions}"
    )
