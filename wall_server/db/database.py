"""Database setup and operations for the AnonWall posts table using SQLite."""

import json
import os
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

DB_PATH = Path(os.environ.get("WALL_DB_PATH", Path(__file__).parent / "wall.db"))


@contextmanager
def get_db():
    """Get a database connection."""
    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()


def init_db():
    """Initialize the database schema."""
    with get_db() as conn:
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS posts (
                id TEXT PRIMARY KEY,
                text TEXT NOT NULL,
                tag TEXT NOT NULL,
                tag_label TEXT NOT NULL,
                created_at TEXT NOT NULL,
                reactions TEXT NOT NULL DEFAULT '{}',  -- JSON object kind -> count
                author_id TEXT,
                author_nickname TEXT,
                author_color TEXT
            );

            CREATE INDEX IF NOT EXISTS idx_posts_created_at ON posts(created_at);
        """)
        conn.commit()


def _row_to_post(row: sqlite3.Row) -> dict:
    post = dict(row)
    post['reactions'] = json.loads(post['reactions'])
    return post


def create_post(text: str, tag: str, tag_label: str, reactions: dict[str, int],
                author_id: Optional[str] = None,
                author_nickname: Optional[str] = None,
                author_color: Optional[str] = None) -> dict:
    """Insert a post. Returns the stored row with its assigned id and created_at."""
    post_id = str(uuid.uuid4())
    created_at = datetime.now(timezone.utc).isoformat(timespec="microseconds")
    with get_db() as conn:
        conn.execute(
            """INSERT INTO posts
               (id, text, tag, tag_label, created_at, reactions,
                author_id, author_nickname, author_color)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (post_id, text, tag, tag_label, created_at, json.dumps(reactions),
             author_id, author_nickname, author_color)
        )
        conn.commit()
    return get_post(post_id)


def get_post(post_id: str) -> Optional[dict]:
    """Get a post by ID."""
    with get_db() as conn:
        row = conn.execute("SELECT * FROM posts WHERE id = ?", (post_id,)).fetchone()
        if row:
            return _row_to_post(row)
        return None


def list_posts() -> list[dict]:
    """List every post, newest first."""
    with get_db() as conn:
        rows = conn.execute(
            "SELECT * FROM posts ORDER BY created_at DESC"
        ).fetchall()
        return [_row_to_post(row) for row in rows]


def update_reactions(post_id: str, reactions: dict[str, int]) -> bool:
    """Replace a post's reaction map. Returns True if the post exists."""
    with get_db() as conn:
        result = conn.execute(
            "UPDATE posts SET reactions = ? WHERE id = ?",
            (json.dumps(reactions), post_id)
        )
        conn.commit()
        return result.rowcount > 0


def delete_post(post_id: str) -> bool:
    """Remove a post. Returns True if it existed."""
    with get_db() as conn:
        result = conn.execute("DELETE FROM posts WHERE id = ?", (post_id,))
        conn.commit()
        return result.rowcount > 0
