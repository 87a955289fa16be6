"""AnonWall store - FastAPI backend exposing the posts table."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from shared.schemas import PostCreate, PostRecord, ReactionsUpdate
from wall_server.db import database as db


@asynccontextmanager
async def lifespan(app: FastAPI):
    db.init_db()
    yield


app = FastAPI(
    title="AnonWall Store",
    description="Posts table backing the anonymous confession wall",
    version="0.1.0",
    lifespan=lifespan
)


# Post endpoints

@app.get("/posts")
async def list_posts():
    """List every post, newest first."""
    return {"posts": db.list_posts()}


@app.post("/posts", response_model=PostRecord)
async def create_post(post: PostCreate):
    """Insert a post and return the stored row."""
    return db.create_post(
        text=post.text,
        tag=post.tag,
        tag_label=post.tag_label,
        reactions=post.reactions,
        author_id=post.author_id,
        author_nickname=post.author_nickname,
        author_color=post.author_color
    )


class UpdateResponse(BaseModel):
    success: bool


@app.patch("/posts/{post_id}/reactions", response_model=UpdateResponse)
async def update_reactions(post_id: str, update: ReactionsUpdate):
    """Replace the reaction map of a post."""
    if not db.update_reactions(post_id, update.reactions):
        raise HTTPException(status_code=404, detail="Post not found")
    return UpdateResponse(success=True)


# Health check

@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok", "version": "0.1.0"}


def run():
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run()
