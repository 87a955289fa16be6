"""MCP Server for AnonWall - exposes the confession wall as tools."""

import asyncio
from typing import Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from shared.catalog import REACTION_IDS, TAG_OPTIONS
from wall_client.config import settings
from wall_client.errors import SubmitFailed, ValidationFailed
from wall_client.formatting import post_count_label, render_post
from wall_client.logging_setup import configure_logging, get_logger
from wall_client.ordering import SortMode
from wall_client.session import WallSession

log = get_logger(__name__)

server = Server("anon-wall")

session: Optional[WallSession] = None


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List available wall tools."""
    return [
        Tool(
            name="wall_feed",
            description="Show the anonymous confession wall",
            inputSchema={
                "type": "object",
                "properties": {
                    "sort": {
                        "type": "string",
                        "enum": [mode.value for mode in SortMode],
                        "description": "newest, oldest or top (most reactions)",
                    }
                }
            }
        ),
        Tool(
            name="wall_post",
            description="Post an anonymous confession (5-400 characters)",
            inputSchema={
                "type": "object",
                "properties": {
                    "text": {
                        "type": "string",
                        "description": "What's on your mind?"
                    },
                    "tag": {
                        "type": "string",
                        "enum": [option.value for option in TAG_OPTIONS],
                        "description": "Category for the confession",
                        "default": "general"
                    }
                },
                "required": ["text"]
            }
        ),
        Tool(
            name="wall_react",
            description="React to a confession",
            inputSchema={
                "type": "object",
                "properties": {
                    "post_id": {
                        "type": "string",
                        "description": "ID of the post to react to"
                    },
                    "reaction": {
                        "type": "string",
                        "enum": list(REACTION_IDS),
                        "description": "Reaction kind"
                    }
                },
                "required": ["post_id", "reaction"]
            }
        ),
        Tool(
            name="wall_refresh",
            description="Fetch the latest posts now",
            inputSchema={"type": "object", "properties": {}}
        ),
        Tool(
            name="wall_theme",
            description="Show or toggle the light/dark theme preference",
            inputSchema={
                "type": "object",
                "properties": {
                    "toggle": {
                        "type": "boolean",
                        "description": "Switch between light and dark",
                        "default": False
                    }
                }
            }
        ),
        Tool(
            name="wall_whoami",
            description="Show the anonymous identity used for this device",
            inputSchema={"type": "object", "properties": {}}
        ),
    ]


def render_feed(wall: WallSession, sort: Optional[str] = None) -> str:
    posts = wall.feed(sort)
    if not posts:
        if not wall.synchronizer.has_loaded:
            return "⏳ Loading anonymous confessions..."
        return "✨ No confessions yet. Be the first to share something anonymously."

    lines = [post_count_label(len(posts))]
    if wall.synchronizer.last_error is not None:
        lines.append("(could not refresh, showing the last posts we saw)")
    lines.extend(render_post(post) for post in posts)
    return "\n\n".join(lines)


async def dispatch(wall: WallSession, name: str, arguments: dict) -> str:
    """Run one tool against a session and return its text output."""
    if name == "wall_feed":
        return render_feed(wall, arguments.get("sort"))

    elif name == "wall_post":
        wall.composer.draft = arguments.get("text", "")
        wall.composer.tag = arguments.get("tag") or "general"
        try:
            post = await wall.composer.submit()
        except (ValidationFailed, SubmitFailed) as e:
            return str(e)
        return f"Posted anonymously. ID: {post.id}"

    elif name == "wall_react":
        tally = wall.reactions.react(arguments["post_id"], arguments["reaction"])
        if tally is None:
            return "Post or reaction not found."
        return f"Reacted! {arguments['reaction']}: {tally[arguments['reaction']]}"

    elif name == "wall_refresh":
        snapshot = await wall.synchronizer.poll_once()
        if snapshot is None:
            return "Could not refresh right now; showing the last posts we saw."
        return f"Refreshed. {post_count_label(len(wall.posts))}"

    elif name == "wall_theme":
        if arguments.get("toggle"):
            wall.theme.toggle()
        return f"Theme: {wall.theme.theme}"

    elif name == "wall_whoami":
        identity = wall.identity
        return f"{identity.nickname} ({identity.color})"

    return f"Unknown tool: {name}"


@server.call_tool()
async def call_tool(name: str, arguments: dict) -> list[TextContent]:
    """Handle tool calls."""
    if session is None:
        return [TextContent(type="text", text="Error: wall session not started")]
    try:
        text = await dispatch(session, name, arguments or {})
    except KeyError as e:
        text = f"Error: missing argument {e}"
    return [TextContent(type="text", text=text)]


async def main():
    """Run the MCP server."""
    global session
    configure_logging(settings.log_level, settings.log_format)
    session = WallSession.from_settings(settings)
    await session.start()
    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())
    finally:
        await session.close()


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
