"""MCP server for archmemory.

Exposes the architecture memory to AI agents via the Model Context Protocol.
Agents can read documents as structured JSON, save edited records back as
canonical markdown, create projects, record decision and insight notes, and
fetch the assembled context.

Usage:
    uv run python -m archmemory.mcp_server

Configure in Claude Code (~/.claude.json):
    {
      "mcpServers": {
        "archmemory": {
          "command": "archmemory",
          "args": ["serve"],
          "env": {"ARCHMEMORY_PATH": "/path/to/architecture_memory"}
        }
      }
    }
"""

from __future__ import annotations

import json
import time

import mcp.server.stdio
import mcp.types as types
from mcp.server import Server

from archmemory.activity import log_tool_call
from archmemory.config import Config
from archmemory.context import build_context
from archmemory.markdown.models import DocumentKind, to_dict
from archmemory.storage.memory import NOTE_DIRS, MemoryStore

server = Server("archmemory")

_KIND_NAMES = [kind.value for kind in DocumentKind]


def _get_store() -> MemoryStore:
    config = Config.load()
    store = MemoryStore.from_config(config)
    if store is None:
        raise FileNotFoundError(
            "No architecture_memory directory found. "
            "Set ARCHMEMORY_PATH or run 'archmemory new-project <name>' first."
        )
    return store


def _project_arg(arguments: dict) -> str | None:
    """Project from the arguments, the configured default, or None for organization scope."""
    if arguments.get("organization"):
        return None
    return arguments.get("project") or Config.load().project or None


@server.list_tools()
async def list_tools() -> list[types.Tool]:
    scope_properties = {
        "project": {
            "type": "string",
            "description": "Project name. Defaults to ARCHMEMORY_PROJECT.",
        },
        "organization": {
            "type": "boolean",
            "description": "Use the organization-level document instead of a project's",
        },
    }
    return [
        types.Tool(
            name="list_projects",
            description="List the projects in the architecture memory.",
            inputSchema={"type": "object", "properties": {}},
        ),
        types.Tool(
            name="get_document",
            description=(
                "Read one architecture memory document as structured JSON. "
                "Project kinds: context, capabilities, constraints, decisions, tech_debt, "
                "roadmap, risks, politics, glossary. Organization kinds: principles, "
                "standards, glossary, governance."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "kind": {"type": "string", "enum": _KIND_NAMES},
                    **scope_properties,
                },
                "required": ["kind"],
            },
        ),
        types.Tool(
            name="save_document",
            description=(
                "Replace an architecture memory document with the given structured data. "
                "Pass the full record as returned by get_document, edited. The file is "
                "regenerated as canonical markdown; entities without an id get a new one."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "kind": {"type": "string", "enum": _KIND_NAMES},
                    "data": {"type": "object", "description": "The full document record"},
                    **scope_properties,
                },
                "required": ["kind", "data"],
            },
        ),
        types.Tool(
            name="create_project",
            description="Create a new project with an empty document of every kind.",
            inputSchema={
                "type": "object",
                "properties": {"name": {"type": "string"}},
                "required": ["name"],
            },
        ),
        types.Tool(
            name="save_note",
            description=(
                "Record a decision or insight from the conversation as a timestamped note. "
                "Saved notes are searched by get_architecture_context for later questions."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "category": {"type": "string", "enum": list(NOTE_DIRS)},
                    "content": {"type": "string", "description": "Markdown text of the note"},
                },
                "required": ["category", "content"],
            },
        ),
        types.Tool(
            name="get_architecture_context",
            description=(
                "Get the organization and project architecture context: principles, "
                "standards, decisions, risks, constraints, plus saved notes relevant to "
                "the question. Call this at the START of any architecture discussion."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "query": {
                        "type": "string",
                        "description": "The question being discussed, used to pick relevant notes",
                    },
                    "project": scope_properties["project"],
                },
            },
        ),
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict) -> list[types.TextContent]:
    start = time.time()
    result: list[types.TextContent] = []
    error: str | None = None
    try:
        result = _dispatch_tool(name, arguments)
        return result
    except FileNotFoundError as e:
        error = str(e)
        result = [types.TextContent(type="text", text=f"Setup required: {e}")]
        return result
    except Exception as e:
        error = str(e)
        result = [types.TextContent(type="text", text=f"Error: {e}")]
        return result
    finally:
        duration_ms = int((time.time() - start) * 1000)
        result_text = result[0].text if result else ""
        log_tool_call(name, arguments, result_text, error, duration_ms)


def _dispatch_tool(name: str, arguments: dict) -> list[types.TextContent]:
    """Route a tool call to the appropriate handler."""
    if name == "list_projects":
        return _handle_list_projects()
    elif name == "get_document":
        return _handle_get_document(arguments["kind"], _project_arg(arguments))
    elif name == "save_document":
        return _handle_save_document(arguments["kind"], arguments["data"], _project_arg(arguments))
    elif name == "create_project":
        return _handle_create_project(arguments["name"])
    elif name == "save_note":
        return _handle_save_note(arguments["category"], arguments["content"])
    elif name == "get_architecture_context":
        return _handle_context(arguments.get("query", ""), arguments.get("project"))
    else:
        return [types.TextContent(type="text", text=f"Unknown tool: {name}")]


def _text(payload: dict) -> list[types.TextContent]:
    return [types.TextContent(type="text", text=json.dumps(payload, indent=2, ensure_ascii=False))]


def _handle_list_projects() -> list[types.TextContent]:
    store = _get_store()
    return _text({"projects": store.list_projects(), "active": Config.load().project})


def _handle_get_document(kind: str, project: str | None) -> list[types.TextContent]:
    store = _get_store()
    document = store.load_document(kind, project)
    if document is None:
        location = f"project '{project}'" if project else "organization"
        return [types.TextContent(type="text", text=f"No {kind} document in {location}.")]
    return _text({"kind": kind, "project": project, "data": to_dict(document)})


def _handle_save_document(kind: str, data: dict, project: str | None) -> list[types.TextContent]:
    store = _get_store()
    result = store.save_document(kind, data, project)
    return _text({"success": result.success, "message": result.message})


def _handle_create_project(name: str) -> list[types.TextContent]:
    store = _get_store()
    if name in store.list_projects():
        return _text({"success": False, "message": f"Project '{name}' already exists"})
    result = store.create_project(name)
    return _text({"success": result.success, "message": result.message})


def _handle_save_note(category: str, content: str) -> list[types.TextContent]:
    store = _get_store()
    if category not in NOTE_DIRS:
        return _text({"success": False, "message": f"Unknown note category: {category}"})
    if not content.strip():
        return _text({"success": False, "message": "Note content is empty"})
    path = store.save_note(category, content)
    return _text({"success": True, "path": path.relative_to(store.root).as_posix()})


def _handle_context(
query: str, project: str | None) -> list[types.TextContent]:
    config = Config.load()
    store = MemoryStore.from_config(config)
    context = build_context(store, project or config.project, query)
    return [types.TextContent(type="text", text=context)]


async def main() -> None:
    async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


if __name__ == "__main__":
    import asyncio
    asyncio.run(main())
