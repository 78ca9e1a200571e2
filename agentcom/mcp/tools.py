"""Definitions of the tools the MCP server advertises."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ToolDef:
    """An MCP tool and the JSON schema of its input."""

    name: str
    description: str
    input_schema: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the tool as it appears on the wire."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


def _string() -> dict[str, str]:
    return {"type": "string"}


def _schema(
    properties: dict[str, Any], required: list[str] | None = None
) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = list(required)
    schema["additionalProperties"] = False
    return schema


def all_tools() -> list[ToolDef]:
    """Return every tool the server supports, in a fixed order."""
    return [
        ToolDef(
            name="list_agents",
            description="List registered agents, optionally only alive agents.",
            input_schema=_schema(
                {"alive_only": {"type": "boolean"}, "project": _string()}
            ),
        ),
        ToolDef(
            name="send_message",
            description="Send a message to a target agent and persist it.",
            input_schema=_schema(
                {
                    "from": _string(),
                    "to": _string(),
                    "project": _string(),
                    "type": _string(),
                    "topic": _string(),
                    "payload": {"type": "object"},
                },
                ["from", "to"],
            ),
        ),
        ToolDef(
            name="broadcast",
            description="Broadcast a message to all alive agents.",
            input_schema=_schema(
                {
                    "from": _string(),
                    "project": _string(),
                    "topic": _string(),
                    "payload": {"type": "object"},
                },
                ["from"],
            ),
        ),
        ToolDef(
            name="create_task",
            description="Create a new task.",
            input_schema=_schema(
                {
                    "title": _string(),
                    "description": _string(),
                    "project": _string(),
                    "priority": _string(),
                    "assigned_to": _string(),
                    "created_by": _string(),
                    "blocked_by": {"type": "array", "items": _string()},
                },
                ["title"],
            ),
        ),
        ToolDef(
            name="delegate_task",
            description="Delegate an existing task to an agent.",
            input_schema=_schema(
                {"task_id": _string(), "to": _string(), "project": _string()},
                ["task_id", "to"],
            ),
        ),
        ToolDef(
            name="list_tasks",
            description="List tasks with optional status and assignee filters.",
            input_schema=_schema(
                {"status": _string(), "assignee": _string(), "project": _string()}
            ),
        ),
        ToolDef(
            name="get_status",
            description="Get system status summary counts.",
            input_schema=_schema({"project": _string()}),
        ),
    ]