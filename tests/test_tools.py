import json

from agentcom.mcp.tools import ToolDef, all_tools


def test_tool_names_in_order():
    assert [tool.name for tool in all_tools()] == [
        "list_agents",
        "send_message",
        "broadcast",
        "create_task",
        "delegate_task",
        "list_tasks",
        "get_status",
    ]


def test_every_schema_is_closed_object():
    for tool in all_tools():
        assert tool.input_schema["type"] == "object"
        assert tool.input_schema["additionalProperties"] is False
        assert tool.description


def test_required_fields_are_declared_properties():
    for tool in all_tools():
        required = tool.input_schema.get("required", [])
        assert set(required) <= set(tool.input_schema["properties"])


def test_required_fields_pinned():
    required = {t.name: t.input_schema.get("required", []) for t in all_tools()}
    assert required["send_message"] == ["from", "to"]
    assert required["broadcast"] == ["from"]
    assert required["create_task"] == ["title"]
    assert required["delegate_task"] == ["task_id", "to"]
    assert required["list_agents"] == []


def test_blocked_by_is_string_array():
    create = next(t for t in all_tools() if t.name == "create_task")
    assert create.input_schema["properties"]["blocked_by"] == {
        "type": "array",
        "items": {"type": "string"},
    }


def test_to_dict_uses_wire_keys_and_round_trips():
    tool = all_tools()[0]
    doc = json.loads(json.dumps(tool.to_dict()))
    assert set(doc) == {"name", "description", "inputSchema"}
    rebuilt = ToolDef(doc["name"], doc["description"], doc["inputSchema"])
    assert rebuilt == tool


def test_all_tools_returns_fresh_copies():
    first = all_tools()
    first[0].input_schema["properties"].clear()
    assert all_tools()[0].input_schema["properties"]