# agentcom

Building blocks for letting several local agents work together: a task
state machine, message envelopes and routing, newline-delimited JSON over
Unix domain sockets, an onboarding flow, and a JSON-RPC 2.0 server for the
Model Context Protocol (MCP). Only the standard library is used.

## Installing

```
pip install .
```

## Tasks (`agentcom.task`)

`agentcom.task.model` holds the `Task` dataclass, the `TaskStatus` enum and
the state machine:

```python
from agentcom.task.model import validate_transition, is_terminal, InvalidTransitionError

validate_transition("pending", "assigned")      # allowed, returns None
is_terminal("completed")                        # True

try:
    validate_transition("completed", "pending")
except InvalidTransitionError as exc:
    print(exc)   # invalid status transition: completed -> pending
```

Allowed transitions:

| from        | to                                         |
|-------------|--------------------------------------------|
| pending     | assigned, in_progress, cancelled           |
| assigned    | in_progress, blocked, pending, cancelled   |
| in_progress | completed, failed, blocked                 |
| blocked     | in_progress, pending, cancelled            |

`completed`, `failed` and `cancelled` are terminal. Unknown statuses are
never valid.

`agentcom.task.manager` provides:

- `TaskStore` – a thread-safe in-memory task table. Lookups of unknown ids
  raise `KeyError`.
- `TaskManager(store)` – `create(title, description, priority, assigned_to,
  created_by, blocked_by)` makes a `pending` task with an id starting with
  `tsk_` (priority defaults to `medium`); `delegate(task_id,
  target_agent_id)` assigns it; `update_status(task_id, new_status, result)`
  changes status. Both check the transition first.
- `TaskQuery(store)` – `list_all()`, `list_by_status(status)`,
  `list_by_assignee(agent_id)`, `find_by_id(task_id)`.

```python
from agentcom.task.manager import TaskStore, TaskManager, TaskQuery

store = TaskStore()
task = TaskManager(store).create("ship it", created_by="agt_creator")
TaskManager(store).delegate(task.id, "agt_worker")
TaskQuery(store).find_by_id(task.id).status   # "assigned"
```

## Messages (`agentcom.message`)

`agentcom.message.envelope`: `new_envelope(sender, recipient, msg_type,
topic, payload)` builds an `Envelope` with an id starting with `msg_` and a
UTC timestamp; `Envelope.marshal()` returns compact JSON bytes;
`unmarshal_envelope(data)` parses them back and raises
`EnvelopeDecodeError` on bad input. The payload is kept as raw JSON text.

```python
from agentcom.message.envelope import new_envelope, unmarshal_envelope

env = new_envelope("sender", "receiver", "notification", "sync", b'{"ok":true}')
same = unmarshal_envelope(env.marshal())
same.payload   # '{"ok":true}'
```

`agentcom.message.inbox`: `StoredMessage` (with `to_dict()`), `InboxStore`,
a thread-safe in-memory message table, and `Inbox(store)` with
`list_messages(agent_id)`, `list_unread(agent_id)`, `mark_read(message_id)`
and `list_by_correlation(correlation_id)`.

`agentcom.message.router`: `Router(store, finder, transport, project)`.

- `send(sender, to_name_or_id, msg_type, topic, payload)` resolves the target
  by name within the project, then by id. If the target has no socket path,
  or the transport's `send(socket_path, data)` raises, the message is stored
  undelivered; otherwise it is stored with `delivered_at` set. Returns the
  `Envelope`; raises `RoutingError` when the target cannot be resolved or
  the message cannot be stored.
- `broadcast(sender, topic, payload)` sends a `broadcast` message to every
  alive agent in the project except the sender (matched by id or name),
  skipping recipients that fail.

The store only needs `insert_message` (`InboxStore` fits), the transport
only `send` (`UDSClient` fits). The finder is an `AgentFinder` you supply,
with `find_by_name(name, project)`, `find_by_id(agent_id)` and
`list_alive(project)` returning `Agent` records.

## Transport (`agentcom.transport`)

`agentcom.transport.uds`:

```python
from agentcom.transport.uds import UDSServer, UDSClient

with UDSServer("/tmp/agent.sock", handler=lambda payload: print(payload)):
    UDSClient().send("/tmp/agent.sock", b'{"type":"ping"}')
```

`UDSServer.start()` removes a leftover socket file nobody is listening on,
and raises `TransportError` if the socket is live. Each connection is read as
a stream of JSON values, each handed to the handler as bytes. `stop()` closes
the listener and removes the socket file. `UDSClient.send(socket_path, data,
cancelled)` writes the payload plus a newline, retries once, and raises
`TransportError` after two failures, or `SendCancelledError` if the optional
`threading.Event` is set.

`agentcom.transport.listener.Listener`: `on_message(callback)` registers a
callback; `handle(data)` calls every registered callback.

`agentcom.transport.fallback.Poller(store, agent_id, handler, interval=5.0)`:
`poll_once()` passes each unread message, as JSON bytes, to the handler and
marks it delivered, returning the count; `start()` and `stop()` run this in
a background thread every `interval` seconds. `InboxStore` works as the
store.

## Onboarding (`agentcom.onboard`)

- `agentcom.onboard.result`: `OnboardResult.validate()` raises
  `ValidationError` unless the home directory is set and absolute, at least
  one agent is selected when instructions are written, and the result is
  confirmed. Also `ApplyReport` (with `to_dict()`), `TemplateDefinition` and
  `TemplateRole`.
- `agentcom.onboard.wizard`: `Wizard(prompter, applier).run(defaults)` asks
  the prompter, validates, and returns the applier's `ApplyReport`. Failures
  are raised as `WizardError`; a user abort propagates as `AbortedError`.
- `agentcom.onboard.console.ConsolePrompter(accessible, input, output)` asks
  for the home directory, project name, template (`none`, `company`,
  `oh-my-opencode`), whether to write AGENTS.md, and a final confirmation,
  line by line. Empty answers take the defaults; end of input or Ctrl-C
  raises `AbortedError`.

## MCP server (`agentcom.mcp`)

`agentcom.mcp.tools.all_tools()` returns the advertised `ToolDef`s:
`list_agents`, `send_message`, `broadcast`, `create_task`, `delegate_task`,
`list_tasks`, `get_status`.

`agentcom.mcp.server.McpServer(project)` answers `initialize`, the
`notifications/initialized` notification, `tools/list` and `tools/call`
(the last two only after `initialize`). `route(request)` takes a request
dict and returns the response dict, or `None` for notifications.
`run(reader, writer)` reads JSON requests from `reader` until it ends and
writes one JSON response per line; malformed input raises `ValueError`.

```python
import io
from agentcom.mcp.server import McpServer

server = McpServer(project="demo")
server.register_tool("echo", lambda arguments: {"got": arguments})
requests = io.StringIO(
    '{"jsonrpc":"2.0","id":1,"method":"initialize"}\n'
    '{"jsonrpc":"2.0","id":2,"method":"tools/call",'
    '"params":{"name":"echo","arguments":{"x":1}}}\n'
)
out = io.StringIO()
server.run(requests, out)
```

A handler receives the call's `arguments`; its return value is sent back as
JSON text content. If the handler raises, or the tool is unknown, the result
carries the message with `isError` set to true.

## What the package does not do

- There is no persistent storage: `TaskStore` and `InboxStore` keep
  everything in memory for the life of the process.
- There is no agent registry; `Router` needs an `AgentFinder` supplied by
  the caller.
- `McpServer` ships with no tool handlers. `tools/list` advertises the
  catalogue above, but each tool must be registered with `register_tool`
  before `tools/call` can run it.
- There is no `Applier` that writes onboarding results to disk, and no
  command-line program.

## Running the tests

```
pip install .[test]
pytest
```