"""MCP tool catalogue and JSON-RPC 2.0 server."""