"""Quickstart: run apollo-mcp as a standalone MCP server.

1. pip install -e .
2. export APOLLO_API_KEY=...
3. python examples/standalone_quickstart.py

Serves streamable HTTP on port 8000 by default. Point any MCP client at
http://localhost:8000/mcp, or for desktop clients use stdio:

{
    "mcpServers": {
        "apollo": {
            "command": "apollo-mcp",
            "args": ["--transport", "stdio"]
        }
    }
}

Plain JSON-RPC (no SDK transport) is available too:

    apollo-mcp --transport jsonrpc --port 8000
"""

from apollo_mcp.server import main

if __name__ == "__main__":
    main()
