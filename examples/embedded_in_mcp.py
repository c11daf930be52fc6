"""Embed the Apollo tools into an existing MCP server.

Your CRM tools and the Apollo prospecting tools share the same server.
Requires APOLLO_API_KEY in the environment (or a .env file).

Usage:
    python examples/embedded_in_mcp.py
"""

from mcp.server.fastmcp import FastMCP

from apollo_mcp import register_tools

mcp = FastMCP(
    "Sales Desk",
    instructions="CRM helpers plus Apollo company/people search.",
)

# Register the 4 Apollo tools (config is read from env on first call)
tools = register_tools(mcp)


@mcp.tool()
def log_call(contact: str, outcome: str) -> str:
    """Record the outcome of a sales call."""
    # Your CRM logic here...
    return f"Logged call with {contact}: {outcome}"


if __name__ == "__main__":
    mcp.run(transport="stdio")
