"""apollo-mcp - Apollo sales-intelligence tools over the Model Context Protocol.

Company/people search and contact enrichment. JSON-RPC or streamable HTTP.
"""

__version__ = "1.0.0"

from apollo_mcp.config import ApolloMcpConfig  # noqa: E402
from apollo_mcp.embedded import register_tools  # noqa: E402
from apollo_mcp.tools import ToolGateway  # noqa: E402

__all__ = ["register_tools", "ApolloMcpConfig", "ToolGateway", "__version__"]
