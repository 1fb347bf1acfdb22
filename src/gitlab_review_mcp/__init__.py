"""GitLab Review MCP Server.

Exposes merge request lookup and inline discussion posting as MCP tools.
"""

__version__ = "0.1.0"
