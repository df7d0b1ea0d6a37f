"""Agent usage MCP server.

Reports Z.AI usage and Antigravity quota to an agent host over stdio.
"""

__version__ = "2.0.0"
