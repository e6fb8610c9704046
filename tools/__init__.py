# =============================================================================
# tools/__init__.py
# =============================================================================
# This package is the translation layer between MCP and core/.
#
#   adapters.py    the tool tables (name, description, contract, handler,
#                  extraction policy) for each adapter process
#   mcp_server.py  builds a ToolRegistry for an adapter and exposes it
#                  through FastMCP over stdio
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT validate arguments (ToolRegistry does)
#   - They do NOT contain prompts or business logic (core/ does)
# =============================================================================
