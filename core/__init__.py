# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains ALL the logic behind the content creator tools:
# argument contracts, the registry/dispatcher/envelope skeleton, JSON
# extraction, trace logging, provider clients and the per-tool handlers.
#
# ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP or MCP types.  A handler can be
#   driven from a test, a script or a REPL through ToolRegistry.call().
#   The MCP transport lives in tools/.
# =============================================================================
