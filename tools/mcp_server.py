# =============================================================================
# tools/mcp_server.py  -  FastMCP wiring for one adapter's ToolRegistry
# =============================================================================
#
# HOW IT WORKS (the flow):
#   1. A client (an agent, Claude Desktop, an IDE) starts this process and
#      speaks MCP over stdin/stdout.
#   2. tools/list  -> FastMCP returns one entry per ToolSpec, with the
#      inputSchema generated from the tool's pydantic contract.
#   3. tools/call  -> RegistryTool.run() hands the raw arguments to
#      ToolRegistry.call(), which validates, dispatches and builds the
#      envelope.
#   4. An error envelope is raised as ToolError, which FastMCP reports with
#      isError=true and the envelope's JSON ({"error", "traceId"}) as text.
#   5. A tools/call for a name the registry does not hold is intercepted by
#      UnknownToolEnvelope before FastMCP's own lookup and answered by
#      ToolRegistry.call() like any other failed call.
#
# FastMCP does no argument validation of its own for these tools; the
# registry is the single validator.
# =============================================================================

import logging
from typing import Any, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.server.middleware import Middleware, MiddlewareContext
from fastmcp.tools import Tool
from fastmcp.tools.tool import ToolResult
from mcp.types import TextContent
from pydantic import Field

from core.config import Settings
from core.contracts import ToolRegistry
from core.providers import Providers
from core.tracing import LOGGER_NAME
from tools.adapters import ADAPTERS


class RegistryTool(Tool):
    """An MCP tool whose schema and behaviour come from a ToolRegistry row."""

    registry: Any = Field(exclude=True)

    async def run(self, arguments: dict[str, Any]) -> ToolResult:
        envelope = await self.registry.call(self.name, arguments)
        if envelope.is_error:
            raise ToolError(envelope.text)
        return ToolResult(content=[TextContent(type="text", text=envelope.text)])


class UnknownToolEnvelope(Middleware):
    """Route calls to unregistered tool names through the registry."""

    def __init__(self, registry: ToolRegistry):
        self.registry = registry

    async def on_call_tool(self, context: MiddlewareContext, call_next) -> ToolResult:
        name = context.message.name
        if name in self.registry:
            return await call_next(context)
        envelope = await self.registry.call(name, context.message.arguments)
        raise ToolError(envelope.text)


def build_registry(
    adapter: str,
    settings: Optional[Settings] = None,
    providers: Optional[Providers] = None,
    logger: Optional[logging.Logger] = None,
) -> ToolRegistry:
    """Assemble the registry for ``adapter`` (idea-generator, script-to-video, growth-optimizer)."""
    try:
        server_name, specs = ADAPTERS[adapter]
    except KeyError:
        raise ValueError(f"unknown adapter {adapter!r}; choose from {', '.join(ADAPTERS)}") from None

    settings = settings or Settings()
    return ToolRegistry(
        name=server_name,
        specs=specs,
        settings=settings,
        providers=providers or Providers.from_settings(settings),
        logger=logger or logging.getLogger(LOGGER_NAME),
    )


def build_server(registry: ToolRegistry) -> FastMCP:
    """A FastMCP server exposing every tool in ``registry``, in table order."""
    mcp = FastMCP(registry.name)
    mcp.add_middleware(UnknownToolEnvelope(registry))
    for descriptor in registry.list_tools():
        exposed = descriptor.to_dict()
        mcp.add_tool(RegistryTool(
            name=exposed["name"],
            description=exposed["description"],
            parameters=exposed["inputSchema"],
            registry=registry,
        ))
    return mcp
