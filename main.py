# =============================================================================
# main.py  -  Entry point: run one adapter as an MCP stdio server
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py idea-generator
#   uv run python main.py script-to-video
#   uv run python main.py growth-optimizer
#
#   uv run python main.py growth-optimizer --list   (print tool descriptors)
#
# WHAT HAPPENS:
#   1. .env is loaded (GEMINI_API_KEY, ELEVENLABS_API_KEY, ...)
#   2. Logging is configured once: stderr + logs/content-creator*.log
#   3. The adapter's ToolRegistry is built and wrapped in a FastMCP server
#   4. The server speaks MCP on stdin/stdout until the client disconnects
#
# Credentials are NOT checked here.  A missing key only fails the tool
# calls that need it.
# =============================================================================

import argparse
import json
import sys

from dotenv import load_dotenv

load_dotenv()

from core.config import Settings
from core.tracing import configure_logging
from tools.adapters import ADAPTERS
from tools.mcp_server import build_registry, build_server


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Content creator MCP tool servers")
    parser.add_argument("adapter", choices=sorted(ADAPTERS), help="Which adapter to serve")
    parser.add_argument("--list", action="store_true", help="Print the tool descriptors as JSON and exit")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    settings = Settings()
    logger = configure_logging(settings)
    registry = build_registry(args.adapter, settings=settings, logger=logger)

    if args.list:
        print(json.dumps([d.to_dict() for d in registry.list_tools()], indent=2))
        return 0

    server = build_server(registry)
    logger.info(f"{registry.name} running on stdio", extra={"meta": {"tools": len(registry.list_tools())}})
    try:
        server.run()
    except Exception:
        logger.exception("Fatal error")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
