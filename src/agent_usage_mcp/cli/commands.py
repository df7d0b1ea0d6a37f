"""Command-line entry points: run the stdio server, list tools, or call one tool."""
from __future__ import annotations
import argparse
import asyncio
import json
import sys

from dotenv import load_dotenv

from agent_usage_mcp.errors import error_message


def run(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    # Load environment variables first
    load_dotenv()

    from agent_usage_mcp.config import Settings
    from agent_usage_mcp.mcp.server import configure_logging, serve
    from agent_usage_mcp.mcp.tools import execute_tool, list_tools

    parser = argparse.ArgumentParser(
        prog="agent-usage-mcp",
        description="MCP stdio server reporting Z.AI usage and Antigravity quota"
    )
    sub = parser.add_subparsers(dest="cmd")

    sub.add_parser("serve", help="Run the MCP server on stdio (default)")
    sub.add_parser("tools", help="Print the tool descriptors as JSON")

    call = sub.add_parser("call", help="Run one tool and print its result")
    call.add_argument("name", help="Tool name, e.g. get_usage")
    call.add_argument("--args", default="{}",
                      help='Tool arguments as a JSON object (default: "{}")')

    args = parser.parse_args(argv)
    configure_logging(Settings().log_level)

    if args.cmd in (None, "serve"):
        try:
            asyncio.run(serve())
        except KeyboardInterrupt:
            pass

    elif args.cmd == "tools":
        print(json.dumps(list_tools(), indent=2))

    elif args.cmd == "call":
        try:
            arguments = json.loads(args.args)
        except (ValueError, RecursionError) as e:
            parser.error(f"--args is not valid JSON: {e}")
        if not isinstance(arguments, dict):
            parser.error("--args must be a JSON object")

        try:
            result = asyncio.run(execute_tool(args.name, arguments))
        except Exception as e:
            print(f"Error: {error_message(e)}", file=sys.stderr)
            sys.exit(1)
        print(json.dumps(result, indent=2))


if __name__ == "__main__":
    run()
