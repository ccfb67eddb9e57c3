"""
Command-line access to the SanMar tools without an MCP client.

    sanmar-api product PC61 White XL
    sanmar-api inventory PC61
    sanmar-api pricing PC61 White
    sanmar-api tools
    sanmar-api call get_ps_order_status '{"queryType": "poSearch", "referenceNumber": "PO123"}'
"""

import argparse
import asyncio
import json
import sys
from typing import Any, Dict, List, Optional

from .config import ConfigurationError, configure_logging, load_credentials
from .tools.gateway import call_tool, render_outcome
from .tools.outcomes import to_json
from .tools.shared import get_registry

# Shortcut commands -> tool taking style/color/size
STYLE_COMMANDS = {
    "product": "get_sanmar_product_info",
    "inventory": "get_sanmar_inventory",
    "pricing": "get_sanmar_pricing",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sanmar-api", description="SanMar web services CLI")
    commands = parser.add_subparsers(dest="command", required=True)

    for command, tool_name in STYLE_COMMANDS.items():
        sub = commands.add_parser(command, help=f"Run {tool_name}")
        sub.add_argument("style", help="SanMar style number (e.g., PC61)")
        sub.add_argument("color", nargs="?", help="Catalog color name")
        sub.add_argument("size", nargs="?", help="Size (e.g., S, XL)")

    commands.add_parser("tools", help="List every available tool")

    call = commands.add_parser("call", help="Run any tool with JSON arguments")
    call.add_argument("tool", help="Tool name, see 'sanmar-api tools'")
    call.add_argument("arguments", nargs="?", default="{}",
                      help='JSON object of arguments, e.g. {"style": "PC61"}')
    return parser


def _fail(message: str):
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _tool_request(args: argparse.Namespace):
    if args.command in STYLE_COMMANDS:
        arguments = {"style": args.style, "color": args.color, "size": args.size}
        return STYLE_COMMANDS[args.command], {k: v for k, v in arguments.items() if v is not None}

    try:
        arguments = json.loads(args.arguments)
    except json.JSONDecodeError as e:
        _fail(f"arguments are not valid JSON: {e}")
    if not isinstance(arguments, dict):
        _fail("arguments must be a JSON object")
    return args.tool, arguments


def list_tools() -> List[Dict[str, Any]]:
    return [
        {"name": descriptor.name, "description": descriptor.description}
        for descriptor in get_registry()
    ]


def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)
    configure_logging()

    if args.command == "tools":
        print(to_json(list_tools()))
        return

    tool_name, arguments = _tool_request(args)
    try:
        credentials = load_credentials()
    except ConfigurationError as e:
        _fail(str(e))

    outcome = asyncio.run(call_tool(tool_name, arguments, credentials=credentials))
    rendered = render_outcome(outcome)
    text = rendered["content"][0]["text"]
    if rendered.get("isError"):
        _fail(f"{text} (error code {rendered['errorCode']})")
    print(text)


if __name__ == "__main__":
    main()
