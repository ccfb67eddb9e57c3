"""
FastMCP server exposing the SanMar tool catalog over stdio
"""

import logging
import sys

from fastmcp import FastMCP

from .config import ConfigurationError, configure_logging, load_credentials
from .tools import (
    inventory_tools,
    invoice_tools,
    order_tools,
    pricing_tools,
    product_tools,
    purchase_order_tools,
)
from .tools.shared import get_registry

logger = logging.getLogger(__name__)

TOOL_MODULES = (
    product_tools,
    inventory_tools,
    pricing_tools,
    invoice_tools,
    order_tools,
    purchase_order_tools,
)


def create_server() -> FastMCP:
    """Create the FastMCP server with every SanMar tool registered."""
    mcp = FastMCP(
        name="SanMar MCP Server",
        instructions=(
            "Tools for SanMar's B2B web services: product data, inventory, pricing, "
            "invoices, order status, shipments and purchase orders. Tools prefixed "
            "get_sanmar_/submit_sanmar_ use the SanMar standard services; tools "
            "prefixed get_ps_/send_ps_ use the PromoStandards services."
        ),
    )
    for module in TOOL_MODULES:
        module.register_tools(mcp)
    logger.info("Registered %d SanMar tools", len(get_registry()))
    return mcp


def main():
    configure_logging()
    try:
        load_credentials()
    except ConfigurationError as e:
        logger.error("Cannot start SanMar MCP server: %s", e)
        sys.exit(1)

    mcp = create_server()
    logger.info("Starting SanMar MCP server on stdio")
    mcp.run()


if __name__ == "__main__":
    main()
