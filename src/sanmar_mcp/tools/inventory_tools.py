"""
Inventory tools for SanMar MCP server
"""

from typing import Any, Dict, Mapping, Optional

from fastmcp import Context

from ..config import Credentials
from .envelopes import promostandards, sanmar_positional
from .gateway import dispatch, tool_options
from .outcomes import promostandards_error, sanmar_error_flag
from .registry import ALWAYS, FieldSpec, OperationDescriptor

WAREHOUSES = ("1", "2", "3", "4", "5", "6", "7", "12", "31")

# Filter key -> name of the repeated child element PromoStandards expects
FILTER_ARRAYS = {
    "partIdArray": "partId",
    "LabelSizeArray": "labelSize",
    "PartColorArray": "partColor",
}

FILTER_SCHEMA = {
    "properties": {
        "partIdArray": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Array of part IDs (up to 200)",
        },
        "LabelSizeArray": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Array of label sizes",
        },
        "PartColorArray": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Array of part colors",
        },
    }
}

inventory_error = sanmar_error_flag("errorOccurred")

STYLE = FieldSpec("style", requirement=ALWAYS, description="SanMar style number (e.g., PC61)")
COLOR = FieldSpec("color", description="SanMar catalog color name (optional)")
SIZE = FieldSpec("size", description="Product size (e.g., S, XL) (optional)")


def inventory_filter(filter_arguments: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Build the PromoStandards Filter element from the caller's filter object.

    Plain lists are wrapped in their array element (``["a", "b"]`` under
    ``partIdArray`` becomes ``{"partId": ["a", "b"]}``). Anything already
    shaped as a mapping, and any key not listed in FILTER_ARRAYS, is sent as given.
    """
    shaped = {}
    for key, value in filter_arguments.items():
        child = FILTER_ARRAYS.get(key)
        if child and isinstance(value, (list, tuple)):
            shaped[key] = {child: list(value)}
        else:
            shaped[key] = value
    return shaped


def _ps_inventory_request(arguments: Mapping[str, Any], credentials: Credentials) -> Dict[str, Any]:
    envelope = promostandards("2.0.0", fields=("productId",))(arguments, credentials)
    if arguments.get("filter"):
        envelope["Filter"] = inventory_filter(arguments["filter"])
    return envelope


OPERATIONS = [
    OperationDescriptor(
        name="get_sanmar_inventory",
        description=(
            "Retrieves SanMar inventory levels by style, optionally filtered by color and size."
        ),
        endpoint="inventory",
        procedure="getInventoryQtyForStyleColorSize",
        argument_schema=(STYLE, COLOR, SIZE),
        shape=sanmar_positional(("style", "color", "size")),
        extract_domain_error=inventory_error,
    ),
    OperationDescriptor(
        name="get_sanmar_inventory_by_warehouse",
        description=(
            "Retrieves SanMar inventory levels for a specific warehouse by style, "
            "optionally filtered by color and size."
        ),
        endpoint="inventory",
        procedure="getInventoryQtyForStyleColorSizeByWhse",
        argument_schema=(
            STYLE,
            COLOR,
            SIZE,
            FieldSpec("warehouse", requirement=ALWAYS, choices=WAREHOUSES,
                      description="Warehouse number"),
        ),
        shape=sanmar_positional(("style", "color", "size", "warehouse")),
        extract_domain_error=inventory_error,
    ),
    OperationDescriptor(
        name="get_ps_inventory_levels",
        description="Retrieves inventory levels using PromoStandards Inventory Service.",
        endpoint="ps_inventory",
        procedure="getInventoryLevels",
        argument_schema=(
            FieldSpec("productId", requirement=ALWAYS, description="SanMar style number (e.g., PC61)"),
            FieldSpec("filter", kind="object", description="Filter options", schema=FILTER_SCHEMA),
        ),
        shape=_ps_inventory_request,
        extract_domain_error=promostandards_error,
    ),
]


def register_tools(mcp):
    """Register inventory-related tools with the FastMCP server"""

    @mcp.tool(**tool_options("get_sanmar_inventory"))
    async def get_sanmar_inventory(
        style: str,
        color: Optional[str] = None,
        size: Optional[str] = None,
        ctx: Context = None,
    ) -> Any:
        """
        Get SanMar inventory quantities per warehouse for a style.

        Args:
            style: SanMar style number (e.g., PC61)
            color: Catalog color name to narrow the results
            size: Size to narrow the results (e.g., S, XL)
        """
        return await dispatch(
            "get_sanmar_inventory", {"style": style, "color": color, "size": size}, ctx
        )

    @mcp.tool(**tool_options("get_sanmar_inventory_by_warehouse"))
    async def get_sanmar_inventory_by_warehouse(
        style: str,
        warehouse: str,
        color: Optional[str] = None,
        size: Optional[str] = None,
        ctx: Context = None,
    ) -> Any:
        return await dispatch(
            "get_sanmar_inventory_by_warehouse",
            {"style": style, "color": color, "size": size, "warehouse": warehouse},
            ctx,
        )

    @mcp.tool(**tool_options("get_ps_inventory_levels"))
    async def get_ps_inventory_levels(
        productId: str,
        filter: Optional[Dict[str, Any]] = None,
        ctx: Context = None,
    ) -> Any:
        """
        Get PromoStandards inventory levels for a product.

        Args:
            productId: SanMar style number (e.g., PC61)
            filter: Optional partIdArray, LabelSizeArray and PartColorArray lists
        """
        return await dispatch(
            "get_ps_inventory_levels", {"productId": productId, "filter": filter}, ctx
        )
