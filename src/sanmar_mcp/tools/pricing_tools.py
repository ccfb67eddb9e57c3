"""
Pricing tools for SanMar MCP server
"""

from typing import Any, Optional

from fastmcp import Context

from .envelopes import promostandards, sanmar_standard
from .gateway import dispatch, tool_options
from .outcomes import list_response, promostandards_error, sanmar_error_flag
from .registry import ALWAYS, FieldSpec, OperationDescriptor

PRICE_TYPES = ("Net", "List", "Customer")
FOB_IDS = ("1", "2", "3", "4", "5", "6", "7", "12", "31")

PS_LOCALIZATION = {"localizationCountry": "US", "localizationLanguage": "EN"}

PRODUCT_ID = FieldSpec("productId", requirement=ALWAYS, description="SanMar style number (e.g., PC61)")

OPERATIONS = [
    OperationDescriptor(
        name="get_sanmar_pricing",
        description=(
            "Retrieves SanMar pricing information by style, optionally filtered by color and size."
        ),
        endpoint="pricing",
        procedure="getPricing",
        argument_schema=(
            FieldSpec("style", requirement=ALWAYS, description="SanMar style number (e.g., PC61)"),
            FieldSpec("color", description="SanMar catalog color name (optional)"),
            FieldSpec("size", description="Product size (e.g., S, XL) (optional)"),
        ),
        shape=sanmar_standard(("style", "color", "size")),
        extract_success=list_response,
        extract_domain_error=sanmar_error_flag("errorOccurred"),
    ),
    OperationDescriptor(
        name="get_ps_pricing_config",
        description=(
            "Retrieves pricing and configuration information using PromoStandards "
            "Pricing and Configuration Service."
        ),
        endpoint="ps_pricing_config",
        procedure="getConfigurationAndPricing",
        argument_schema=(
            PRODUCT_ID,
            FieldSpec("partId", requirement=ALWAYS, description="SanMar unique key"),
            FieldSpec("priceType", choices=PRICE_TYPES, default="Net",
                      description="Type of price to return"),
            FieldSpec("fobId", choices=FOB_IDS, default="1", description="FOB point ID"),
        ),
        shape=promostandards(
            "1.0.0",
            fields=("productId", "partId", "fobId", "priceType"),
            fixed=dict(PS_LOCALIZATION, currency="USD", configurationType="Blank"),
            defaults={"fobId": "1", "priceType": "Net"},
        ),
        extract_domain_error=promostandards_error,
    ),
    OperationDescriptor(
        name="get_ps_fob_points",
        description=(
            "Retrieves FOB points information using PromoStandards Pricing and "
            "Configuration Service."
        ),
        endpoint="ps_pricing_config",
        procedure="getFobPoints",
        argument_schema=(PRODUCT_ID,),
        shape=promostandards("1.0.0", fields=("productId",), fixed=PS_LOCALIZATION),
        extract_domain_error=promostandards_error,
    ),
]


def register_tools(mcp):
    """Register pricing-related tools with the FastMCP server"""

    @mcp.tool(**tool_options("get_sanmar_pricing"))
    async def get_sanmar_pricing(
        style: str,
        color: Optional[str] = None,
        size: Optional[str] = None,
        ctx: Context = None,
    ) -> Any:
        return await dispatch(
            "get_sanmar_pricing", {"style": style, "color": color, "size": size}, ctx
        )

    @mcp.tool(**tool_options("get_ps_pricing_config"))
    async def get_ps_pricing_config(
        productId: str,
        partId: str,
        priceType: Optional[str] = None,
        fobId: Optional[str] = None,
        ctx: Context = None,
    ) -> Any:
        """
        Get PromoStandards configuration and pricing for one part.

        Args:
            productId: SanMar style number (e.g., PC61)
            partId: SanMar unique key
            priceType: Net (default), List or Customer
            fobId: FOB point (warehouse) ID, defaults to "1"
        """
        return await dispatch(
            "get_ps_pricing_config",
            {"productId": productId, "partId": partId, "priceType": priceType, "fobId": fobId},
            ctx,
        )

    @mcp.tool(**tool_options("get_ps_fob_points"))
    async def get_ps_fob_points(productId: str, ctx: Context = None) -> Any:
        return await dispatch("get_ps_fob_points", {"productId": productId}, ctx)
