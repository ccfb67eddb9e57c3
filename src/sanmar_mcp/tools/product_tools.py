"""
Product information tools for SanMar MCP server

SanMar standard product info service plus the PromoStandards Product Data and
Media Content services.
"""

from typing import Any, Dict, Mapping, Optional

from fastmcp import Context

from ..config import Credentials
from .envelopes import promostandards, sanmar_auth_only, sanmar_standard
from .gateway import dispatch, tool_options
from .outcomes import list_response, promostandards_error, return_body, sanmar_error_flag
from .registry import ALWAYS, FieldSpec, OperationDescriptor

BRANDS = (
    "Allmade", "Alternative", "American Apparel", "Anvil", "Bella + Canvas",
    "Brooks Brothers", "Bulwark", "Carhartt", "Champion", "Comfort Colors",
    "CornerStone", "Cotopaxi", "District", "Eddie Bauer", "Fruit of the Loom",
    "Gildan", "Hanes", "Jerzees", "Mercer+Mettle", "New Era", "Next Level",
    "Nike", "OGIO", "Outdoor Research", "Port & Company", "Port Authority",
    "Rabbit Skins", "Red House", "Red Kap", "Russell Outdoors", "Spacecraft",
    "Sport-Tek", "tentree", "The North Face", "Tommy Bahama", "TravisMathew",
    "Volunteer Knitwear", "Wonderwink",
)

CATEGORIES = (
    "Activewear", "Accessories", "Bags", "Caps", "Infant & Toddler",
    "Juniors & Young Men", "Ladies", "Outerwear", "Polos/Knits",
    "Sweatshirts/Fleece", "Tall", "Workwear", "Woven Shirts", "Youth",
)

MEDIA_TYPES = ("Image", "Document")
MEDIA_CLASS_TYPES = ("1004", "1006", "1007", "1008", "2001")

# The product info service spells its flag this way
product_info_error = sanmar_error_flag("errorOccured")

STYLE = FieldSpec("style", requirement=ALWAYS, description="SanMar style number (e.g., PC61)")
COLOR = FieldSpec("color", description="SanMar catalog color name (optional)")
SIZE = FieldSpec("size", description="Product size (e.g., S, XL) (optional)")
PRODUCT_ID = FieldSpec("productId", requirement=ALWAYS, description="SanMar style number (e.g., PC61)")
PART_ID = FieldSpec("partId", description="SanMar unique key (optional)")


def _ps_product_request(arguments: Mapping[str, Any], credentials: Credentials) -> Dict[str, Any]:
    """getProduct envelope; a size filter travels as an ApparelSizeArray element"""
    envelope = promostandards(
        "2.0.0",
        fields=("productId", "partId", "colorName"),
        fixed={"localizationCountry": "us", "localizationLanguage": "en"},
    )(arguments, credentials)
    if "apparelSize" in arguments:
        size = arguments["apparelSize"]
        envelope["ApparelSizeArray"] = {
            "ApparelSize": {"apparelStyle": "Unisex", "labelSize": size, "customSize": size}
        }
    return envelope


OPERATIONS = [
    OperationDescriptor(
        name="get_sanmar_product_info",
        description=(
            "Retrieves SanMar product information (basic, image, price) by style, "
            "optionally filtered by color and size."
        ),
        endpoint="product_info",
        procedure="getProductInfoByStyleColorSize",
        argument_schema=(STYLE, COLOR, SIZE),
        shape=sanmar_standard(("style", "color", "size")),
        extract_success=list_response,
        extract_domain_error=product_info_error,
    ),
    OperationDescriptor(
        name="get_sanmar_product_by_brand",
        description="Retrieves SanMar product information for all products of a specific brand.",
        endpoint="product_info",
        procedure="getProductInfoByBrand",
        argument_schema=(
            FieldSpec("brand", requirement=ALWAYS, choices=BRANDS,
                      description="Brand name (e.g., Port Authority, Nike, OGIO, etc.)"),
        ),
        shape=sanmar_standard(("brand",), rename={"brand": "brandName"}),
        extract_success=list_response,
        extract_domain_error=product_info_error,
    ),
    OperationDescriptor(
        name="get_sanmar_product_by_category",
        description="Retrieves SanMar product information for all products in a specific category.",
        endpoint="product_info",
        procedure="getProductInfoByCategory",
        argument_schema=(
            FieldSpec("category", requirement=ALWAYS, choices=CATEGORIES, description="Product category"),
        ),
        shape=sanmar_standard(("category",)),
        extract_success=list_response,
        extract_domain_error=product_info_error,
    ),
    OperationDescriptor(
        name="get_sanmar_product_bulk_info",
        description=(
            "Generates a bulk CSV file with all SanMar product information in the "
            "SanMarPI folder on the FTP server."
        ),
        endpoint="product_info",
        procedure="getProductBulkInfo",
        argument_schema=(),
        shape=sanmar_auth_only,
        extract_success=return_body,
        extract_domain_error=product_info_error,
    ),
    OperationDescriptor(
        name="get_sanmar_product_delta_info",
        description=(
            "Generates an incremental CSV file with only changed product information "
            "since the last bulk or delta request."
        ),
        endpoint="product_info",
        procedure="getProductDeltaInfo",
        argument_schema=(),
        shape=sanmar_auth_only,
        extract_success=return_body,
        extract_domain_error=product_info_error,
    ),
    OperationDescriptor(
        name="get_ps_product",
        description="Retrieves detailed product information using PromoStandards Product Data Service.",
        endpoint="ps_product_data",
        procedure="getProduct",
        argument_schema=(
            PRODUCT_ID,
            PART_ID,
            FieldSpec("colorName", description="SanMar catalog color name (optional)"),
            FieldSpec("apparelSize", description="Product size (e.g., S, XL) (optional)"),
        ),
        shape=_ps_product_request,
        extract_domain_error=promostandards_error,
    ),
    OperationDescriptor(
        name="get_ps_product_closeout",
        description="Retrieves a list of discontinued products using PromoStandards Product Data Service.",
        endpoint="ps_product_data",
        procedure="getProductCloseOut",
        argument_schema=(),
        shape=promostandards("2.0.0"),
        extract_domain_error=promostandards_error,
    ),
    OperationDescriptor(
        name="get_ps_product_date_modified",
        description=(
            "Retrieves a list of products modified since a specific date using "
            "PromoStandards Product Data Service."
        ),
        endpoint="ps_product_data",
        procedure="getProductDateModified",
        argument_schema=(
            FieldSpec("changeTimeStamp", requirement=ALWAYS,
                      description="ISO 8601 timestamp (YYYY-MM-DDThh:mm:ss.sssZ)"),
        ),
        shape=promostandards("2.0.0", fields=("changeTimeStamp",)),
        extract_domain_error=promostandards_error,
    ),
    OperationDescriptor(
        name="get_ps_product_sellable",
        description="Retrieves a list of sellable products using PromoStandards Product Data Service.",
        endpoint="ps_product_data",
        procedure="getProductSellable",
        argument_schema=(
            PRODUCT_ID,
            FieldSpec("isSellable", kind="boolean", requirement=ALWAYS,
                      description="Whether the product is sellable"),
        ),
        shape=promostandards("2.0.0", fields=("productId", "isSellable")),
        extract_domain_error=promostandards_error,
    ),
    OperationDescriptor(
        name="get_ps_media_content",
        description=(
            "Retrieves media content (images, documents) for a product using "
            "PromoStandards Media Content Service."
        ),
        endpoint="ps_media_content",
        procedure="getMediaContent",
        argument_schema=(
            PRODUCT_ID,
            PART_ID,
            FieldSpec("mediaType", choices=MEDIA_TYPES, default="Image",
                      description="Type of media to return"),
            FieldSpec("classType", choices=MEDIA_CLASS_TYPES, description="Class type of media"),
        ),
        shape=promostandards(
            "1.1.0",
            fields=("mediaType", "productId", "partId", "classType"),
            fixed={"cultureName": ""},
            defaults={"mediaType": "Image"},
        ),
        extract_domain_error=promostandards_error,
    ),
]


def register_tools(mcp):
    """Register product-related tools with the FastMCP server"""

    @mcp.tool(**tool_options("get_sanmar_product_info"))
    async def get_sanmar_product_info(
        style: str,
        color: Optional[str] = None,
        size: Optional[str] = None,
        ctx: Context = None,
    ) -> Any:
        """
        Get SanMar product information for a style.

        Args:
            style: SanMar style number (e.g., PC61)
            color: Catalog color name to narrow the results
            size: Size to narrow the results (e.g., S, XL)

        Returns:
            The product info list response
        """
        return await dispatch(
            "get_sanmar_product_info", {"style": style, "color": color, "size": size}, ctx
        )

    @mcp.tool(**tool_options("get_sanmar_product_by_brand"))
    async def get_sanmar_product_by_brand(brand: str, ctx: Context = None) -> Any:
        return await dispatch("get_sanmar_product_by_brand", {"brand": brand}, ctx)

    @mcp.tool(**tool_options("get_sanmar_product_by_category"))
    async def get_sanmar_product_by_category(category: str, ctx: Context = None) -> Any:
        return await dispatch("get_sanmar_product_by_category", {"category": category}, ctx)

    @mcp.tool(**tool_options("get_sanmar_product_bulk_info"))
    async def get_sanmar_product_bulk_info(ctx: Context = None) -> Any:
        """Ask SanMar to generate the full product CSV on their FTP server."""
        return await dispatch("get_sanmar_product_bulk_info", {}, ctx)

    @mcp.tool(**tool_options("get_sanmar_product_delta_info"))
    async def get_sanmar_product_delta_info(ctx: Context = None) -> Any:
        """Ask SanMar to generate the changed-products CSV on their FTP server."""
        return await dispatch("get_sanmar_product_delta_info", {}, ctx)

    @mcp.tool(**tool_options("get_ps_product"))
    async def get_ps_product(
        productId: str,
        partId: Optional[str] = None,
        colorName: Optional[str] = None,
        apparelSize: Optional[str] = None,
        ctx: Context = None,
    ) -> Any:
        return await dispatch(
            "get_ps_product",
            {
                "productId": productId,
                "partId": partId,
                "colorName": colorName,
                "apparelSize": apparelSize,
            },
            ctx,
        )

    @mcp.tool(**tool_options("get_ps_product_closeout"))
    async def get_ps_product_closeout(ctx: Context = None) -> Any:
        return await dispatch("get_ps_product_closeout", {}, ctx)

    @mcp.tool(**tool_options("get_ps_product_date_modified"))
    async def get_ps_product_date_modified(changeTimeStamp: str, ctx: Context = None) -> Any:
        return await dispatch(
            "get_ps_product_date_modified", {"changeTimeStamp": changeTimeStamp}, ctx
        )

    @mcp.tool(**tool_options("get_ps_product_sellable"))
    async def get_ps_product_sellable(productId: str, isSellable: bool, ctx: Context = None) -> Any:
        return await dispatch(
            "get_ps_product_sellable", {"productId": productId, "isSellable": isSellable}, ctx
        )

    @mcp.tool(**tool_options("get_ps_media_content"))
    async def get_ps_media_content(
        productId: str,
        partId: Optional[str] = None,
        mediaType: Optional[str] = None,
        classType: Optional[str] = None,
        ctx: Context = None,
    ) -> Any:
        """
        Get product images or documents.

        Args:
            productId: SanMar style number (e.g., PC61)
            partId: SanMar unique key
            mediaType: Image (default) or Document
            classType: Media class (1004, 1006, 1007, 1008 or 2001)
        """
        return await dispatch(
            "get_ps_media_content",
            {
                "productId": productId,
                "partId": partId,
                "mediaType": mediaType,
                "classType": classType,
            },
            ctx,
        )
