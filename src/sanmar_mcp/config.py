"""
Process configuration for the SanMar MCP server.

Everything here is read once at startup from environment variables. Missing
credentials are fatal: the server and the CLI refuse to start rather than fail
on the first call.
"""

import logging
import os
import sys
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from typing import Dict, Mapping, Optional


DEFAULT_WS_BASE_URL = "https://ws.sanmar.com:8080"
DEFAULT_TIMEOUT_SECONDS = 60.0

LOG_FORMAT = "[%(asctime)s] %(levelname)s - %(name)s - %(message)s"

# WSDL locations relative to the web-service host, keyed by endpoint name
ENDPOINT_PATHS: Dict[str, str] = {
    # SanMar standard services
    "product_info": "/SanMarWebService/SanMarProductInfoServicePort?wsdl",
    "inventory": "/SanMarWebService/SanMarWebServicePort?wsdl",
    "pricing": "/SanMarWebService/SanMarPricingServicePort?wsdl",
    "invoice": "/SanMarWebService/InvoicePort?wsdl",
    "packing_slip": "/SanMarWebService/webservices/PackingSlipService?wsdl",
    "po_service": "/SanMarWebService/SanMarPOServicePort?wsdl",
    # PromoStandards services
    "ps_product_data": "/promostandards/ProductDataServiceV2.xml?wsdl",
    "ps_media_content": "/promostandards/MediaContentServiceBinding?wsdl",
    "ps_inventory": "/promostandards/InventoryServiceBindingV2final?WSDL",
    "ps_pricing_config": "/promostandards/PricingAndConfigurationServiceBinding?WSDL",
    "ps_order_shipment": "/promostandards/OrderShipmentNotificationServiceBinding?wsdl",
    "ps_order_status": "/promostandards/OrderStatusServiceBinding?wsdl",
    "ps_order_status_v2": "/promostandards/OrderStatusServiceBindingV2?wsdl",
    "ps_invoice": "/promostandards/InvoiceServiceBindingV1_0_0?WSDL",
    "ps_po_service": "/promostandards/POServiceBinding?wsdl",
}


class ConfigurationError(Exception):
    """Raised when required process configuration is missing or malformed."""


@dataclass(frozen=True)
class Credentials:
    """Static SanMar web-service credentials shared by every operation."""

    customer_number: str
    username: str
    password: str

    def sanmar_auth(self) -> Dict[str, str]:
        """Auth block used by the SanMar standard product, pricing and PO services"""
        return {
            "sanMarCustomerNumber": self.customer_number,
            "sanMarUserName": self.username,
            "sanMarUserPassword": self.password,
        }

    def invoice_auth(self) -> Dict[str, str]:
        """Flat auth fields used by the SanMar invoice service"""
        return {
            "CustomerNo": self.customer_number,
            "UserName": self.username,
            "Password": self.password,
        }

    def promostandards_auth(self) -> Dict[str, str]:
        """Auth pair used by every PromoStandards service"""
        return {"id": self.username, "password": self.password}

    def __repr__(self) -> str:
        return (
            f"Credentials(customer_number={self.customer_number!r}, "
            f"username={self.username!r}, password='***')"
        )


def load_credentials(environ: Optional[Mapping[str, str]] = None) -> Credentials:
    """
    Read SanMar credentials from the environment.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Populated Credentials

    Raises:
        ConfigurationError: If any of the three required values is missing
    """
    env = os.environ if environ is None else environ
    values = {
        "SANMAR_CUSTOMER_NUMBER": env.get("SANMAR_CUSTOMER_NUMBER", ""),
        "SANMAR_USERNAME": env.get("SANMAR_USERNAME", ""),
        "SANMAR_PASSWORD": env.get("SANMAR_PASSWORD", ""),
    }
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise ConfigurationError(
            "Missing SanMar credentials. Ensure SANMAR_CUSTOMER_NUMBER, "
            "SANMAR_USERNAME, and SANMAR_PASSWORD environment variables are set "
            f"(missing: {', '.join(missing)})"
        )
    return Credentials(
        customer_number=values["SANMAR_CUSTOMER_NUMBER"],
        username=values["SANMAR_USERNAME"],
        password=values["SANMAR_PASSWORD"],
    )


def get_ws_base_url(environ: Optional[Mapping[str, str]] = None) -> str:
    env = os.environ if environ is None else environ
    return (env.get("SANMAR_WS_BASE_URL") or DEFAULT_WS_BASE_URL).rstrip("/")


def get_timeout_seconds(environ: Optional[Mapping[str, str]] = None) -> float:
    """Per-invocation timeout, SANMAR_TIMEOUT_SECONDS or 60 seconds"""
    env = os.environ if environ is None else environ
    raw = env.get("SANMAR_TIMEOUT_SECONDS")
    if not raw:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        timeout = float(raw)
    except ValueError:
        raise ConfigurationError(f"SANMAR_TIMEOUT_SECONDS must be a number, got {raw!r}")
    if timeout <= 0:
        raise ConfigurationError(f"SANMAR_TIMEOUT_SECONDS must be positive, got {raw!r}")
    return timeout


def wsdl_url(endpoint: str, base_url: Optional[str] = None) -> str:
    """Resolve an endpoint name to its full WSDL URL."""
    try:
        path = ENDPOINT_PATHS[endpoint]
    except KeyError:
        raise ConfigurationError(f"Unknown SanMar endpoint: {endpoint}")
    return f"{base_url or get_ws_base_url()}{path}"


def configure_logging(environ: Optional[Mapping[str, str]] = None) -> logging.Logger:
    """
    Configure the package logger.

    Logs go to stderr because stdout carries the MCP stdio transport. A
    rotating file log is added when SANMAR_LOG_FILE is set.
    """
    env = os.environ if environ is None else environ
    log = logging.getLogger("sanmar_mcp")
    if log.handlers:
        return log

    level_name = (env.get("SANMAR_LOG_LEVEL") or "INFO").upper()
    log.setLevel(getattr(logging, level_name, logging.INFO))
    fmt = logging.Formatter(LOG_FORMAT)

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(fmt)
    log.addHandler(stream_handler)

    log_file = env.get("SANMAR_LOG_FILE")
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file, maxBytes=512000, backupCount=2, encoding="utf-8"
        )
        file_handler.setFormatter(fmt)
        log.addHandler(file_handler)

    log.propagate = False
    return log
