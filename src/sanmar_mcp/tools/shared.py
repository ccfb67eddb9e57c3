"""
Common utilities and SOAP client management for the SanMar MCP tools
"""

import asyncio
import logging
from typing import Any, Callable, Dict, Mapping, Optional

import requests
from zeep import Client
from zeep.exceptions import Error as ZeepError
from zeep.exceptions import Fault
from zeep.helpers import serialize_object
from zeep.transports import Transport

from ..config import Credentials, get_timeout_seconds, get_ws_base_url, load_credentials, wsdl_url
from .outcomes import TransportFault
from .registry import OperationRegistry

logger = logging.getLogger(__name__)

# Process-wide singletons, populated on first use
_credentials: Optional[Credentials] = None
_registry: Optional[OperationRegistry] = None
_client_cache: Optional["SoapClientCache"] = None


def build_soap_client(endpoint: str) -> Client:
    """Create a zeep client for an endpoint name. Loads the WSDL, so it blocks."""
    url = wsdl_url(endpoint, get_ws_base_url())
    logger.info("Loading WSDL for %s from %s", endpoint, url)
    session = requests.Session()
    timeout = get_timeout_seconds()
    transport = Transport(session=session, timeout=timeout, operation_timeout=timeout)
    return Client(url, transport=transport)


class SoapClientCache:
    """
    Lazily-built SOAP clients keyed by endpoint name.

    Construction is single-flight: while one caller is building the client for
    an endpoint, every other caller for that endpoint waits on the same build
    instead of starting its own. A failed build is not cached, and a cached
    client can be evicted so the next call rebuilds it.
    """

    def __init__(self, factory: Callable[[str], Any] = build_soap_client):
        self._factory = factory
        self._clients: Dict[str, Any] = {}
        self._pending: Dict[str, asyncio.Task] = {}

    async def get(self, endpoint: str) -> Any:
        client = self._clients.get(endpoint)
        if client is not None:
            return client

        task = self._pending.get(endpoint)
        if task is None:
            task = asyncio.ensure_future(self._build(endpoint))
            self._pending[endpoint] = task
        # shield: a caller timing out must not cancel a build others are waiting on
        return await asyncio.shield(task)

    async def _build(self, endpoint: str) -> Any:
        try:
            client = await asyncio.to_thread(self._factory, endpoint)
            self._clients[endpoint] = client
            return client
        finally:
            self._pending.pop(endpoint, None)

    def evict(self, endpoint: str) -> bool:
        """Drop the cached client for ``endpoint``. Returns True if one was cached."""
        evicted = self._clients.pop(endpoint, None) is not None
        if evicted:
            logger.warning("Evicted SOAP client for %s", endpoint)
        return evicted

    def __contains__(self, endpoint: object) -> bool:
        return endpoint in self._clients

    def __len__(self) -> int:
        return len(self._clients)


def _fault_body(fault: Fault) -> Dict[str, Any]:
    detail = fault.detail
    if detail is not None and not isinstance(detail, (str, bytes)):
        # lxml element
        detail = getattr(detail, "text", None) or str(detail)
    return {
        "faultstring": fault.message,
        "faultcode": fault.code,
        "detail": detail,
    }


async def invoke_soap(endpoint: str, procedure: str, envelope: Mapping[str, Any],
                      cache: Optional[SoapClientCache] = None) -> Any:
    """
    Call ``procedure`` on the endpoint's client and return the result as plain data.

    Raises:
        TransportFault: For SOAP faults (with the fault body attached) and for
                        any network, HTTP or XML failure (without one)
    """
    cache = cache or get_client_cache()
    try:
        client = await cache.get(endpoint)
        operation = client.service[procedure]
        result = await asyncio.to_thread(operation, **envelope)
    except Fault as e:
        raise TransportFault(e.message or "Unknown SOAP Fault", fault=_fault_body(e)) from e
    except (requests.RequestException, ZeepError, OSError) as e:
        raise TransportFault(str(e) or type(e).__name__) from e
    return serialize_object(result, dict)


def get_credentials() -> Credentials:
    """Get the process credentials, loading them from the environment on first use."""
    global _credentials
    if _credentials is None:
        _credentials = load_credentials()
    return _credentials


def get_client_cache() -> SoapClientCache:
    global _client_cache
    if _client_cache is None:
        _client_cache = SoapClientCache()
    return _client_cache


def invalidate_soap_client(endpoint: str) -> bool:
    """Evict one endpoint's client so it is rebuilt on next use."""
    return get_client_cache().evict(endpoint)


def get_registry() -> OperationRegistry:
    """Get the registry of every SanMar and PromoStandards operation."""
    global _registry
    if _registry is None:
        from . import (
            inventory_tools,
            invoice_tools,
            order_tools,
            pricing_tools,
            product_tools,
            purchase_order_tools,
        )

        _registry = OperationRegistry(
            product_tools.OPERATIONS
            + inventory_tools.OPERATIONS
            + pricing_tools.OPERATIONS
            + invoice_tools.OPERATIONS
            + order_tools.OPERATIONS
            + purchase_order_tools.OPERATIONS
        )
    return _registry
