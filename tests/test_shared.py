"""
Tests for the SOAP client cache and the zeep invoker binding.
"""

import asyncio
import threading
import time
from types import SimpleNamespace

import pytest
import requests
from zeep.exceptions import Fault, TransportError as ZeepTransportError

from sanmar_mcp.tools.outcomes import TransportFault
from sanmar_mcp.tools.shared import SoapClientCache, invoke_soap


class CountingFactory:
    """Client factory that records how often each endpoint was built."""

    def __init__(self, delay=0.05, failures=0):
        self.delay = delay
        self.failures = failures
        self.calls = []
        self._lock = threading.Lock()

    def __call__(self, endpoint):
        time.sleep(self.delay)
        with self._lock:
            self.calls.append(endpoint)
            if self.failures:
                self.failures -= 1
                raise OSError(f"could not load WSDL for {endpoint}")
        return SimpleNamespace(endpoint=endpoint, build=len(self.calls))


def fake_client(**operations):
    return SimpleNamespace(service=operations)


class TestSoapClientCache:
    """Tests for SoapClientCache"""

    @pytest.mark.asyncio
    async def test_concurrent_first_use_builds_once(self):
        factory = CountingFactory()
        cache = SoapClientCache(factory)

        first, second, third = await asyncio.gather(
            cache.get("product_info"), cache.get("product_info"), cache.get("product_info")
        )

        assert factory.calls == ["product_info"]
        assert first is second is third

    @pytest.mark.asyncio
    async def test_endpoints_cached_separately(self):
        factory = CountingFactory(delay=0)
        cache = SoapClientCache(factory)

        await cache.get("product_info")
        await cache.get("inventory")
        await cache.get("product_info")

        assert factory.calls == ["product_info", "inventory"]
        assert len(cache) == 2

    @pytest.mark.asyncio
    async def test_failed_build_is_not_cached(self):
        factory = CountingFactory(delay=0, failures=1)
        cache = SoapClientCache(factory)

        with pytest.raises(OSError):
            await cache.get("pricing")
        assert "pricing" not in cache

        client = await cache.get("pricing")
        assert client.endpoint == "pricing"
        assert len(factory.calls) == 2

    @pytest.mark.asyncio
    async def test_evicted_client_is_rebuilt(self):
        factory = CountingFactory(delay=0)
        cache = SoapClientCache(factory)

        first = await cache.get("invoice")
        assert cache.evict("invoice") is True
        assert cache.evict("invoice") is False
        second = await cache.get("invoice")

        assert first is not second
        assert factory.calls == ["invoice", "invoice"]

    @pytest.mark.asyncio
    async def test_cancelled_waiter_does_not_cancel_build(self):
        factory = CountingFactory(delay=0.1)
        cache = SoapClientCache(factory)

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(cache.get("ps_inventory"), 0.01)
        client = await cache.get("ps_inventory")

        assert client.endpoint == "ps_inventory"
        assert factory.calls == ["ps_inventory"]


class TestInvokeSoap:
    """Tests for invoke_soap()"""

    @pytest.mark.asyncio
    async def test_calls_procedure_with_envelope(self):
        received = {}

        def get_pricing(**kwargs):
            received.update(kwargs)
            return {"return": {"listResponse": [{"piecePrice": "4.50"}]}}

        cache = SoapClientCache(lambda endpoint: fake_client(getPricing=get_pricing))
        envelope = {"arg0": {"style": "PC61"}, "arg1": {"sanMarUserName": "apiuser"}}

        result = await invoke_soap("pricing", "getPricing", envelope, cache=cache)

        assert received == envelope
        assert result == {"return": {"listResponse": [{"piecePrice": "4.50"}]}}

    @pytest.mark.asyncio
    async def test_soap_fault_carries_fault_body(self):
        def get_pricing(**kwargs):
            raise Fault("Invalid user credentials.", code="soap:Server")

        cache = SoapClientCache(lambda endpoint: fake_client(getPricing=get_pricing))

        with pytest.raises(TransportFault) as exc:
            await invoke_soap("pricing", "getPricing", {}, cache=cache)

        assert exc.value.fault["faultstring"] == "Invalid user credentials."
        assert exc.value.fault["faultcode"] == "soap:Server"

    @pytest.mark.asyncio
    async def test_http_failure_has_no_fault_body(self):
        def get_pricing(**kwargs):
            raise requests.ConnectionError("Connection refused")

        cache = SoapClientCache(lambda endpoint: fake_client(getPricing=get_pricing))

        with pytest.raises(TransportFault) as exc:
            await invoke_soap("pricing", "getPricing", {}, cache=cache)

        assert exc.value.fault is None
        assert "Connection refused" in exc.value.message

    @pytest.mark.asyncio
    async def test_zeep_transport_error(self):
        def get_pricing(**kwargs):
            raise ZeepTransportError("Server returned HTTP status 503", status_code=503)

        cache = SoapClientCache(lambda endpoint: fake_client(getPricing=get_pricing))

        with pytest.raises(TransportFault) as exc:
            await invoke_soap("pricing", "getPricing", {}, cache=cache)

        assert exc.value.fault is None

    @pytest.mark.asyncio
    async def test_wsdl_load_failure(self):
        def broken_factory(endpoint):
            raise requests.ConnectionError("Name or service not known")

        with pytest.raises(TransportFault, match="Name or service not known"):
            await invoke_soap("pricing", "getPricing", {}, cache=SoapClientCache(broken_factory))
