"""
Tests for the tool gateway: call_tool(), render_outcome() and dispatch().
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND

from sanmar_mcp.config import ConfigurationError
from sanmar_mcp.tools import gateway
from sanmar_mcp.tools.gateway import (
    ErrorResult,
    call_tool,
    dispatch,
    redact,
    render_outcome,
    tool_options,
)
from sanmar_mcp.tools.outcomes import (
    DomainError,
    Success,
    TransportError,
    TransportFault,
    UnknownTool,
    ValidationError,
)


class TestCallTool:
    """Tests for the full pipeline"""

    @pytest.mark.asyncio
    async def test_product_info_end_to_end(self, credentials):
        invoker = AsyncMock(return_value={
            "return": {"errorOccured": False, "listResponse": [{"productBasicInfo": {"style": "PC61"}}]}
        })

        outcome = await call_tool(
            "get_sanmar_product_info",
            {"style": "PC61", "color": "White", "size": "XL"},
            credentials=credentials,
            invoker=invoker,
            timeout=5,
        )

        assert outcome == Success([{"productBasicInfo": {"style": "PC61"}}])
        invoker.assert_awaited_once_with(
            "product_info",
            "getProductInfoByStyleColorSize",
            {
                "arg0": {"style": "PC61", "color": "White", "size": "XL"},
                "arg1": {
                    "sanMarCustomerNumber": "123456",
                    "sanMarUserName": "apiuser",
                    "sanMarUserPassword": "s3cret",
                },
            },
        )

    @pytest.mark.asyncio
    async def test_unknown_tool_never_validates_or_calls(self, credentials):
        invoker = AsyncMock()

        outcome = await call_tool("get_sanmar_weather", {"style": 1}, credentials=credentials,
                                  invoker=invoker, timeout=5)

        assert outcome == UnknownTool("get_sanmar_weather")
        invoker.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_validation_error_never_calls_endpoint(self, credentials):
        invoker = AsyncMock()

        outcome = await call_tool("get_sanmar_pricing", {"style": 61}, credentials=credentials,
                                  invoker=invoker, timeout=5)

        assert isinstance(outcome, ValidationError)
        assert outcome.error_code == INVALID_PARAMS
        assert "'style' must be of type string" in outcome.message
        invoker.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_list_discriminant_is_a_validation_error(self, credentials):
        invoker = AsyncMock()

        outcome = await call_tool("get_ps_order_status",
                                  {"queryType": ["poSearch"], "referenceNumber": "PO123"},
                                  credentials=credentials, invoker=invoker, timeout=5)

        assert outcome == ValidationError("'queryType' must be of type string, got list")
        assert outcome.error_code == INVALID_PARAMS
        invoker.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_domain_error(self, credentials):
        invoker = AsyncMock(return_value={"errorOccurred": True, "message": "Invalid style"})

        outcome = await call_tool("get_sanmar_inventory", {"style": "XX"}, credentials=credentials,
                                  invoker=invoker, timeout=5)

        assert outcome == DomainError("Invalid style")

    @pytest.mark.asyncio
    async def test_timeout(self, credentials):
        async def slow_invoker(endpoint, procedure, envelope):
            await asyncio.sleep(10)

        outcome = await call_tool("get_sanmar_pricing", {"style": "PC61"}, credentials=credentials,
                                  invoker=slow_invoker, timeout=0.01)

        assert outcome == TransportError("timeout")

    @pytest.mark.asyncio
    async def test_transport_failure_evicts_client(self, credentials):
        invoker = AsyncMock(side_effect=TransportFault("Connection reset by peer"))
        evict = MagicMock()

        outcome = await call_tool("get_sanmar_pricing", {"style": "PC61"}, credentials=credentials,
                                  invoker=invoker, evict=evict, timeout=5)

        assert outcome == TransportError("Connection reset by peer")
        evict.assert_called_once_with("pricing")

    @pytest.mark.asyncio
    async def test_default_invoker_evicts_shared_cache(self, credentials):
        failing = AsyncMock(side_effect=TransportFault("Connection reset by peer"))

        with patch.object(gateway, "invoke_soap", failing), \
                patch.object(gateway, "invalidate_soap_client") as mock_invalidate:
            await call_tool("get_sanmar_pricing", {"style": "PC61"}, credentials=credentials, timeout=5)

        mock_invalidate.assert_called_once_with("pricing")

    @pytest.mark.asyncio
    async def test_injected_invoker_leaves_shared_cache_alone(self, credentials):
        invoker = AsyncMock(side_effect=TransportFault("Connection reset by peer"))

        with patch.object(gateway, "invalidate_soap_client") as mock_invalidate:
            outcome = await call_tool("get_sanmar_pricing", {"style": "PC61"},
                                      credentials=credentials, invoker=invoker, timeout=5)

        assert outcome == TransportError("Connection reset by peer")
        mock_invalidate.assert_not_called()

    @pytest.mark.asyncio
    async def test_soap_fault_keeps_client(self, credentials):
        invoker = AsyncMock(side_effect=TransportFault(
            "Server Error", fault={"faultstring": "Style not found"}
        ))
        evict = MagicMock()

        outcome = await call_tool("get_sanmar_pricing", {"style": "PC61"}, credentials=credentials,
                                  invoker=invoker, evict=evict, timeout=5)

        assert outcome == TransportError("Style not found", soap_fault=True)
        evict.assert_not_called()

    @pytest.mark.asyncio
    async def test_unexpected_exception_becomes_transport_error(self, credentials):
        arguments = {"productId": "PC61", "filter": {"partIdArray": ["1"]}}

        with patch.object(gateway, "shape_request", side_effect=RuntimeError("shaper exploded")):
            outcome = await call_tool("get_ps_inventory_levels", arguments,
                                      credentials=credentials, invoker=AsyncMock(), timeout=5)

        assert outcome == TransportError("shaper exploded")

    @pytest.mark.asyncio
    async def test_missing_credentials_is_an_outcome(self, monkeypatch):
        def no_credentials():
            raise ConfigurationError("Missing SanMar credentials")

        monkeypatch.setattr(gateway, "get_credentials", no_credentials)

        outcome = await call_tool("get_sanmar_pricing", {"style": "PC61"},
                                  invoker=AsyncMock(), timeout=5)

        assert isinstance(outcome, TransportError)
        assert "Missing SanMar credentials" in outcome.message


class TestRenderOutcome:
    """Tests for the caller-facing envelope"""

    def test_success(self):
        assert render_outcome(Success({"style": "PC61"})) == {
            "content": [{"type": "text", "text": '{\n  "style": "PC61"\n}'}]
        }

    def test_error_variants(self):
        cases = [
            (DomainError("Invalid style"), INTERNAL_ERROR, "SanMar API Error: Invalid style"),
            (TransportError("timeout"), INTERNAL_ERROR, "SOAP call failed: timeout"),
            (ValidationError("'style' is required"), INVALID_PARAMS,
             "Invalid arguments: 'style' is required"),
            (UnknownTool("nope"), METHOD_NOT_FOUND, "Unknown tool: nope"),
        ]
        for outcome, code, text in cases:
            assert render_outcome(outcome) == {
                "content": [{"type": "text", "text": text}],
                "isError": True,
                "errorCode": code,
            }

    def test_unserializable_payload_still_renders(self):
        class Unprintable:
            def __str__(self):
                raise ValueError("no")

        rendered = render_outcome(Success({"value": Unprintable()}))

        assert rendered["isError"] is True
        assert rendered["errorCode"] == INTERNAL_ERROR


class TestDispatch:
    """Tests for dispatch(), the entry used by every FastMCP tool"""

    @pytest.mark.asyncio
    async def test_returns_payload_and_drops_nones(self):
        ctx = AsyncMock()
        with patch.object(gateway, "call_tool", new_callable=AsyncMock) as mock_call:
            mock_call.return_value = Success({"ok": True})
            result = await dispatch("get_sanmar_pricing", {"style": "PC61", "color": None}, ctx)

        assert result == {"ok": True}
        mock_call.assert_awaited_once_with("get_sanmar_pricing", {"style": "PC61"})
        ctx.info.assert_awaited()
        ctx.error.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_error_outcome_returns_error_result(self):
        ctx = AsyncMock()
        with patch.object(gateway, "call_tool", new_callable=AsyncMock) as mock_call:
            mock_call.return_value = DomainError("Invalid style")
            result = await dispatch("get_sanmar_pricing", {"style": "XX"}, ctx)

        assert isinstance(result, ErrorResult)
        mcp_result = result.to_mcp_result()
        assert mcp_result.isError is True
        assert mcp_result.meta == {"errorCode": INTERNAL_ERROR}
        assert mcp_result.content[0].text == "SanMar API Error: Invalid style"
        ctx.error.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_works_without_context(self):
        with patch.object(gateway, "call_tool", new_callable=AsyncMock) as mock_call:
            mock_call.return_value = Success([])
            assert await dispatch("get_ps_service_methods", {}) == []


class TestHelpers:
    """Tests for tool_options() and redact()"""

    def test_tool_options(self):
        options = tool_options("submit_sanmar_po")
        assert options["name"] == "submit_sanmar_po"
        assert options["annotations"] == {"readOnlyHint": False, "openWorldHint": True}

    def test_tool_options_unknown(self):
        with pytest.raises(KeyError):
            tool_options("get_sanmar_weather")

    def test_redact_masks_password_everywhere(self):
        envelope = {
            "arg0": "123456",
            "arg2": "s3cret",
            "auth": {"sanMarUserPassword": "s3cret", "sanMarUserName": "apiuser"},
            "lines": [{"note": "s3cret"}],
        }
        assert redact(envelope, "s3cret") == {
            "arg0": "123456",
            "arg2": "***",
            "auth": {"sanMarUserPassword": "***", "sanMarUserName": "apiuser"},
            "lines": [{"note": "***"}],
        }
