"""
Tool gateway: lookup -> validate -> shape -> invoke -> normalize.

call_tool() runs the whole pipeline for one invocation and always returns an
Outcome. render_outcome() turns that into the caller-facing envelope, and
dispatch() is the entry point the FastMCP tool functions use.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from fastmcp import Context
from fastmcp.tools.tool import ToolResult
from mcp.types import CallToolResult, TextContent

from ..config import Credentials, get_timeout_seconds
from .envelopes import shape_request
from .outcomes import (
    Outcome,
    Success,
    TransportError,
    UnknownTool,
    ValidationError,
    normalize,
)
from .registry import OperationDescriptor, OperationRegistry
from .shared import get_credentials, get_registry, invalidate_soap_client, invoke_soap
from .validation import ArgumentError, validate

logger = logging.getLogger(__name__)

Invoker = Callable[[str, str, Mapping[str, Any]], Awaitable[Any]]
Evictor = Callable[[str], Any]


def redact(value: Any, secret: str) -> Any:
    """Copy of an envelope with every occurrence of ``secret`` masked, for logging."""
    if isinstance(value, Mapping):
        return {key: redact(item, secret) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [redact(item, secret) for item in value]
    if isinstance(value, str) and secret and value == secret:
        return "***"
    return value


def tool_options(name: str) -> Dict[str, Any]:
    """Keyword arguments for ``mcp.tool()`` taken from the operation's descriptor."""
    descriptor = get_registry().lookup(name)
    if descriptor is None:
        raise KeyError(f"No operation registered for tool '{name}'")
    return {
        "name": descriptor.name,
        "description": descriptor.description,
        "annotations": {
            "readOnlyHint": descriptor.read_only,
            "openWorldHint": True,
        },
    }


async def _invoke(descriptor: OperationDescriptor, arguments: Mapping[str, Any],
                  credentials: Credentials, invoker: Invoker,
                  evict: Optional[Evictor]) -> Outcome:
    validated = validate(descriptor, arguments)
    envelope = shape_request(descriptor, validated, credentials)
    logger.debug(
        "Calling %s.%s with %s",
        descriptor.endpoint, descriptor.procedure, redact(envelope, credentials.password),
    )
    try:
        raw = await invoker(descriptor.endpoint, descriptor.procedure, envelope)
    except Exception as e:
        outcome = normalize(descriptor, error=e)
        if evict is not None and isinstance(outcome, TransportError) and not outcome.soap_fault:
            # The server never answered; rebuild the client on the next call
            evict(descriptor.endpoint)
        return outcome
    return normalize(descriptor, raw)


async def call_tool(tool_name: str, arguments: Optional[Mapping[str, Any]] = None, *,
                    registry: Optional[OperationRegistry] = None,
                    credentials: Optional[Credentials] = None,
                    invoker: Optional[Invoker] = None,
                    evict: Optional[Evictor] = None,
                    timeout: Optional[float] = None) -> Outcome:
    """
    Run one tool invocation end to end.

    Args:
        tool_name: Name of the tool being called
        arguments: Caller's argument bag
        registry: Operation registry (defaults to the full SanMar catalog)
        credentials: Static credentials (defaults to the environment)
        invoker: Coroutine ``(endpoint, procedure, envelope) -> raw result``
        evict: Drops the client behind ``invoker`` for an endpoint after a
               connection failure. Defaults to the shared client cache only when
               ``invoker`` is also defaulted
        timeout: Seconds before the call is abandoned (defaults to SANMAR_TIMEOUT_SECONDS)

    Returns:
        The call's Outcome. This function does not raise.
    """
    if registry is None:
        registry = get_registry()
    descriptor = registry.lookup(tool_name)
    if descriptor is None:
        logger.warning("Unknown tool requested: %s", tool_name)
        return UnknownTool(tool_name)

    try:
        credentials = credentials or get_credentials()
        if invoker is None:
            invoker = invoke_soap
            evict = evict or invalidate_soap_client
        timeout = timeout if timeout is not None else get_timeout_seconds()
        return await asyncio.wait_for(
            _invoke(descriptor, arguments, credentials, invoker, evict), timeout
        )
    except ArgumentError as e:
        logger.info("Rejected arguments for %s: %s", tool_name, e)
        return ValidationError("; ".join(e.problems))
    except asyncio.TimeoutError:
        logger.error("%s timed out after %ss", tool_name, timeout)
        return TransportError("timeout")
    except Exception as e:
        logger.exception("Unexpected failure calling %s", tool_name)
        return TransportError(str(e) or "An unexpected error occurred.")


def render_outcome(outcome: Outcome) -> Dict[str, Any]:
    """
    Render an Outcome as the caller-facing envelope.

    Returns:
        {"content": [{"type": "text", "text": ...}]} plus ``isError`` and
        ``errorCode`` for every error variant
    """
    try:
        text = outcome.text()
    except Exception:
        logger.exception("Failed to render outcome %r", outcome)
        outcome = TransportError("An unexpected error occurred.")
        text = outcome.text()

    envelope: Dict[str, Any] = {"content": [{"type": "text", "text": text}]}
    if outcome.is_error:
        envelope["isError"] = True
        envelope["errorCode"] = outcome.error_code
    return envelope


class ErrorResult(ToolResult):
    """ToolResult that reaches the MCP caller with ``isError`` and ``_meta.errorCode`` set."""

    def __init__(self, envelope: Dict[str, Any]):
        super().__init__(content=[TextContent(**block) for block in envelope["content"]])
        self.error_code = envelope["errorCode"]

    def to_mcp_result(self) -> CallToolResult:
        return CallToolResult(
            content=self.content,
            isError=True,
            _meta={"errorCode": self.error_code},
        )


async def dispatch(tool_name: str, arguments: Mapping[str, Any], ctx: Context = None) -> Any:
    """
    Entry point for the FastMCP tool functions.

    Arguments left as None are treated as not provided.

    Returns:
        The success payload, or an ErrorResult carrying the rendered error
        envelope for every error outcome
    """
    provided = {name: value for name, value in arguments.items() if value is not None}
    if ctx:
        await ctx.info(f"Calling {tool_name}")

    outcome = await call_tool(tool_name, provided)

    if isinstance(outcome, Success):
        if ctx:
            await ctx.info(f"{tool_name} completed successfully")
        return outcome.payload

    envelope = render_outcome(outcome)
    if ctx:
        await ctx.error(f"{tool_name} failed: {envelope['content'][0]['text']}")
    return ErrorResult(envelope)
