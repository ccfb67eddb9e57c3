"""
Result and error normalization.

Raw SOAP results and faults from ~30 operations come back in a handful of
shapes. normalize() folds all of them into one Outcome so the gateway renders
every tool the same way.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional

from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND

from .registry import OperationDescriptor

logger = logging.getLogger(__name__)


def to_json(payload: Any) -> str:
    """Serialize a payload for the text content of a tool response."""
    # zeep hands back Decimal and datetime values
    return json.dumps(payload, indent=2, default=str)


class TransportFault(Exception):
    """
    Raised by the SOAP invoker when the remote call itself failed.

    Attributes:
        fault: Structured SOAP fault body ({"faultstring", "faultcode", "detail"})
               when the server answered with a fault, otherwise None
    """

    def __init__(self, message: str, fault: Optional[Mapping[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.fault = fault


# --- Outcomes ---

class Outcome:
    is_error = True
    error_code: Optional[int] = INTERNAL_ERROR

    def text(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class Success(Outcome):
    payload: Any
    is_error = False
    error_code = None

    def text(self) -> str:
        return to_json(self.payload)


@dataclass(frozen=True)
class DomainError(Outcome):
    message: str

    def text(self) -> str:
        return f"SanMar API Error: {self.message}"


@dataclass(frozen=True)
class TransportError(Outcome):
    message: str
    soap_fault: bool = False

    def text(self) -> str:
        if self.soap_fault:
            return f"SOAP Fault: {self.message}"
        return f"SOAP call failed: {self.message}"


@dataclass(frozen=True)
class ValidationError(Outcome):
    message: str
    error_code = INVALID_PARAMS

    def text(self) -> str:
        return f"Invalid arguments: {self.message}"


@dataclass(frozen=True)
class UnknownTool(Outcome):
    tool_name: str
    error_code = METHOD_NOT_FOUND

    def text(self) -> str:
        return f"Unknown tool: {self.tool_name}"


# --- Extractors ---

def _is_true(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return value is True


def response_body(raw: Any) -> Any:
    """Unwrap the ``return`` element some services nest their payload under."""
    if isinstance(raw, Mapping) and "return" in raw:
        return raw["return"]
    return raw


def sanmar_error_flag(flag: str) -> Callable[[Any], Optional[str]]:
    """
    Domain-error detector for SanMar standard services.

    The product info service spells the flag ``errorOccured``; inventory,
    pricing and PO services spell it ``errorOccurred``. The flag is looked up
    under ``return`` first and then at the top level.
    """

    def extract(raw: Any) -> Optional[str]:
        for body in (response_body(raw), raw):
            if isinstance(body, Mapping) and _is_true(body.get(flag)):
                return body.get("message") or "Unknown error"
        return None

    return extract


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def promostandards_error(raw: Any) -> Optional[str]:
    """
    Domain-error detector for PromoStandards services.

    Older services return an ``ErrorMessage`` element; newer ones return a
    ``ServiceMessageArray`` whose entries carry a severity. Only Error
    severity counts, informational messages are ignored.
    """
    if not isinstance(raw, Mapping):
        return None

    error_message = raw.get("ErrorMessage")
    if isinstance(error_message, Mapping) and error_message.get("description"):
        code = error_message.get("code")
        description = error_message["description"]
        return f"{code}: {description}" if code is not None else description

    service_messages = raw.get("ServiceMessageArray")
    if isinstance(service_messages, Mapping):
        service_messages = service_messages.get("ServiceMessage")
    errors = [
        message.get("description") or f"code {message.get('code')}"
        for message in _as_list(service_messages)
        if isinstance(message, Mapping) and str(message.get("severity", "")).lower() == "error"
    ]
    if errors:
        return "; ".join(errors)
    return None


def list_response(raw: Any) -> Any:
    """``return.listResponse``, falling back to ``return`` and then the raw result"""
    body = response_body(raw)
    if isinstance(body, Mapping) and body.get("listResponse") is not None:
        return body["listResponse"]
    return body if body is not None else raw


def return_body(raw: Any) -> Any:
    body = response_body(raw)
    return body if body is not None else raw


# --- Normalization ---

def _fault_string(error: BaseException) -> Optional[str]:
    fault = getattr(error, "fault", None)
    if not isinstance(fault, Mapping):
        return None
    return fault.get("faultstring") or "Unknown SOAP Fault"


def classify_error(error: BaseException) -> TransportError:
    fault_string = _fault_string(error)
    if fault_string is not None:
        return TransportError(fault_string, soap_fault=True)
    return TransportError(str(error) or type(error).__name__)


def normalize(descriptor: OperationDescriptor, raw: Any = None,
              error: Optional[BaseException] = None) -> Outcome:
    """
    Turn a raw SOAP result, or the error raised instead of one, into an Outcome.

    A raised error always wins: a faulted call has no result body to inspect.
    Extractors that blow up are logged and treated as "no domain error" /
    "payload is the raw result" so a surprising response never crashes a call.
    """
    if error is not None:
        return classify_error(error)

    try:
        message = descriptor.extract_domain_error(raw)
    except Exception:
        logger.exception("Domain error check failed for %s, assuming success", descriptor.name)
        message = None
    if message:
        return DomainError(str(message))

    try:
        payload = descriptor.extract_success(raw)
    except Exception:
        logger.exception("Payload extraction failed for %s, returning raw result", descriptor.name)
        payload = raw
    return Success(payload)
