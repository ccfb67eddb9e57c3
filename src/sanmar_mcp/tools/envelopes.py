"""
Request envelope builders.

SanMar exposes three envelope conventions and PromoStandards adds a fourth:

- standard: business fields under ``arg0``, auth block under ``arg1``
- positional: credentials and business values as ``arg0``..``argN``
- flat: invoice credentials and PascalCase business fields side by side
- PromoStandards: ``wsVersion``, ``id`` and ``password`` plus the business fields

Fields the caller did not provide are left out of the envelope entirely. Several
remote filters treat an explicit empty element differently from a missing one.
"""

from typing import Any, Dict, Mapping, Optional, Sequence

from ..config import Credentials
from .registry import OperationDescriptor, ShapeFn
from .validation import relevant_arguments


def pick(arguments: Mapping[str, Any], names: Sequence[str],
         rename: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Copy the provided fields in ``names``, optionally renaming them for the wire."""
    rename = rename or {}
    return {rename.get(name, name): arguments[name] for name in names if name in arguments}


def with_defaults(arguments: Mapping[str, Any], defaults: Mapping[str, Any]) -> Dict[str, Any]:
    merged = dict(defaults)
    merged.update(arguments)
    return merged


def sanmar_standard(fields: Sequence[str], rename: Optional[Mapping[str, str]] = None) -> ShapeFn:
    """arg0 = business fields, arg1 = SanMar auth block"""

    def shape(arguments: Mapping[str, Any], credentials: Credentials) -> Dict[str, Any]:
        return {
            "arg0": pick(arguments, fields, rename),
            "arg1": credentials.sanmar_auth(),
        }

    return shape


def sanmar_auth_only(arguments: Mapping[str, Any], credentials: Credentials) -> Dict[str, Any]:
    """Bulk and delta product requests carry only the auth block in arg0."""
    return {"arg0": credentials.sanmar_auth()}


def sanmar_positional(fields: Sequence[str]) -> ShapeFn:
    """arg0..arg2 = customer number, user, password; business values follow in order"""

    def shape(arguments: Mapping[str, Any], credentials: Credentials) -> Dict[str, Any]:
        envelope = {
            "arg0": credentials.customer_number,
            "arg1": credentials.username,
            "arg2": credentials.password,
        }
        for position, name in enumerate(fields, start=3):
            if name in arguments:
                envelope[f"arg{position}"] = arguments[name]
        return envelope

    return shape


def sanmar_invoice(rename: Mapping[str, str]) -> ShapeFn:
    """Flat CustomerNo/UserName/Password envelope with PascalCase business fields"""

    def shape(arguments: Mapping[str, Any], credentials: Credentials) -> Dict[str, Any]:
        envelope = credentials.invoice_auth()
        envelope.update(pick(arguments, list(rename), rename))
        return envelope

    return shape


def promostandards(ws_version: str, fields: Sequence[str] = (),
                   fixed: Optional[Mapping[str, Any]] = None,
                   defaults: Optional[Mapping[str, Any]] = None,
                   rename: Optional[Mapping[str, str]] = None) -> ShapeFn:
    """
    PromoStandards envelope builder.

    Args:
        ws_version: Value of the mandatory wsVersion element
        fields: Business fields copied from the arguments when provided
        fixed: Elements always sent with the same value
        defaults: Values used for fields the caller left out
        rename: Argument name -> wire element name
    """

    def shape(arguments: Mapping[str, Any], credentials: Credentials) -> Dict[str, Any]:
        envelope: Dict[str, Any] = {"wsVersion": ws_version}
        envelope.update(credentials.promostandards_auth())
        if fixed:
            envelope.update(fixed)
        values = with_defaults(arguments, defaults) if defaults else arguments
        envelope.update(pick(values, fields, rename))
        return envelope

    return shape


def shape_request(descriptor: OperationDescriptor, arguments: Mapping[str, Any],
                  credentials: Credentials) -> Dict[str, Any]:
    """
    Build the SOAP argument envelope for a validated call.

    Conditional fields that the resolved discriminant does not select are
    removed before the descriptor's own shape function runs.
    """
    return descriptor.shape(relevant_arguments(descriptor, arguments), credentials)
