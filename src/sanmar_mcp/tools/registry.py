"""
Operation registry for the SanMar MCP server.

Every remote SOAP procedure is described once by an OperationDescriptor: the
endpoint it lives on, the argument schema callers must satisfy, how the request
envelope is built, and how the raw result is classified. The generic pipeline in
gateway.py consumes these descriptors, so adding an operation never means adding
another copy of the call/error-handling code.
"""

from collections.abc import Hashable
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Optional, Sequence, Tuple, Union

from ..config import Credentials


class Requirement(Enum):
    ALWAYS = "always"
    OPTIONAL = "optional"


@dataclass(frozen=True)
class RequiredWhen:
    """Field required only when ``discriminant`` holds one of ``values``."""

    discriminant: str
    values: FrozenSet[str]

    def __post_init__(self):
        object.__setattr__(self, "values", frozenset(self.values))

    def applies(self, arguments: Mapping[str, Any]) -> bool:
        value = arguments.get(self.discriminant)
        # a list or dict discriminant fails its own kind check and selects nothing
        return isinstance(value, Hashable) and value in self.values


ALWAYS = Requirement.ALWAYS
OPTIONAL = Requirement.OPTIONAL

# JSON-Schema type name -> accepted Python types
KINDS: Dict[str, Tuple[type, ...]] = {
    "string": (str,),
    "boolean": (bool,),
    "integer": (int,),
    "number": (int, float),
    "object": (dict,),
    "array": (list, tuple),
}


@dataclass(frozen=True)
class FieldSpec:
    """One argument accepted by an operation."""

    name: str
    kind: str = "string"
    requirement: Union[Requirement, RequiredWhen] = OPTIONAL
    description: str = ""
    choices: Optional[Tuple[Any, ...]] = None
    default: Any = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    # Extra JSON-Schema keywords (items/properties) for structured fields
    schema: Mapping[str, Any] = field(default_factory=dict)
    # Returns an error message for a present value, or None when it is acceptable
    check: Optional[Callable[[Any], Optional[str]]] = None

    def __post_init__(self):
        if self.kind not in KINDS:
            raise ValueError(f"Unsupported kind for field '{self.name}': {self.kind}")

    def matches_kind(self, value: Any) -> bool:
        # bool is an int subclass; keep booleans out of integer/number fields
        if isinstance(value, bool) and self.kind != "boolean":
            return False
        return isinstance(value, KINDS[self.kind])

    def json_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {"type": self.kind}
        description = self.description
        if isinstance(self.requirement, RequiredWhen):
            allowed = ", ".join(sorted(self.requirement.values))
            description = (
                f"{description} (required when {self.requirement.discriminant} is {allowed})"
            ).strip()
        if description:
            schema["description"] = description
        if self.choices is not None:
            schema["enum"] = list(self.choices)
        if self.default is not None:
            schema["default"] = self.default
        if self.min_length is not None:
            schema["minLength"] = self.min_length
        if self.max_length is not None:
            schema["maxLength"] = self.max_length
        schema.update(self.schema)
        return schema


ShapeFn = Callable[[Mapping[str, Any], Credentials], Dict[str, Any]]
ExtractFn = Callable[[Any], Any]
ErrorFn = Callable[[Any], Optional[str]]


def _bare_result(raw: Any) -> Any:
    return raw


def _no_domain_error(raw: Any) -> Optional[str]:
    return None


@dataclass(frozen=True)
class OperationDescriptor:
    """Immutable definition of one remote procedure exposed as a tool."""

    name: str
    description: str
    endpoint: str
    procedure: str
    argument_schema: Tuple[FieldSpec, ...]
    shape: ShapeFn
    extract_success: ExtractFn = _bare_result
    extract_domain_error: ErrorFn = _no_domain_error
    read_only: bool = True

    def __post_init__(self):
        if not isinstance(self.argument_schema, tuple):
            object.__setattr__(self, "argument_schema", tuple(self.argument_schema))
        names = [spec.name for spec in self.argument_schema]
        duplicates = {name for name in names if names.count(name) > 1}
        if duplicates:
            raise ValueError(f"Duplicate fields in '{self.name}': {sorted(duplicates)}")
        for spec in self.argument_schema:
            if isinstance(spec.requirement, RequiredWhen) and spec.requirement.discriminant not in names:
                raise ValueError(
                    f"Field '{spec.name}' of '{self.name}' depends on unknown "
                    f"discriminant '{spec.requirement.discriminant}'"
                )

    def get_field(self, name: str) -> Optional[FieldSpec]:
        for spec in self.argument_schema:
            if spec.name == name:
                return spec
        return None

    def input_schema(self) -> Dict[str, Any]:
        """JSON-Schema-shaped input contract advertised in the tool catalog"""
        return {
            "type": "object",
            "properties": {spec.name: spec.json_schema() for spec in self.argument_schema},
            "required": [
                spec.name for spec in self.argument_schema if spec.requirement is ALWAYS
            ],
        }

    def tool_descriptor(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema(),
        }


class OperationRegistry:
    """
    Read-only catalog of operation descriptors keyed by tool name.

    The registry is populated once from a sequence of descriptors and never
    changes afterwards, so it can be shared by any number of concurrent calls.
    """

    def __init__(self, descriptors: Sequence[OperationDescriptor]):
        operations: Dict[str, OperationDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.name in operations:
                raise ValueError(f"Operation '{descriptor.name}' is already registered")
            operations[descriptor.name] = descriptor
        self._operations = MappingProxyType(operations)

    def lookup(self, tool_name: str) -> Optional[OperationDescriptor]:
        """Return the descriptor for ``tool_name``, or None when it is not registered."""
        return self._operations.get(tool_name)

    def names(self) -> List[str]:
        return list(self._operations)

    def catalog(self) -> List[Dict[str, Any]]:
        return [descriptor.tool_descriptor() for descriptor in self._operations.values()]

    def __contains__(self, tool_name: object) -> bool:
        return tool_name in self._operations

    def __iter__(self):
        return iter(self._operations.values())

    def __len__(self) -> int:
        return len(self._operations)
