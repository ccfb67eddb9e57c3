"""
Argument validation against an operation's declared schema.

Validation is pure: it never touches the network and never mutates the caller's
arguments. A JSON null counts as "not provided"; an empty string counts as
provided. Fields the schema does not declare are dropped, not rejected.
"""

from typing import Any, Dict, List, Mapping, Optional

from .registry import ALWAYS, FieldSpec, OperationDescriptor, RequiredWhen


class ArgumentError(Exception):
    """Raised when caller-supplied arguments do not satisfy an operation's schema."""

    def __init__(self, tool_name: str, problems: List[str]):
        self.tool_name = tool_name
        self.problems = problems
        super().__init__(f"{tool_name}: {'; '.join(problems)}")


def _is_required(spec: FieldSpec, arguments: Mapping[str, Any]) -> bool:
    if spec.requirement is ALWAYS:
        return True
    if isinstance(spec.requirement, RequiredWhen):
        return spec.requirement.applies(arguments)
    return False


def _check_value(spec: FieldSpec, value: Any) -> Optional[str]:
    if not spec.matches_kind(value):
        return f"'{spec.name}' must be of type {spec.kind}, got {type(value).__name__}"
    if spec.choices is not None and value not in spec.choices:
        allowed = ", ".join(str(choice) for choice in spec.choices)
        return f"'{spec.name}' must be one of: {allowed}"
    if isinstance(value, str):
        if spec.min_length is not None and len(value) < spec.min_length:
            return f"'{spec.name}' must be at least {spec.min_length} characters"
        if spec.max_length is not None and len(value) > spec.max_length:
            return f"'{spec.name}' must be at most {spec.max_length} characters"
    if spec.check is not None:
        return spec.check(value)
    return None


def validate(descriptor: OperationDescriptor, arguments: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Check an argument bag against a descriptor's schema.

    Args:
        descriptor: The operation being invoked
        arguments: Raw arguments from the caller (None is treated as empty)

    Returns:
        Dictionary holding only the declared fields that were provided

    Raises:
        ArgumentError: With every problem found, when the arguments are unusable
    """
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, Mapping):
        raise ArgumentError(descriptor.name, ["arguments must be an object"])

    provided = {
        spec.name: arguments[spec.name]
        for spec in descriptor.argument_schema
        if arguments.get(spec.name) is not None
    }

    problems = []
    for spec in descriptor.argument_schema:
        if spec.name not in provided:
            if _is_required(spec, provided):
                if isinstance(spec.requirement, RequiredWhen):
                    discriminant = spec.requirement.discriminant
                    problems.append(
                        f"'{spec.name}' is required when {discriminant} is "
                        f"{provided.get(discriminant)!r}"
                    )
                else:
                    problems.append(f"'{spec.name}' is required")
            continue
        problem = _check_value(spec, provided[spec.name])
        if problem:
            problems.append(problem)

    if problems:
        raise ArgumentError(descriptor.name, problems)
    return provided


def relevant_arguments(descriptor: OperationDescriptor, arguments: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Drop conditional fields whose discriminant does not select them.

    Shaping applies the same rule validation uses: a RequiredWhen field only
    travels to the remote service when the discriminant value calls for it.
    """
    relevant = {}
    for spec in descriptor.argument_schema:
        if spec.name not in arguments:
            continue
        if isinstance(spec.requirement, RequiredWhen) and not spec.requirement.applies(arguments):
            continue
        relevant[spec.name] = arguments[spec.name]
    return relevant
