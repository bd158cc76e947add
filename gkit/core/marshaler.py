"""
Argument Marshaler

Turns named parameter values into the positional argument list the
dispatcher reads as $1, $2, ...

Absent optional values are skipped, not padded: supplying a later optional
parameter without an earlier one shifts it left. Callers must pass every
parameter up to the last one they care about. Defaults are never filled in
here; the dispatcher applies them.
"""

from typing import List, Mapping, Optional

from .registry import CommandSpec
from ..common.errors import MissingParameter


def _present(value: Optional[str]) -> bool:
    return value is not None and value != ""


def validate_required(spec: CommandSpec, values: Mapping[str, Optional[str]]) -> None:
    """Raise MissingParameter for the first required parameter without a value"""
    for param in spec.parameters:
        if param.required and not _present(values.get(param.name)):
            raise MissingParameter(param.name, spec.name)


def marshal(spec: CommandSpec, values: Mapping[str, Optional[str]]) -> List[str]:
    """
    Build the positional argument list for a command.

    Args:
        spec: Command declaration (its parameter order is the output order)
        values: Parameter name -> value

    Returns:
        Values in declared order, with absent/empty ones dropped

    Raises:
        MissingParameter: a required parameter has no non-empty value
    """
    validate_required(spec, values)
    return [
        values[param.name]
        for param in spec.parameters
        if _present(values.get(param.name))
    ]
