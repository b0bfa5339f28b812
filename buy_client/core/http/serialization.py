"""
Serialization capability for request bodies.

The transport never looks inside domain objects: anything sent as a body
either implements ``Serializable`` or is already JSON-compatible.
"""

from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel


@runtime_checkable
class Serializable(Protocol):
    """An object that can produce its own JSON-compatible representation."""

    def to_json(self) -> Any:
        ...


def to_payload(obj: Any) -> Any:
    """
    Convert a request body object into a JSON-compatible value.

    Args:
        obj: Serializable object, pydantic model, dict, list or None

    Returns:
        JSON-compatible value, or None for an empty body

    Raises:
        TypeError: If the object cannot be serialized
    """
    if obj is None:
        return None
    if isinstance(obj, Serializable):
        return obj.to_json()
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json", exclude_none=True)
    if isinstance(obj, (dict, list)):
        return obj
    raise TypeError(
        f"Cannot serialize {type(obj).__name__}: expected an object with to_json(), "
        "a pydantic model, a dict or a list"
    )
