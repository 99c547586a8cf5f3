"""
Sparse key/value access shared by every node of the canonical tree.

Nodes are plain dataclasses; absence of a value is ``None`` and means the
source dialect does not express that concept. ``read``/``write`` give
adapters a uniform, name-driven way to move values between field tables
and nodes.
"""

from dataclasses import fields
from enum import Enum
from typing import Any, List, Optional


class ModelNode:
    """Mixin providing read/write access by field name."""

    def field_names(self) -> List[str]:
        """Names of the node's settable fields, in declaration order."""
        return [f.name for f in fields(self)]

    def has_field(self, key: str) -> bool:
        return key in self.field_names()

    def read(self, key: str) -> Any:
        """
        Read a field value.

        Args:
            key: Field name

        Returns:
            The stored value, or None if absent or not a field of this node
        """
        if not self.has_field(key):
            return None
        return getattr(self, key)

    def read_string(self, key: str) -> Optional[str]:
        """Read a field and coerce it to its textual form."""
        value = self.read(key)
        if value is None:
            return None
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, bool):
            return "yes" if value else "no"
        if isinstance(value, (list, tuple)):
            return ", ".join(str(v) for v in value)
        return str(value)

    def read_array(self, key: str) -> Optional[List[Any]]:
        """Read a field as a list; scalar values are wrapped."""
        value = self.read(key)
        if value is None:
            return None
        if isinstance(value, (list, tuple)):
            return list(value)
        return [value]

    def write(self, key: str, value: Any) -> None:
        """
        Set a field value. No validation is performed on the value.

        Raises:
            KeyError: If the node has no field with this name
        """
        if not self.has_field(key):
            raise KeyError(f"{type(self).__name__} has no field '{key}'")
        setattr(self, key, value)
