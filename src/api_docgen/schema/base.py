"""Structural type descriptors.

Services that cannot (or would rather not) rely on dataclass / pydantic
introspection describe their payloads with these instead. The reflector
accepts both forms interchangeably, and a descriptor may point at a plain
Python type anywhere a type is expected.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

INTEGER_KINDS = frozenset({
    "int", "int8", "int16", "int32", "int64",
    "uint", "uint8", "uint16", "uint32", "uint64",
    "integer",
})
NUMBER_KINDS = frozenset({"float", "float32", "float64", "number"})
STRING_KINDS = frozenset({"str", "string"})
BOOLEAN_KINDS = frozenset({"bool", "boolean"})


@dataclass(frozen=True)
class Primitive:
    """A scalar kind such as ``"string"``, ``"int64"`` or ``"float32"``."""

    kind: str

    def json_type(self) -> str | None:
        kind = self.kind.lower()
        if kind in STRING_KINDS:
            return "string"
        if kind in INTEGER_KINDS:
            return "integer"
        if kind in NUMBER_KINDS:
            return "number"
        if kind in BOOLEAN_KINDS:
            return "boolean"
        return None


@dataclass(frozen=True)
class Sequence:
    item: Any


@dataclass(frozen=True)
class Mapping:
    value: Any


@dataclass
class FieldSpec:
    """One field of a :class:`Record`.

    ``wire_name`` follows the usual serialization-tag conventions: ``None``
    means "use ``name``", ``"-"`` or ``""`` suppresses the field, and
    anything after the first comma (``"id,omitempty"``) is a modifier.
    """

    name: str
    type: Any
    tag: str = ""
    doc: str = ""
    wire_name: str | None = None
    exported: bool = True
    optional: bool = False


@dataclass(eq=False)
class Record:
    """An ordered collection of fields.

    Identity based equality so that self-referencing records can be built by
    appending to ``fields`` after construction.
    """

    name: str
    fields: list[FieldSpec] = field(default_factory=list)

    def add(self, name: str, type: Any, **options: Any) -> Record:
        self.fields.append(FieldSpec(name=name, type=type, **options))
        return self


TypeDescriptor = Primitive | Sequence | Mapping | Record


def wire_name_of(name: str, wire_name: str | None) -> str | None:
    """Resolve the serialized name of a field, or None if it is suppressed."""
    if wire_name is None:
        return name
    if wire_name in ("", "-"):
        return None
    first = wire_name.split(",", 1)[0].strip()
    return first or name
