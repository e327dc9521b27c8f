"""Schema reflector. Turns Python types into JSON-Schema dicts.

Accepts dataclasses, pydantic models, builtin scalars and containers,
``typing`` generics and the descriptors from :mod:`api_docgen.schema.base`,
as well as example *values* of any of those (they are reflected through
their type). Reflection never raises: anything it cannot describe becomes
``{"type": "object"}``.
"""

import collections.abc
import dataclasses
import decimal
import inspect
import logging
import sys
import types
from typing import Annotated, Any, Iterator, Union, get_args, get_origin, get_type_hints

from pydantic import BaseModel

from api_docgen.schema.annotations import apply_annotation, parse_annotation
from api_docgen.schema.base import Mapping, Primitive, Record, Sequence, wire_name_of

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 32

RECURSIVE_REF_KEY = "x-recursive-ref"

_SEQUENCE_ORIGINS = (
    list, tuple, set, frozenset,
    collections.abc.Sequence, collections.abc.MutableSequence,
    collections.abc.Set, collections.abc.MutableSet,
    collections.abc.Iterable, collections.abc.Collection,
)
_MAPPING_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)

# (wire name, type, annotation string, doc string)
FieldInfo = tuple[str, Any, str, str]


def _object() -> dict[str, Any]:
    return {"type": "object"}


class SchemaReflector:
    """Reflects types into JSON-Schema dicts.

    Records currently being expanded are tracked so that self-referential
    types terminate: re-entering one yields a placeholder carrying
    ``x-recursive-ref``. ``max_depth`` bounds nesting independently of that.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH):
        self.max_depth = max_depth

    def reflect(self, value_or_type: Any) -> dict[str, Any]:
        if value_or_type is None:
            # A bare None says nothing about the shape it stands in for.
            return _object()
        return self._reflect(value_or_type, 0, [])

    def _reflect(self, target: Any, depth: int, stack: list[Any]) -> dict[str, Any]:
        if depth > self.max_depth:
            logger.debug("max depth %d reached, emitting placeholder", self.max_depth)
            return _object()

        target = _unwrap(target)
        if target is None or target is type(None):
            return _object()

        if isinstance(target, Primitive):
            json_type = target.json_type()
            return {"type": json_type} if json_type else _object()
        if isinstance(target, Sequence):
            return {"type": "array", "items": self._reflect(target.item, depth + 1, stack)}
        if isinstance(target, Mapping):
            return {
                "type": "object",
                "additionalProperties": self._reflect(target.value, depth + 1, stack),
            }
        if isinstance(target, Record):
            return self._record(target, target.name, _descriptor_fields(target), depth, stack)

        if _is_type_like(target):
            return self._reflect_type(target, depth, stack)
        return self._reflect_value(target, depth, stack)

    def _reflect_value(self, value: Any, depth: int, stack: list[Any]) -> dict[str, Any]:
        if isinstance(value, (list, tuple, set, frozenset)):
            items = self._reflect(next(iter(value)), depth + 1, stack) if value else _object()
            return {"type": "array", "items": items}
        if isinstance(value, dict):
            values = self._reflect(next(iter(value.values())), depth + 1, stack) if value else _object()
            return {"type": "object", "additionalProperties": values}
        return self._reflect_type(type(value), depth, stack)

    def _reflect_type(self, tp: Any, depth: int, stack: list[Any]) -> dict[str, Any]:
        if tp is Any:
            return _object()

        origin = get_origin(tp)
        if origin is not None:
            args = get_args(tp)
            if origin in _SEQUENCE_ORIGINS:
                return {"type": "array", "items": self._reflect(_item_type(origin, args), depth + 1, stack)}
            if origin in _MAPPING_ORIGINS:
                value_type = args[1] if len(args) == 2 else Any
                return {"type": "object", "additionalProperties": self._reflect(value_type, depth + 1, stack)}
            return _object()

        if not isinstance(tp, type):
            return _object()

        if issubclass(tp, bool):
            return {"type": "boolean"}
        if issubclass(tp, str):
            return {"type": "string"}
        if issubclass(tp, int):
            return {"type": "integer"}
        if issubclass(tp, (float, decimal.Decimal)):
            return {"type": "number"}
        if issubclass(tp, BaseModel):
            return self._record(tp, tp.__name__, _pydantic_fields(tp), depth, stack)
        if dataclasses.is_dataclass(tp):
            return self._record(tp, tp.__name__, _dataclass_fields(tp), depth, stack)
        if issubclass(tp, (list, tuple, set, frozenset)):
            return {"type": "array", "items": _object()}
        if issubclass(tp, dict):
            return {"type": "object", "additionalProperties": _object()}
        return _object()

    def _record(
        self,
        key: Any,
        name: str,
        fields: Iterator[FieldInfo],
        depth: int,
        stack: list[Any],
    ) -> dict[str, Any]:
        if any(entry is key for entry in stack):
            logger.debug("recursive reference to %s, emitting placeholder", name)
            return {"type": "object", RECURSIVE_REF_KEY: name}

        properties: dict[str, Any] = {}
        required: list[str] = []

        stack.append(key)
        try:
            for field_name, field_type, tag, doc in fields:
                field_schema = self._reflect(field_type, depth + 1, stack)
                if tag:
                    apply_annotation(field_schema, parse_annotation(tag), required, field_name)
                if doc:
                    field_schema["description"] = doc
                properties[field_name] = field_schema
        finally:
            stack.pop()

        schema: dict[str, Any] = {"type": "object", "properties": properties}
        if required:
            schema["required"] = required
        return schema


_default_reflector = SchemaReflector()


def reflect(value_or_type: Any) -> dict[str, Any]:
    """Reflect with the default :class:`SchemaReflector`."""
    return _default_reflector.reflect(value_or_type)


def _is_type_like(target: Any) -> bool:
    return target is Any or get_origin(target) is not None or isinstance(target, type)


def _unwrap(target: Any) -> Any:
    """Strip ``Annotated`` and ``Optional`` layers."""
    while True:
        origin = get_origin(target)
        if origin is Annotated:
            target = get_args(target)[0]
        elif origin is Union or origin is types.UnionType:
            members = [a for a in get_args(target) if a is not type(None)]
            if len(members) != 1:
                return Any
            target = members[0]
        else:
            return target


def _item_type(origin: Any, args: tuple[Any, ...]) -> Any:
    if not args:
        return Any
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return args[0]
        if any(arg != args[0] for arg in args[1:]):
            return Any
    return args[0]


def _type_hints(cls: type) -> dict[str, Any]:
    try:
        return get_type_hints(cls, include_extras=True)
    except (NameError, TypeError, AttributeError) as exc:
        logger.debug("could not resolve annotations of %s: %s", cls.__name__, exc)
        return _field_hints(cls)


def _field_hints(cls: type) -> dict[str, Any]:
    """Resolve annotations one at a time; unresolvable ones become Any."""
    hints: dict[str, Any] = {}
    for klass in reversed(cls.__mro__):
        module = sys.modules.get(klass.__module__)
        globalns = dict(vars(module)) if module is not None else {}
        localns = dict(vars(klass))
        for name, annotation in inspect.get_annotations(klass).items():
            if isinstance(annotation, str):
                try:
                    annotation = eval(annotation, globalns, localns)
                except (NameError, AttributeError, SyntaxError, TypeError) as exc:
                    logger.debug("could not resolve %s.%s: %s", cls.__name__, name, exc)
                    annotation = Any
            hints[name] = annotation
    return hints


def _descriptor_fields(record: Record) -> Iterator[FieldInfo]:
    for spec in list(record.fields):
        if not spec.exported:
            continue
        name = wire_name_of(spec.name, spec.wire_name)
        if name is None:
            continue
        yield name, spec.type, spec.tag, spec.doc


def _dataclass_fields(cls: type) -> Iterator[FieldInfo]:
    hints = _type_hints(cls)
    for f in dataclasses.fields(cls):
        if f.name.startswith("_"):
            continue
        name = wire_name_of(f.name, f.metadata.get("json"))
        if name is None:
            continue
        field_type = hints.get(f.name, f.type)
        if isinstance(field_type, str):
            # unresolvable string annotation
            field_type = Any
        yield name, field_type, str(f.metadata.get("openapi", "")), str(f.metadata.get("doc", ""))


def _pydantic_fields(cls: type[BaseModel]) -> Iterator[FieldInfo]:
    for attr, info in cls.model_fields.items():
        if attr.startswith("_") or info.exclude is True:
            continue
        name = info.serialization_alias or info.alias or attr
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        doc = extra.get("doc") or info.description or ""
        yield name, info.annotation, str(extra.get("openapi", "")), str(doc)
