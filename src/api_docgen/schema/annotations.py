"""Field annotation mini-language.

An annotation is a comma separated token string attached to a field::

    "required,enum=asc|desc,min=1,max=100,default=50,format=int32"

``required`` is the only bare token; everything else is ``key=value``.
Unknown keys and malformed tokens are dropped rather than rejected so that
newer annotations keep working against older generators. Dropped tokens are
kept on :attr:`FieldAnnotation.ignored` and logged at DEBUG level.
"""

import logging
import math
from typing import Any

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

Number = int | float | str


class FieldAnnotation(BaseModel):
    """Parsed form of one annotation string."""

    required: bool = False
    enum: list[str] | None = None
    minimum: Number | None = None
    maximum: Number | None = None
    min_length: Number | None = None
    max_length: Number | None = None
    pattern: str | None = None
    default: str | None = None  # raw, coerced once the field type is known
    example: str | None = None  # raw, same as default
    description: str | None = None
    format: str | None = None
    ignored: list[str] = Field(default_factory=list)


def parse_annotation(tag: str) -> FieldAnnotation:
    """Parse an annotation string into a :class:`FieldAnnotation`."""
    ann = FieldAnnotation()
    for part in tag.split(","):
        part = part.strip()
        if not part:
            continue

        if part == "required":
            ann.required = True
            continue

        key, sep, value = part.partition("=")
        if not sep:
            ann.ignored.append(part)
            continue

        key = key.strip()
        value = value.strip()

        if key == "enum":
            ann.enum = value.split("|")
        elif key in ("min", "minimum"):
            ann.minimum = parse_number(value)
        elif key in ("max", "maximum"):
            ann.maximum = parse_number(value)
        elif key == "minLength":
            ann.min_length = parse_number(value)
        elif key == "maxLength":
            ann.max_length = parse_number(value)
        elif key == "pattern":
            ann.pattern = value
        elif key == "default":
            ann.default = value
        elif key == "example":
            ann.example = value
        elif key == "description":
            ann.description = value
        elif key == "format":
            ann.format = value
        else:
            ann.ignored.append(part)

    if ann.ignored:
        logger.debug("ignored annotation tokens %r in %r", ann.ignored, tag)
    return ann


def apply_annotation(
    schema: dict[str, Any],
    ann: FieldAnnotation,
    required: list[str],
    field_name: str,
) -> dict[str, Any]:
    """Merge ``ann`` into ``schema`` in place.

    ``required`` is the enclosing record's accumulator; ``field_name`` is
    appended to it when the annotation carries the ``required`` token.
    """
    if ann.required and field_name not in required:
        required.append(field_name)

    schema_type = schema.get("type", "object")
    if ann.enum is not None:
        schema["enum"] = list(ann.enum)
    if ann.minimum is not None:
        schema["minimum"] = ann.minimum
    if ann.maximum is not None:
        schema["maximum"] = ann.maximum
    if ann.min_length is not None:
        schema["minLength"] = ann.min_length
    if ann.max_length is not None:
        schema["maxLength"] = ann.max_length
    if ann.pattern is not None:
        schema["pattern"] = ann.pattern
    if ann.default is not None:
        schema["default"] = parse_value(ann.default, schema_type)
    if ann.description is not None:
        schema["description"] = ann.description
    if ann.format is not None:
        schema["format"] = ann.format
    if ann.example is not None:
        schema["example"] = parse_value(ann.example, schema_type)
    return schema


def parse_number(s: str) -> Number:
    """Parse ``s`` as an int, else a finite float, else return it unchanged."""
    try:
        return int(s)
    except ValueError:
        pass
    try:
        f = float(s)
    except ValueError:
        return s
    if not math.isfinite(f):
        return s
    return f


def parse_value(s: str, schema_type: str) -> Any:
    """Coerce a ``default``/``example`` literal to the field's JSON type."""
    if schema_type == "integer":
        try:
            return int(s)
        except ValueError:
            return parse_number(s)
    if schema_type == "number":
        return parse_number(s)
    if schema_type == "boolean":
        return s == "true"
    return s
