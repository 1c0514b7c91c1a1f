"""Declarative field schemas for widget instances.

A schema is the single source of truth for an instance's shape: the server
validates and sanitizes submissions against it, and the same definition
(exported as JSON) drives defaults and coercion for the control's model.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, Optional

from django.core.exceptions import ImproperlyConfigured, ValidationError

from .sanitizers import sanitize_text_field, sanitize_url

logger = logging.getLogger(__name__)

STRING = "string"
INTEGER = "integer"
BOOLEAN = "boolean"
FIELD_TYPES = {STRING: str, INTEGER: int, BOOLEAN: bool}

URI = "uri"
FIELD_FORMATS = {URI}

_INTEGER_RE = re.compile(r"^[+-]?\d+$")
_LEADING_INTEGER_RE = re.compile(r"^\s*([+-]?\d+)")
_TRUE_STRINGS = {"1", "true"}
_FALSE_STRINGS = {"", "0", "false"}


@dataclass(frozen=True)
class Field:
    name: str
    type: str
    default: Any
    enum: Optional[tuple] = None
    format: Optional[str] = None
    minimum: Optional[int] = None
    maximum: Optional[int] = None
    sanitize: Optional[Callable[[Any], Any]] = None
    description: str = ""
    # Name of the matching prop in the media picker's vocabulary.
    media_prop: Optional[str] = None
    should_preview_update: bool = True
    reset_on_media_change: bool = False

    def __post_init__(self):
        if self.type not in FIELD_TYPES:
            raise ImproperlyConfigured(f"Field '{self.name}' has unknown type '{self.type}'.")
        if self.format is not None and self.format not in FIELD_FORMATS:
            raise ImproperlyConfigured(f"Field '{self.name}' has unknown format '{self.format}'.")
        if self.enum is not None:
            object.__setattr__(self, "enum", tuple(self.enum))
        if not _is_of_type(self.default, self.type):
            raise ImproperlyConfigured(
                f"Default for field '{self.name}' must be of type {self.type}."
            )

    def validate(self, value: Any) -> Any:
        """Type, enum, range and format checks. Returns the typed value."""
        if self.type == BOOLEAN:
            typed = _validate_boolean(value)
        elif self.type == INTEGER:
            typed = _validate_integer(value)
        elif isinstance(value, str):
            typed = value
        else:
            raise ValidationError(f"{self.name} must be a string.", code="type")

        if self.enum is not None and typed not in self.enum:
            raise ValidationError(f"{typed!r} is not an allowed {self.name}.", code="enum")
        if self.minimum is not None and typed < self.minimum:
            raise ValidationError(f"{self.name} must be at least {self.minimum}.", code="minimum")
        if self.maximum is not None and typed > self.maximum:
            raise ValidationError(f"{self.name} must be at most {self.maximum}.", code="maximum")
        return typed

    def clean(self, value: Any) -> Any:
        typed = self.validate(value)
        sanitizer = self.sanitize or _default_sanitizer(self)
        if sanitizer is None:
            return typed
        return sanitizer(typed)

    def coerce(self, value: Any) -> Any:
        """Loose client-side coercion: never rejects, only converts."""
        if self.type == BOOLEAN:
            return coerce_boolean(value)
        if self.type == INTEGER:
            if isinstance(value, bool):
                return int(value)
            if isinstance(value, int):
                return value
            if isinstance(value, float):
                return int(value)
            match = _LEADING_INTEGER_RE.match(str(value)) if value is not None else None
            return int(match.group(1)) if match else self.default
        if value is None:
            return ""
        if isinstance(value, bool):
            return "1" if value else ""
        return str(value)

    def export(self) -> dict:
        exported = {"type": self.type, "default": self.default}
        if self.enum is not None:
            exported["enum"] = list(self.enum)
        if self.minimum is not None:
            exported["minimum"] = self.minimum
        if self.maximum is not None:
            exported["maximum"] = self.maximum
        if self.format:
            exported["format"] = self.format
        if self.media_prop:
            exported["media_prop"] = self.media_prop
        exported["should_preview_update"] = self.should_preview_update
        if self.reset_on_media_change:
            exported["reset_on_media_change"] = True
        return exported


class FieldSchema:
    def __init__(self, fields: Iterable[Field]):
        self._fields: dict[str, Field] = {}
        for field in fields:
            if field.name in self._fields:
                raise ImproperlyConfigured(f"Duplicate schema field '{field.name}'.")
            self._fields[field.name] = field

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __getitem__(self, name: str) -> Field:
        return self._fields[name]

    def __iter__(self) -> Iterator[Field]:
        return iter(self._fields.values())

    def __len__(self) -> int:
        return len(self._fields)

    def names(self) -> list[str]:
        return list(self._fields)

    def extend(self, fields: Iterable[Field]) -> "FieldSchema":
        """New schema with `fields` appended; same-named fields are replaced in place."""
        merged = dict(self._fields)
        for field in fields:
            merged[field.name] = field
        return FieldSchema(merged.values())

    def defaults(self) -> dict:
        return {name: field.default for name, field in self._fields.items()}

    def with_defaults(self, instance: Optional[dict]) -> dict:
        merged = self.defaults()
        for name, value in (instance or {}).items():
            if name in self._fields:
                merged[name] = value
        return merged

    def update(self, raw: dict, previous: Optional[dict]) -> dict:
        """Partial update: only present, valid, sanitized fields replace previous values.

        Keys outside the schema are dropped, keys missing from `raw` keep their
        previous value, and a field that fails validation or sanitizing keeps its
        previous value (or stays absent).
        """
        result = dict(previous or {})
        for name, value in (raw or {}).items():
            field = self._fields.get(name)
            if field is None:
                logger.debug("Ignoring unknown field %r", name)
                continue
            try:
                result[name] = field.clean(value)
            except ValidationError as exc:
                logger.debug("Rejected %r for field %r: %s", value, name, "; ".join(exc.messages))
        return result

    def coerce(self, name: str, value: Any) -> Any:
        return self._fields[name].coerce(value)

    def export(self) -> dict:
        return {name: field.export() for name, field in self._fields.items()}


def coerce_boolean(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return value is True or value == 1


def _is_of_type(value: Any, field_type: str) -> bool:
    if field_type == INTEGER:
        return isinstance(value, int) and not isinstance(value, bool)
    return isinstance(value, FIELD_TYPES[field_type])


def _validate_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ValidationError(f"{value!r} is not a boolean.", code="type")


def _validate_integer(value: Any) -> int:
    if isinstance(value, bool):
        raise ValidationError("Booleans are not integers.", code="type")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and _INTEGER_RE.match(value.strip()):
        return int(value.strip())
    raise ValidationError(f"{value!r} is not an integer.", code="type")


def _default_sanitizer(field: Field) -> Optional[Callable[[Any], Any]]:
    if field.type != STRING or field.enum is not None:
        return None
    if field.format == URI:
        return sanitize_url
    return sanitize_text_field
