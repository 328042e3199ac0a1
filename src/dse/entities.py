# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Domain entities produced by the structure extractors."""

from dataclasses import dataclass, field
from pathlib import Path

PROPERTY_TYPE_TAG = "property"
DEFAULT_ADMIN_CLASS = "ModelAdmin"


@dataclass(frozen=True)
class Field:
    """Represent one field or computed property of a record type.

    Attributes:
        name: Attribute or method name.
        type_tag: Constructor name, or ``"property"`` for computed fields.
        declaration_line: Line where the declaration starts (0-based).
        is_computed: Whether the field is a decorated property method.
    """

    name: str
    type_tag: str
    declaration_line: int
    is_computed: bool = False


@dataclass(frozen=True)
class RecordType:
    """Represent one model class and its fields.

    Attributes:
        name: Class name.
        declaration_line: Line of the ``class`` header (0-based).
        fields: Fields in source declaration order.
    """

    name: str
    declaration_line: int
    fields: tuple[Field, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class RouteEntry:
    """Represent one URL pattern mapped to a handler reference.

    Attributes:
        pattern: URL pattern including the accumulated include prefix.
        target_name: Dotted handler reference as written in source.
        declaration_line: Line of the route call (0-based) in ``file_path``.
        file_path: File the route was declared in; ``None`` for in-memory text.
    """

    pattern: str
    target_name: str
    declaration_line: int
    file_path: Path | None = None


@dataclass(frozen=True)
class RegistrationEntry:
    """Represent one admin registration.

    Attributes:
        class_name: Admin class name.
        declaration_line: Line of the registering statement (0-based).
        associated_record_name: Registered model name; empty if unresolved.
    """

    class_name: str
    declaration_line: int
    associated_record_name: str = ""


@dataclass(frozen=True)
class ConfigEntry:
    """Represent one uppercase settings assignment."""

    key: str
    value: str
    declaration_line: int


@dataclass(frozen=True)
class HandlerEntry:
    """Represent one top-level view function or class."""

    name: str
    declaration_line: int
    is_class: bool
