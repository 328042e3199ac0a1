# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Line-level declaration matchers.

Each matcher inspects one (logical) line and returns a frozen match object with
the captured parts, or ``None`` when the line is not the idiom it recognizes.
Matchers hold no state; ordering and multi-line handling belong to extractors.
"""

import re
from dataclasses import dataclass
from typing import Literal

from dse.source import indentation_of

RouteStyle = Literal["path", "re_path", "url"]

PROPERTY_DECORATORS: frozenset[str] = frozenset({"property", "cached_property"})

_CLASS_RE = re.compile(r"^(?P<indent>[ \t]*)class\s+(?P<name>\w+)\s*(?P<rest>.*)$", re.DOTALL)
_DECORATOR_RE = re.compile(
    r"^(?P<indent>[ \t]*)@(?P<name>\w+(?:\.\w+)*)\s*(?:\((?P<arguments>.*)\))?\s*(?:#.*)?$"
)
_METHOD_RE = re.compile(r"^(?P<indent>[ \t]*)(?:async\s+)?def\s+(?P<name>\w+)\s*\(")
_FIELD_RE = re.compile(
    r"^(?P<indent>[ \t]*)(?P<name>\w+)\s*(?::[^=]+)?=(?!=)\s*(?P<callee>\w+(?:\.\w+)*)\s*\("
)
_QUOTED = r"[rR]?(?P<quote>['\"])(?P<pattern>.*?)(?P=quote)"
_TARGET = r"\s*,\s*(?!include\s*\()(?P<target>\w+(?:\.\w+)*)"
_ROUTE_RES: tuple[tuple[RouteStyle, re.Pattern[str]], ...] = (
    ("path", re.compile(r"\bpath\s*\(\s*" + _QUOTED + _TARGET)),
    ("re_path", re.compile(r"\bre_path\s*\(\s*" + _QUOTED + _TARGET)),
    ("url", re.compile(r"\burl\s*\(\s*" + _QUOTED + _TARGET)),
)
_INCLUDE_RE = re.compile(
    r"\binclude\s*\(\s*\(?\s*[rR]?(?P<q1>['\"])(?P<module>[\w.]+)(?P=q1)"
    r"\s*(?:,\s*(?P<q2>['\"])(?P<namespace>.*?)(?P=q2)\s*)?\)"
)
_INCLUDE_ROUTE_RE = re.compile(
    r"\b(?:re_path|path|url)\s*\(\s*" + _QUOTED + r"\s*,\s*include\s*\("
)
_CONFIG_RE = re.compile(r"^(?P<key>[A-Z_][A-Z0-9_]*)\s*=(?!=)\s*(?P<value>.+)$")
_ADMIN_CLASS_RE = re.compile(
    r"^(?P<indent>[ \t]*)class\s+(?P<name>\w+)\s*\(\s*(?:\w+\.)*(?P<base>\w*(?:Admin|Inline))\s*\)\s*:"
)
_REGISTER_CALL_RE = re.compile(
    r"\badmin\.site\.register\s*\(\s*(?P<model>\w+)(?:\s*,\s*(?P<admin>\w+))?\s*\)"
)
_REGISTER_DECORATOR_RE = re.compile(
    r"^[ \t]*@admin\.register\s*\(\s*(?P<model>\w+)\s*(?:,[^)]*)?\)"
)
_MODEL_ASSIGNMENT_RE = re.compile(r"^[ \t]+model\s*=(?!=)\s*(?P<model>\w+)")


@dataclass(frozen=True)
class ClassDeclaration:
    """Represent a ``class`` header.

    Attributes:
        name: Declared class name.
        indent: Indentation width of the header.
        bases: Positional base expressions, stripped, keyword arguments dropped.
        complete: Whether the header closes (``:``) within the matched text.
    """

    name: str
    indent: int
    bases: tuple[str, ...]
    complete: bool


@dataclass(frozen=True)
class DecoratorMatch:
    """Represent a decorator line."""

    name: str
    indent: int
    arguments: str | None


@dataclass(frozen=True)
class MethodDeclaration:
    """Represent a ``def``/``async def`` header."""

    name: str
    indent: int


@dataclass(frozen=True)
class FieldAssignment:
    """Represent ``name = [namespace.]Constructor(`` at the start of a line.

    Attributes:
        name: Assigned attribute name.
        indent: Indentation width of the line.
        namespace: Dotted prefix of the callee; ``None`` for a bare name.
        constructor: Last segment of the callee.
    """

    name: str
    indent: int
    namespace: str | None
    constructor: str


@dataclass(frozen=True)
class RouteMatch:
    """Represent a direct route declaration."""

    pattern: str
    target: str
    style: RouteStyle


@dataclass(frozen=True)
class IncludeMatch:
    """Represent an ``include(...)`` directive.

    Attributes:
        module: Dotted module reference of the included route table.
        namespace: Second literal argument of ``include``, if any.
        route_prefix: Literal pattern of the enclosing route call, if any.
    """

    module: str
    namespace: str | None
    route_prefix: str | None

    @property
    def prefix(self) -> str:
        """Return the prefix this include adds to nested patterns."""
        if self.route_prefix is not None:
            return self.route_prefix
        return self.namespace or ""


@dataclass(frozen=True)
class ConfigKeyMatch:
    """Represent ``KEY = value`` before comment stripping."""

    key: str
    value: str


@dataclass(frozen=True)
class AdminClassMatch:
    """Represent a class deriving from one ``*Admin``/``*Inline`` base."""

    name: str
    base: str


@dataclass(frozen=True)
class RegisterCallMatch:
    """Represent ``admin.site.register(Model[, AdminClass])``."""

    model: str
    admin_class: str | None


def match_class_declaration(text: str) -> ClassDeclaration | None:
    """Match a class header, possibly joined from several physical lines.

    Args:
        text: One line, or consecutive lines joined with ``"\\n"``.

    Returns:
        Class declaration, or ``None`` if the text is not a class header.
    """
    match = _CLASS_RE.match(text)
    if match is None:
        return None
    name = match.group("name")
    indent = indentation_of(match.group("indent"))
    rest = "\n".join(part.split("#", 1)[0] for part in match.group("rest").split("\n"))
    if rest.startswith(":"):
        return ClassDeclaration(name=name, indent=indent, bases=(), complete=True)
    if not rest.startswith("("):
        return None
    close_index = _matching_paren(rest)
    if close_index is None:
        return ClassDeclaration(name=name, indent=indent, bases=(), complete=False)
    complete = rest[close_index + 1 :].lstrip().startswith(":")
    return ClassDeclaration(
        name=name,
        indent=indent,
        bases=_split_bases(rest[1:close_index]),
        complete=complete,
    )


def match_meta_class(line: str) -> ClassDeclaration | None:
    """Match a nested ``class Meta:`` header."""
    declaration = match_class_declaration(line)
    if declaration is None or declaration.name != "Meta":
        return None
    return declaration


def match_decorator(line: str) -> DecoratorMatch | None:
    """Match a decorator standing alone on its line."""
    match = _DECORATOR_RE.match(line)
    if match is None:
        return None
    return DecoratorMatch(
        name=match.group("name"),
        indent=indentation_of(match.group("indent")),
        arguments=match.group("arguments"),
    )


def is_property_decorator(line: str) -> bool:
    """Return whether the line is a bare ``@property``-style decorator.

    ``functools.cached_property`` and similar qualified spellings also count.
    """
    decorator = match_decorator(line)
    if decorator is None or decorator.arguments is not None:
        return False
    return decorator.name.rsplit(".", 1)[-1] in PROPERTY_DECORATORS


def match_method_declaration(line: str) -> MethodDeclaration | None:
    """Match a ``def`` or ``async def`` header."""
    match = _METHOD_RE.match(line)
    if match is None:
        return None
    return MethodDeclaration(
        name=match.group("name"), indent=indentation_of(match.group("indent"))
    )


def match_field_assignment(line: str) -> FieldAssignment | None:
    """Match an assignment whose value starts with a call.

    Args:
        line: One raw source line.

    Returns:
        Field assignment with the callee split into namespace and constructor.
    """
    match = _FIELD_RE.match(line)
    if match is None:
        return None
    namespace, _, constructor = match.group("callee").rpartition(".")
    return FieldAssignment(
        name=match.group("name"),
        indent=indentation_of(match.group("indent")),
        namespace=namespace or None,
        constructor=constructor,
    )


def match_route(line: str) -> RouteMatch | None:
    """Match a direct route, trying path, re_path and url styles in order."""
    for style, pattern in _ROUTE_RES:
        match = pattern.search(line)
        if match is not None:
            return RouteMatch(
                pattern=match.group("pattern"),
                target=match.group("target"),
                style=style,
            )
    return None


def match_include(line: str) -> IncludeMatch | None:
    """Match an ``include('module'[, 'prefix'])`` directive."""
    match = _INCLUDE_RE.search(line)
    if match is None:
        return None
    route = _INCLUDE_ROUTE_RE.search(line)
    return IncludeMatch(
        module=match.group("module"),
        namespace=match.group("namespace"),
        route_prefix=route.group("pattern") if route is not None else None,
    )


def match_config_key(line: str) -> ConfigKeyMatch | None:
    """Match a top-level ``UPPER_NAME = value`` line."""
    match = _CONFIG_RE.match(line)
    if match is None:
        return None
    return ConfigKeyMatch(key=match.group("key"), value=match.group("value").strip())


def match_admin_class(line: str) -> AdminClassMatch | None:
    """Match ``class Name(admin.ModelAdmin):`` style declarations."""
    match = _ADMIN_CLASS_RE.match(line)
    if match is None:
        return None
    return AdminClassMatch(name=match.group("name"), base=match.group("base"))


def match_register_call(line: str) -> RegisterCallMatch | None:
    """Match ``admin.site.register(Model[, AdminClass])``."""
    match = _REGISTER_CALL_RE.search(line)
    if match is None:
        return None
    return RegisterCallMatch(model=match.group("model"), admin_class=match.group("admin"))


def match_register_decorator(line: str) -> str | None:
    """Return the model named by an ``@admin.register(Model)`` line."""
    match = _REGISTER_DECORATOR_RE.match(line)
    return match.group("model") if match is not None else None


def match_model_assignment(line: str) -> str | None:
    """Return the model named by an indented ``model = Name`` line."""
    match = _MODEL_ASSIGNMENT_RE.match(line)
    return match.group("model") if match is not None else None


def _matching_paren(text: str) -> int | None:
    depth = 0
    for index, char in enumerate(text):
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return index
    return None


def _split_bases(inner: str) -> tuple[str, ...]:
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for char in inner:
        if char in "([{":
            depth += 1
        elif char in ")]}":
            depth -= 1
        if char == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    bases = []
    for part in parts:
        base = "".join(part.split())
        if not base or "=" in base or base.startswith("*"):
            continue
        bases.append(base)
    return tuple(bases)
