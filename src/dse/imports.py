# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Import alias discovery for model modules."""

import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

DEFAULT_IMPORT_SCAN_LIMIT = 30
MODELS_NAMESPACE = "models"
ROOT_BASE_MARKER = "Model"

_IMPORT_RE = re.compile(r"^[ \t]*import\s+(?P<items>.+)$")
_FROM_IMPORT_RE = re.compile(r"^[ \t]*from\s+(?P<module>\.*[\w.]*)\s+import\s+(?P<items>.+)$")
_ITEM_RE = re.compile(r"^(?P<name>[\w.]+)(?:\s+as\s+(?P<alias>\w+))?$")


@dataclass(frozen=True)
class ImportedSymbol:
    """Represent a name bound by ``from module import name``.

    Attributes:
        module: Module the name is imported from, as written.
        name: Name inside that module (before any ``as`` rename).
    """

    module: str
    name: str


@dataclass(frozen=True)
class ImportAliases:
    """Represent import bindings found at the top of a module.

    Attributes:
        module_aliases: Bound name to module path for ``import module [as alias]``.
        symbols: Bound name to origin for ``from module import name [as alias]``.
    """

    module_aliases: Mapping[str, str] = field(default_factory=dict)
    symbols: Mapping[str, ImportedSymbol] = field(default_factory=dict)

    def models_namespaces(self) -> frozenset[str]:
        """Return names bound to a ``models`` module, ``models`` included."""
        namespaces = {MODELS_NAMESPACE}
        namespaces.update(
            alias
            for alias, module in self.module_aliases.items()
            if _is_models_module(module)
        )
        namespaces.update(
            bound for bound, symbol in self.symbols.items() if symbol.name == MODELS_NAMESPACE
        )
        return frozenset(namespaces)

    def field_namespaces(self) -> frozenset[str]:
        """Return namespaces accepted as qualifiers of field constructors.

        Plain ``import module`` bindings only count when they name a models
        module; any ``import module as alias`` binding counts.
        """
        renamed = {alias for alias, module in self.module_aliases.items() if alias != module}
        return self.models_namespaces() | frozenset(renamed)

    def root_base_names(self) -> frozenset[str]:
        """Return every spelling of the root model base class in this module."""
        names = {f"{namespace}.{ROOT_BASE_MARKER}" for namespace in self.models_namespaces()}
        names.update(
            bound for bound, symbol in self.symbols.items() if symbol.name == ROOT_BASE_MARKER
        )
        return frozenset(names)

    def is_imported_symbol(self, name: str) -> bool:
        """Return whether ``name`` was bound by a from-import."""
        return name in self.symbols


def resolve_imports(
    lines: Sequence[str], limit: int = DEFAULT_IMPORT_SCAN_LIMIT
) -> ImportAliases:
    """Collect import bindings from the first lines of a module.

    A parenthesized import list that starts inside the window is read to its
    closing parenthesis even when that lies past the window.

    Args:
        lines: Raw source lines.
        limit: Number of leading lines to inspect.

    Returns:
        Discovered import bindings.

    Raises:
        ValueError: If ``limit`` is negative.
    """
    if limit < 0:
        raise ValueError("limit must be >= 0")
    module_aliases: dict[str, str] = {}
    symbols: dict[str, ImportedSymbol] = {}
    index = 0
    end = min(limit, len(lines))
    while index < end:
        line = _strip_comment(lines[index])
        index += 1
        from_match = _FROM_IMPORT_RE.match(line)
        if from_match is not None:
            items = from_match.group("items").strip()
            while _continues(items) and index < len(lines):
                items = items.rstrip("\\") + " " + _strip_comment(lines[index]).strip()
                index += 1
            module = from_match.group("module")
            for name, alias in _parse_items(items):
                if name == "*":
                    continue
                symbols[alias or name] = ImportedSymbol(module=module, name=name)
            continue
        import_match = _IMPORT_RE.match(line)
        if import_match is not None:
            for name, alias in _parse_items(import_match.group("items")):
                module_aliases[alias or name] = name
    logger.debug(
        f"Resolved imports (modules={len(module_aliases)} symbols={len(symbols)} lines={end})"
    )
    return ImportAliases(module_aliases=module_aliases, symbols=symbols)


def _continues(items: str) -> bool:
    if items.endswith("\\"):
        return True
    return items.count("(") > items.count(")")


def _parse_items(items: str) -> list[tuple[str, str | None]]:
    parsed: list[tuple[str, str | None]] = []
    for raw in items.replace("(", " ").replace(")", " ").replace("\\", " ").split(","):
        item = " ".join(raw.split())
        if item == "*":
            parsed.append(("*", None))
            continue
        match = _ITEM_RE.match(item)
        if match is not None:
            parsed.append((match.group("name"), match.group("alias")))
    return parsed


def _strip_comment(line: str) -> str:
    return line.split("#", 1)[0].rstrip()


def _is_models_module(module: str) -> bool:
    return module == MODELS_NAMESPACE or module.endswith(f".{MODELS_NAMESPACE}")
