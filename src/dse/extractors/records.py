# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Model class and field extraction."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from dse.entities import PROPERTY_TYPE_TAG, Field, RecordType
from dse.imports import DEFAULT_IMPORT_SCAN_LIMIT, ImportAliases, resolve_imports
from dse.matchers import (
    ClassDeclaration,
    FieldAssignment,
    is_property_decorator,
    match_class_declaration,
    match_decorator,
    match_field_assignment,
    match_meta_class,
    match_method_declaration,
)
from dse.source import (
    SourceReadError,
    SourceText,
    indentation_of,
    is_blank,
    is_comment,
    paren_balance,
    read_source,
)

logger = logging.getLogger(__name__)

MAX_CLASS_HEADER_LINES = 20


@dataclass(frozen=True)
class _ClassHeader:
    line: int
    end_line: int
    declaration: ClassDeclaration


@dataclass
class _OpenField:
    name: str
    type_tag: str
    line: int
    depth: int


@dataclass
class _RecordBuilder:
    name: str
    line: int
    indent: int
    fields: list[Field] = field(default_factory=list)


class RecordExtractor:
    """Extract model classes and their fields from a models module."""

    def __init__(self, import_scan_limit: int = DEFAULT_IMPORT_SCAN_LIMIT) -> None:
        """Initialize the extractor.

        Args:
            import_scan_limit: Leading lines searched for import aliases.

        Raises:
            ValueError: If ``import_scan_limit`` is negative.
        """
        if import_scan_limit < 0:
            raise ValueError("import_scan_limit must be >= 0")
        self._import_scan_limit = import_scan_limit

    def extract(self, file_path: Path) -> list[RecordType]:
        """Extract model classes from a file.

        Args:
            file_path: Models module to scan.

        Returns:
            Model classes in declaration order; empty if the file cannot be read.
        """
        try:
            source = read_source(file_path)
        except SourceReadError as exc:
            logger.warning(f"Skipping model scan due to read failure (file_path={file_path} error={exc})")
            return []
        return self.extract_source(source)

    def extract_source(self, source: SourceText) -> list[RecordType]:
        """Extract model classes from loaded source.

        Args:
            source: Source text of a models module.

        Returns:
            Model classes in declaration order.
        """
        lines = source.lines
        aliases = resolve_imports(lines, limit=self._import_scan_limit)
        headers = collect_class_headers(lines)
        record_names = record_closure(headers, aliases)
        if not record_names:
            return []
        scanner = _FieldScanner(
            headers={header.line: header for header in headers},
            record_names=record_names,
            aliases=aliases,
        )
        for index, line in enumerate(lines):
            scanner.feed(index, line)
        records = scanner.finish()
        logger.debug(
            f"Model scan completed (file_path={source.path} records={len(records)})"
        )
        return records


def collect_class_headers(lines: Sequence[str]) -> list[_ClassHeader]:
    """Collect top-level class headers, joining multi-line base lists.

    Args:
        lines: Raw source lines.

    Returns:
        Complete top-level class headers in source order.
    """
    headers: list[_ClassHeader] = []
    index = 0
    while index < len(lines):
        if not lines[index].startswith("class"):
            index += 1
            continue
        declaration = match_class_declaration(lines[index])
        end = index
        while (
            declaration is not None
            and not declaration.complete
            and end + 1 < len(lines)
            and end - index < MAX_CLASS_HEADER_LINES
        ):
            end += 1
            declaration = match_class_declaration("\n".join(lines[index : end + 1]))
        if declaration is not None and declaration.complete:
            headers.append(_ClassHeader(line=index, end_line=end, declaration=declaration))
            index = end + 1
        else:
            index += 1
    return headers


def record_closure(headers: Sequence[_ClassHeader], aliases: ImportAliases) -> set[str]:
    """Return names of classes deriving from ``Model`` directly or through local classes.

    Args:
        headers: Top-level class headers of one module.
        aliases: Import bindings of the same module.

    Returns:
        Names of model classes declared in the module.
    """
    root_names = aliases.root_base_names()
    names = {
        header.declaration.name
        for header in headers
        if any(base in root_names for base in header.declaration.bases)
    }
    changed = True
    while changed:
        changed = False
        for header in headers:
            if header.declaration.name in names:
                continue
            if any(base in names for base in header.declaration.bases):
                names.add(header.declaration.name)
                changed = True
    return names


class _FieldScanner:
    """Walk lines once, tracking which model body and field the cursor is in."""

    def __init__(
        self,
        headers: dict[int, _ClassHeader],
        record_names: set[str],
        aliases: ImportAliases,
    ) -> None:
        self._headers = headers
        self._record_names = record_names
        self._aliases = aliases
        self._field_namespaces = aliases.field_namespaces()
        self._records: list[RecordType] = []
        self._current: _RecordBuilder | None = None
        self._body_start = 0
        self._member_indent: int | None = None
        self._last_field_indent: int | None = None
        self._in_meta = False
        self._pending_property = False
        self._open_field: _OpenField | None = None

    def feed(self, index: int, line: str) -> None:
        """Advance the scanner by one line."""
        if self._current is not None and index < self._body_start:
            return
        if self._open_field is not None:
            self._continue_field(line)
            return
        if is_blank(line):
            return
        indent = indentation_of(line)
        if is_comment(line):
            if self._current is not None and indent > self._current.indent:
                self._pending_property = False
            return
        if self._current is not None and indent <= self._current.indent:
            self._close_record()
        if self._current is None:
            self._open_record(index)
            return
        self._scan_member(index, line, indent)

    def finish(self) -> list[RecordType]:
        """Flush the record and field still open at end of file."""
        if self._open_field is not None:
            self._finalize_field()
        if self._current is not None:
            self._close_record()
        return list(self._records)

    def _open_record(self, index: int) -> None:
        header = self._headers.get(index)
        if header is None or header.declaration.name not in self._record_names:
            return
        self._current = _RecordBuilder(
            name=header.declaration.name,
            line=header.line,
            indent=header.declaration.indent,
        )
        self._body_start = header.end_line + 1
        self._member_indent = None
        self._last_field_indent = None
        self._in_meta = False
        self._pending_property = False

    def _close_record(self) -> None:
        builder = self._current
        if builder is None:
            return
        record = RecordType(
            name=builder.name, declaration_line=builder.line, fields=tuple(builder.fields)
        )
        # A redefinition shadows the earlier class, as at import time.
        self._records = [r for r in self._records if r.name != record.name]
        self._records.append(record)
        self._current = None
        self._pending_property = False
        self._in_meta = False

    def _scan_member(self, index: int, line: str, indent: int) -> None:
        builder = self._current
        if builder is None:
            return
        # Meta suspends collection until the record itself ends.
        if self._in_meta:
            return
        if self._member_indent is None or indent < self._member_indent:
            self._member_indent = indent
        if indent > self._member_indent:
            self._pending_property = False
            return
        if match_meta_class(line) is not None:
            self._in_meta = True
            self._pending_property = False
            return
        if is_property_decorator(line):
            self._pending_property = True
            return
        if match_decorator(line) is not None:
            return
        method = match_method_declaration(line)
        if method is not None:
            if self._pending_property:
                builder.fields.append(
                    Field(
                        name=method.name,
                        type_tag=PROPERTY_TYPE_TAG,
                        declaration_line=index,
                        is_computed=True,
                    )
                )
            self._pending_property = False
            return
        self._pending_property = False
        assignment = match_field_assignment(line)
        if assignment is None:
            return
        type_tag = self._type_tag(assignment)
        if type_tag is None:
            return
        self._last_field_indent = indent
        self._open_field = _OpenField(
            name=assignment.name, type_tag=type_tag, line=index, depth=paren_balance(line)
        )
        if self._open_field.depth <= 0:
            self._finalize_field()

    def _type_tag(self, assignment: FieldAssignment) -> str | None:
        namespace = assignment.namespace
        if namespace is not None and namespace in self._field_namespaces:
            return assignment.constructor
        if namespace is None and self._aliases.is_imported_symbol(assignment.constructor):
            return assignment.constructor
        # Looser fallback: at most one qualifier, aligned with the last field.
        if self._last_field_indent == assignment.indent and (
            namespace is None or "." not in namespace
        ):
            return assignment.constructor
        return None

    def _continue_field(self, line: str) -> None:
        open_field = self._open_field
        if open_field is None:
            return
        open_field.depth += paren_balance(line)
        if open_field.depth <= 0:
            self._finalize_field()

    def _finalize_field(self) -> None:
        open_field = self._open_field
        self._open_field = None
        if open_field is None or self._current is None:
            return
        self._current.fields.append(
            Field(
                name=open_field.name,
                type_tag=open_field.type_tag,
                declaration_line=open_field.line,
            )
        )
