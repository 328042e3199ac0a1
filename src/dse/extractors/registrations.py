# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Admin registration extraction."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from dse.entities import DEFAULT_ADMIN_CLASS, RegistrationEntry
from dse.matchers import (
    match_admin_class,
    match_class_declaration,
    match_decorator,
    match_model_assignment,
    match_register_call,
    match_register_decorator,
)
from dse.source import (
    SourceReadError,
    SourceText,
    indentation_of,
    is_blank,
    is_comment,
    read_source,
)

logger = logging.getLogger(__name__)

DEFAULT_MODEL_LOOKUP_LINES = 200
MAX_DECORATOR_GAP_LINES = 10


@dataclass(frozen=True)
class ModelLookupPolicy:
    """Control the forward search for ``model = Name`` below an admin class.

    Attributes:
        max_lines: Maximum number of lines searched after the class header.
        stop_at_class_end: Stop at the first line dedented to the header level.
    """

    max_lines: int = DEFAULT_MODEL_LOOKUP_LINES
    stop_at_class_end: bool = True

    def __post_init__(self) -> None:
        if self.max_lines < 0:
            raise ValueError("max_lines must be >= 0")

    def find_model(self, lines: Sequence[str], header_index: int) -> str:
        """Return the model assigned in the class body, or ``""``.

        Args:
            lines: Raw source lines.
            header_index: Line of the admin class header.

        Returns:
            Name assigned to ``model``; empty string when none is found.
        """
        header_indent = indentation_of(lines[header_index])
        end = min(len(lines), header_index + 1 + self.max_lines)
        for index in range(header_index + 1, end):
            line = lines[index]
            if is_blank(line) or is_comment(line):
                continue
            if self.stop_at_class_end and indentation_of(line) <= header_indent:
                break
            model = match_model_assignment(line)
            if model is not None:
                return model
        return ""


class RegistrationExtractor:
    """Extract admin classes and the models they are registered for."""

    def __init__(self, model_lookup: ModelLookupPolicy | None = None) -> None:
        """Initialize the extractor.

        Args:
            model_lookup: Policy of the ``model = Name`` search for admin classes.
        """
        self._model_lookup = model_lookup or ModelLookupPolicy()

    def extract(self, file_path: Path) -> list[RegistrationEntry]:
        """Extract registrations from an admin module.

        Args:
            file_path: ``admin.py`` style file to scan.

        Returns:
            Class-based, call-based then decorator-based registrations; empty if
            the file cannot be read.
        """
        try:
            source = read_source(file_path)
        except SourceReadError as exc:
            logger.warning(
                f"Skipping admin scan due to read failure (file_path={file_path} error={exc})"
            )
            return []
        return self.extract_source(source)

    def extract_source(self, source: SourceText) -> list[RegistrationEntry]:
        """Extract registrations from loaded source.

        The three idioms are scanned independently and concatenated without
        de-duplication.

        Args:
            source: Source text of an admin module.

        Returns:
            Registrations grouped by idiom, each group in source order.
        """
        lines = source.lines
        entries = [
            *self._class_registrations(lines),
            *self._call_registrations(lines),
            *self._decorator_registrations(lines),
        ]
        logger.debug(
            f"Admin scan completed (file_path={source.path} registrations={len(entries)})"
        )
        return entries

    def _class_registrations(self, lines: Sequence[str]) -> list[RegistrationEntry]:
        entries: list[RegistrationEntry] = []
        for index, line in enumerate(lines):
            admin_class = match_admin_class(line)
            if admin_class is None:
                continue
            entries.append(
                RegistrationEntry(
                    class_name=admin_class.name,
                    declaration_line=index,
                    associated_record_name=self._model_lookup.find_model(lines, index),
                )
            )
        return entries

    def _call_registrations(self, lines: Sequence[str]) -> list[RegistrationEntry]:
        entries: list[RegistrationEntry] = []
        for index, line in enumerate(lines):
            if is_comment(line):
                continue
            call = match_register_call(line)
            if call is None:
                continue
            entries.append(
                RegistrationEntry(
                    class_name=call.admin_class or DEFAULT_ADMIN_CLASS,
                    declaration_line=index,
                    associated_record_name=call.model,
                )
            )
        return entries

    def _decorator_registrations(self, lines: Sequence[str]) -> list[RegistrationEntry]:
        entries: list[RegistrationEntry] = []
        for index, line in enumerate(lines):
            model = match_register_decorator(line)
            if model is None:
                continue
            class_name = _decorated_class_name(lines, index)
            if class_name is None:
                continue
            entries.append(
                RegistrationEntry(
                    class_name=class_name,
                    declaration_line=index,
                    associated_record_name=model,
                )
            )
        return entries


def _decorated_class_name(lines: Sequence[str], decorator_index: int) -> str | None:
    end = min(len(lines), decorator_index + 1 + MAX_DECORATOR_GAP_LINES)
    for index in range(decorator_index + 1, end):
        line = lines[index]
        if is_blank(line) or match_decorator(line) is not None:
            continue
        declaration = match_class_declaration(line)
        return declaration.name if declaration is not None else None
    return None
