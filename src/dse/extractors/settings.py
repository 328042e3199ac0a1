# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Settings module key extraction."""

import logging
from collections.abc import Sequence
from pathlib import Path

from dse.entities import ConfigEntry
from dse.matchers import match_config_key
from dse.source import SourceReadError, SourceText, is_blank, is_comment, read_source

logger = logging.getLogger(__name__)

BRACKET_PAIRS: tuple[tuple[str, str], ...] = (("{", "}"), ("[", "]"), ("(", ")"))


class SettingsExtractor:
    """Extract top-level ``UPPER_CASE = value`` settings."""

    def extract(self, file_path: Path) -> list[ConfigEntry]:
        """Extract settings from a settings module.

        Args:
            file_path: ``settings.py`` style file to scan.

        Returns:
            Settings in source order, duplicates kept; empty if the file cannot
            be read.
        """
        try:
            source = read_source(file_path)
        except SourceReadError as exc:
            logger.warning(
                f"Skipping settings scan due to read failure (file_path={file_path} error={exc})"
            )
            return []
        return self.extract_source(source)

    def extract_source(self, source: SourceText) -> list[ConfigEntry]:
        """Extract settings from loaded source.

        Args:
            source: Source text of a settings module.

        Returns:
            Settings in source order, duplicates kept.
        """
        lines = source.lines
        entries: list[ConfigEntry] = []
        index = 0
        while index < len(lines):
            line = lines[index]
            start = index
            index += 1
            if is_blank(line) or is_comment(line):
                continue
            match = match_config_key(line)
            if match is None:
                continue
            value = strip_trailing_comment(match.value)
            closers = unterminated_closers(value)
            if closers:
                value, index = _fold_value(lines, value, index, closers)
            entries.append(ConfigEntry(key=match.key, value=value, declaration_line=start))
        return entries


def strip_trailing_comment(value: str) -> str:
    """Drop an end-of-line comment unless the value itself starts with ``#``.

    A ``#`` inside a quoted string is part of the value.
    """
    comment_index = _comment_index(value)
    if comment_index > 0:
        return value[:comment_index].strip()
    return value


def unterminated_closers(value: str) -> frozenset[str]:
    """Return closing characters of brackets opened but never closed in ``value``."""
    return frozenset(
        closer for opener, closer in BRACKET_PAIRS if opener in value and closer not in value
    )


def _comment_index(value: str) -> int:
    quote: str | None = None
    escaped = False
    for index, char in enumerate(value):
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif quote is not None:
            if char == quote:
                quote = None
        elif char in "'\"":
            quote = char
        elif char == "#":
            return index
    return -1


def _fold_value(
    lines: Sequence[str], value: str, index: int, closers: frozenset[str]
) -> tuple[str, int]:
    parts = [value]
    while index < len(lines):
        next_line = lines[index].strip()
        index += 1
        if next_line:
            parts.append(next_line)
        if any(closer in next_line for closer in closers):
            break
    return " ".join(parts), index
