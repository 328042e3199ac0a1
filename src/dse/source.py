# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Source text loading and line helpers shared by all extractors."""

import logging
import re
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

_TAB_SIZE = 8
_STRING_LITERAL_RE = re.compile(r"'(?:[^'\\\n]|\\.)*'|\"(?:[^\"\\\n]|\\.)*\"")


class SourceReadError(RuntimeError):
    """Represent a failure to read or decode a source file."""


@dataclass(frozen=True)
class SourceText:
    """Represent one source file split into raw lines.

    Attributes:
        path: File the text was read from; ``None`` for in-memory text.
        text: Full decoded text.
        lines: Raw lines split on ``\\n`` only. Index is the 0-based line number.
    """

    path: Path | None
    text: str
    lines: tuple[str, ...]

    @classmethod
    def from_text(cls, text: str, path: Path | None = None) -> "SourceText":
        """Build a source view from already loaded text.

        Args:
            text: Source text.
            path: Optional originating file path.

        Returns:
            Source view with lines split on ``\\n``.
        """
        return cls(path=path, text=text, lines=tuple(text.split("\n")))


def read_source(file_path: Path) -> SourceText:
    """Read a UTF-8 source file.

    Args:
        file_path: File to read.

    Returns:
        Source view of the file.

    Raises:
        SourceReadError: If the file is missing, unreadable or not valid UTF-8.
    """
    # read_text() applies universal newlines; "\n" must stay the only splitter.
    try:
        text = file_path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceReadError(f"{file_path}: {exc}") from exc
    return SourceText.from_text(text, path=file_path)


def paren_balance(line: str) -> int:
    """Return opened minus closed parentheses, ignoring strings and comments.

    Args:
        line: One raw source line.

    Returns:
        Positive when the line leaves parentheses open.
    """
    code = _STRING_LITERAL_RE.sub('""', line)
    code = code.split("#", 1)[0]
    return code.count("(") - code.count(")")


def indentation_of(line: str) -> int:
    """Return the width of the leading whitespace of a line."""
    expanded = line.expandtabs(_TAB_SIZE)
    return len(expanded) - len(expanded.lstrip(" "))


def is_blank(line: str) -> bool:
    """Return whether a line holds only whitespace."""
    return not line.strip()


def is_comment(line: str) -> bool:
    """Return whether a line holds only a comment."""
    return line.lstrip().startswith("#")
