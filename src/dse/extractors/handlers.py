# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""View function and class extraction."""

import logging
from pathlib import Path

from dse.entities import HandlerEntry
from dse.matchers import match_class_declaration, match_method_declaration
from dse.source import SourceReadError, SourceText, read_source

logger = logging.getLogger(__name__)


class HandlerExtractor:
    """Extract top-level view functions and classes."""

    def extract(self, file_path: Path) -> list[HandlerEntry]:
        """Extract handlers from a views module.

        Args:
            file_path: ``views.py`` style file to scan.

        Returns:
            Handlers in source order; empty if the file cannot be read.
        """
        try:
            source = read_source(file_path)
        except SourceReadError as exc:
            logger.warning(
                f"Skipping views scan due to read failure (file_path={file_path} error={exc})"
            )
            return []
        return self.extract_source(source)

    def extract_source(self, source: SourceText) -> list[HandlerEntry]:
        """Extract handlers from loaded source."""
        handlers: list[HandlerEntry] = []
        for index, line in enumerate(source.lines):
            function = match_method_declaration(line)
            if function is not None:
                if function.indent == 0:
                    handlers.append(
                        HandlerEntry(name=function.name, declaration_line=index, is_class=False)
                    )
                continue
            declaration = match_class_declaration(line)
            if declaration is not None and declaration.indent == 0:
                handlers.append(
                    HandlerEntry(name=declaration.name, declaration_line=index, is_class=True)
                )
        return handlers
