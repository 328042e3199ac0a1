# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Run one extractor over many files."""

import concurrent.futures
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Generic

from dse.extractor import EntityT, ExtractionError, Extractor
from dse.source import SourceReadError, read_source

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileResult(Generic[EntityT]):
    """Represent the entities extracted from one file."""

    file_path: str
    entities: list[EntityT]


@dataclass(frozen=True)
class ScanReport(Generic[EntityT]):
    """Represent the outcome of a multi-file scan.

    Attributes:
        results: Per-file entities in input order, for files that were scanned.
        errors: Files that could not be read.
        cancelled: Whether any file was skipped because cancellation was requested.
    """

    results: list[FileResult[EntityT]]
    errors: list[ExtractionError]
    cancelled: bool


@dataclass(frozen=True)
class _Skipped:
    file_path: str


class ProjectScanner(Generic[EntityT]):
    """Scan files independently on a thread pool."""

    def __init__(self, extractor: Extractor[EntityT], max_workers: int = 4) -> None:
        """Initialize the scanner.

        Args:
            extractor: Extractor applied to every file.
            max_workers: Maximum number of worker threads.

        Raises:
            ValueError: If ``max_workers`` is not greater than zero.
        """
        if max_workers <= 0:
            raise ValueError("max_workers must be > 0")
        self._extractor = extractor
        self._max_workers = max_workers

    def scan(
        self,
        file_paths: Sequence[Path],
        should_cancel: Callable[[], bool] | None = None,
    ) -> ScanReport[EntityT]:
        """Scan files and collect their entities.

        ``should_cancel`` is checked before each file is scanned; once it
        returns ``True`` the remaining files are skipped. A file already being
        scanned is always completed.

        Args:
            file_paths: Files to scan.
            should_cancel: Optional cancellation checkpoint.

        Returns:
            Per-file results, read errors and the cancellation flag.
        """
        outcomes: list[FileResult[EntityT] | ExtractionError | _Skipped | None] = [
            None
        ] * len(file_paths)
        with concurrent.futures.ThreadPoolExecutor(
            max_workers=self._max_workers
        ) as executor:
            future_to_index = {
                executor.submit(self._scan_file, file_path, should_cancel): index
                for index, file_path in enumerate(file_paths)
            }
            for future in concurrent.futures.as_completed(future_to_index):
                outcomes[future_to_index[future]] = future.result()

        results = [outcome for outcome in outcomes if isinstance(outcome, FileResult)]
        errors = [outcome for outcome in outcomes if isinstance(outcome, ExtractionError)]
        skipped = sum(1 for outcome in outcomes if isinstance(outcome, _Skipped))
        logger.info(
            "structure_scan_completed files=%s scanned=%s errors=%s skipped=%s",
            len(file_paths),
            len(results),
            len(errors),
            skipped,
        )
        return ScanReport(results=results, errors=errors, cancelled=skipped > 0)

    def _scan_file(
        self, file_path: Path, should_cancel: Callable[[], bool] | None
    ) -> FileResult[EntityT] | ExtractionError | _Skipped:
        if should_cancel is not None and should_cancel():
            return _Skipped(file_path=str(file_path))
        try:
            source = read_source(file_path)
        except SourceReadError as exc:
            logger.warning(f"Skipping file due to read failure (file_path={file_path} error={exc})")
            return ExtractionError(file_path=str(file_path), message=str(exc))
        return FileResult(
            file_path=str(file_path), entities=self._extractor.extract_source(source)
        )
