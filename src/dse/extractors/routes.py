# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""URL route extraction with recursive include resolution."""

import logging
from collections.abc import Callable
from pathlib import Path

from dse.entities import RouteEntry
from dse.matchers import IncludeMatch, match_include, match_route
from dse.source import SourceReadError, SourceText, is_comment, read_source

logger = logging.getLogger(__name__)

ROUTES_MODULE_SUFFIX = ".urls"
ROUTES_FILENAME = "urls.py"
DEFAULT_MAX_INCLUDE_DEPTH = 32


def _is_file(path: Path) -> bool:
    return path.is_file()


class RouteExtractor:
    """Extract URL routes, following ``include('app.urls')`` into sibling apps."""

    def __init__(
        self,
        project_root: Path | None = None,
        file_exists: Callable[[Path], bool] = _is_file,
        max_include_depth: int = DEFAULT_MAX_INCLUDE_DEPTH,
    ) -> None:
        """Initialize the extractor.

        Args:
            project_root: Directory holding the app packages. When ``None`` the
                directory two levels above each scanned file is used.
            file_exists: Predicate deciding whether an include target exists.
            max_include_depth: Maximum nesting of followed includes.

        Raises:
            ValueError: If ``max_include_depth`` is negative.
        """
        if max_include_depth < 0:
            raise ValueError("max_include_depth must be >= 0")
        self._project_root = project_root
        self._file_exists = file_exists
        self._max_include_depth = max_include_depth

    def extract(self, file_path: Path, prefix: str = "") -> list[RouteEntry]:
        """Extract routes from a URL configuration file.

        Args:
            file_path: ``urls.py`` style file to scan.
            prefix: Pattern prefix applied to every route found.

        Returns:
            Routes in source order, included tables expanded in place; empty if
            the file cannot be read.
        """
        return self._extract_file(file_path, prefix=prefix, visited=frozenset(), depth=0)

    def extract_source(self, source: SourceText, prefix: str = "") -> list[RouteEntry]:
        """Extract routes from loaded source.

        Includes are only followed when ``source.path`` is known.

        Args:
            source: Source text of a URL configuration module.
            prefix: Pattern prefix applied to every route found.

        Returns:
            Routes in source order.
        """
        visited = frozenset({_visit_key(source.path)}) if source.path is not None else frozenset()
        return self._scan(source, prefix=prefix, visited=visited, depth=0)

    def _extract_file(
        self, file_path: Path, prefix: str, visited: frozenset[Path], depth: int
    ) -> list[RouteEntry]:
        key = _visit_key(file_path)
        if key in visited:
            logger.debug(f"Skipping already visited route file (file_path={file_path})")
            return []
        visited = visited | {key}
        try:
            source = read_source(file_path)
        except SourceReadError as exc:
            logger.warning(f"Skipping route scan due to read failure (file_path={file_path} error={exc})")
            return []
        return self._scan(source, prefix=prefix, visited=visited, depth=depth)

    def _scan(
        self, source: SourceText, prefix: str, visited: frozenset[Path], depth: int
    ) -> list[RouteEntry]:
        routes: list[RouteEntry] = []
        for index, line in enumerate(source.lines):
            if is_comment(line):
                continue
            route = match_route(line)
            if route is not None:
                routes.append(
                    RouteEntry(
                        pattern=prefix + route.pattern,
                        target_name=route.target,
                        declaration_line=index,
                        file_path=source.path,
                    )
                )
                continue
            include = match_include(line)
            if include is None or source.path is None:
                continue
            target = self._resolve_include(source.path, include)
            if target is None:
                continue
            if depth >= self._max_include_depth:
                logger.warning(
                    f"Include depth limit reached (file_path={source.path} line={index} "
                    f"module={include.module} max_include_depth={self._max_include_depth})"
                )
                continue
            routes.extend(
                self._extract_file(
                    target, prefix=prefix + include.prefix, visited=visited, depth=depth + 1
                )
            )
        return routes

    def _resolve_include(self, file_path: Path, include: IncludeMatch) -> Path | None:
        if not include.module.endswith(ROUTES_MODULE_SUFFIX):
            logger.debug(f"Skipping include of non-route module (module={include.module})")
            return None
        app_name = include.module.split(".", 1)[0]
        project_root = self._project_root or file_path.parent.parent
        candidate = project_root / app_name / ROUTES_FILENAME
        if not self._file_exists(candidate):
            logger.debug(f"Skipping include with missing target (module={include.module} candidate={candidate})")
            return None
        return candidate


def _visit_key(path: Path) -> Path:
    try:
        return path.resolve()
    except OSError:
        return path.absolute()
