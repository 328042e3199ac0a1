# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for multi-file scanning."""

from pathlib import Path

import pytest

from dse.extractors import HandlerExtractor, SettingsExtractor
from dse.scanner import ProjectScanner


def _write_file(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_ph6_scn_001_results_follow_input_order(tmp_path: Path) -> None:
    paths = []
    for index in range(6):
        path = tmp_path / f"app{index}" / "views.py"
        _write_file(path, f"def view_{index}(request):\n    pass\n")
        paths.append(path)

    report = ProjectScanner(HandlerExtractor(), max_workers=3).scan(paths)

    assert [result.file_path for result in report.results] == [str(path) for path in paths]
    assert [result.entities[0].name for result in report.results] == [
        f"view_{index}" for index in range(6)
    ]
    assert report.errors == []
    assert report.cancelled is False


def test_ph6_scn_002_unreadable_files_become_errors(tmp_path: Path) -> None:
    good = tmp_path / "settings.py"
    _write_file(good, "DEBUG = True\n")
    directory = tmp_path / "package"
    directory.mkdir()
    missing = tmp_path / "missing.py"

    report = ProjectScanner(SettingsExtractor()).scan([missing, good, directory])

    assert [result.file_path for result in report.results] == [str(good)]
    assert [error.file_path for error in report.errors] == [str(missing), str(directory)]
    assert all(error.message for error in report.errors)


def test_ph6_scn_003_cancellation_skips_remaining_files(tmp_path: Path) -> None:
    paths = []
    for index in range(4):
        path = tmp_path / f"settings_{index}.py"
        _write_file(path, f"KEY_{index} = {index}\n")
        paths.append(path)
    checks = []

    def should_cancel() -> bool:
        checks.append(True)
        return len(checks) > 2

    report = ProjectScanner(SettingsExtractor(), max_workers=1).scan(
        paths, should_cancel=should_cancel
    )

    assert [result.file_path for result in report.results] == [str(path) for path in paths[:2]]
    assert report.cancelled is True
    assert report.errors == []


def test_ph6_scn_004_worker_count_must_be_positive() -> None:
    with pytest.raises(ValueError):
        ProjectScanner(SettingsExtractor(), max_workers=0)
