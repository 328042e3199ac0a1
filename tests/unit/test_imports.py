# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for import alias discovery."""

import pytest

from dse.imports import ImportedSymbol, resolve_imports


def test_ph0_imp_001_module_and_symbol_aliases() -> None:
    aliases = resolve_imports(
        [
            "import django.db.models as dm",
            "import decimal",
            "import shop.fields as sf",
            "from django.db import models as m",
            "from django.db.models import Model as BaseModel, CharField",
            "from .fields import *",
        ]
    )

    assert aliases.module_aliases == {
        "dm": "django.db.models",
        "decimal": "decimal",
        "sf": "shop.fields",
    }
    assert aliases.symbols["BaseModel"] == ImportedSymbol(module="django.db.models", name="Model")
    assert aliases.is_imported_symbol("CharField")
    assert not aliases.is_imported_symbol("*")
    assert aliases.models_namespaces() == frozenset({"models", "dm", "m"})
    assert aliases.field_namespaces() == frozenset({"models", "dm", "m", "sf"})
    assert aliases.root_base_names() == frozenset(
        {"models.Model", "dm.Model", "m.Model", "BaseModel"}
    )


def test_ph0_imp_002_parenthesized_import_is_read_past_the_window() -> None:
    aliases = resolve_imports(
        [
            "from .fields import (  # custom fields",
            "    MoneyField,",
            "    TagField as Tags,",
            ")",
        ],
        limit=1,
    )

    assert set(aliases.symbols) == {"MoneyField", "Tags"}


def test_ph0_imp_003_lines_past_the_window_are_ignored() -> None:
    lines = ["x = 1"] * 30 + ["from django.db.models import Model"]

    assert resolve_imports(lines).symbols == {}
    assert "Model" in resolve_imports(lines, limit=31).symbols


def test_ph0_imp_004_negative_limit_is_rejected() -> None:
    with pytest.raises(ValueError):
        resolve_imports([], limit=-1)
