# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for model and field extraction."""

from pathlib import Path

from dse.entities import Field, RecordType
from dse.extractors import RecordExtractor
from dse.source import SourceText


def _extract(*lines: str) -> list[RecordType]:
    return RecordExtractor().extract_source(SourceText.from_text("\n".join(lines)))


def _write_file(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_ph1_rec_001_single_model_with_one_field() -> None:
    records = RecordExtractor().extract_source(
        SourceText.from_text(
            "class Foo(models.Model):\n    name = models.CharField(max_length=10)\n"
        )
    )

    assert records == [
        RecordType(
            name="Foo",
            declaration_line=0,
            fields=(
                Field(name="name", type_tag="CharField", declaration_line=1, is_computed=False),
            ),
        )
    ]


def test_ph1_rec_002_file_without_model_classes_yields_nothing() -> None:
    records = _extract(
        "class Plain:",
        "    name = models.CharField(max_length=10)",
        "",
        "class Other(object):",
        "    pass",
    )

    assert records == []


def test_ph1_rec_003_subclass_of_local_model_is_a_model() -> None:
    records = _extract(
        "class Article(Base):",
        "    title = models.CharField(max_length=200)",
        "",
        "class Base(models.Model):",
        "    created = models.DateTimeField(auto_now_add=True)",
        "",
        "class Featured(Article):",
        "    rank = models.IntegerField()",
    )

    assert [record.name for record in records] == ["Article", "Base", "Featured"]
    assert records[0].fields == (
        Field(name="title", type_tag="CharField", declaration_line=1),
    )
    assert records[2].fields == (Field(name="rank", type_tag="IntegerField", declaration_line=7),)


def test_ph1_rec_004_multiline_field_keeps_starting_line() -> None:
    records = _extract(
        "class Post(models.Model):",
        "    author = models.ForeignKey(",
        "        User,",
        "        on_delete=models.CASCADE,",
        "    )",
        "    title = models.CharField(max_length=10)",
    )

    assert records[0].fields == (
        Field(name="author", type_tag="ForeignKey", declaration_line=1),
        Field(name="title", type_tag="CharField", declaration_line=5),
    )


def test_ph1_rec_005_property_decorator_yields_computed_field() -> None:
    records = _extract(
        "class Person(models.Model):",
        "    first = models.CharField(max_length=10)",
        "",
        "    @property",
        "    def full_name(self):",
        "        return self.first",
        "",
        "    def save(self, *args, **kwargs):",
        "        value = models.F('first')",
        "        super().save(*args, **kwargs)",
    )

    assert records[0].fields == (
        Field(name="first", type_tag="CharField", declaration_line=1),
        Field(name="full_name", type_tag="property", declaration_line=4, is_computed=True),
    )


def test_ph1_rec_006_statement_between_decorator_and_method_cancels_property() -> None:
    records = _extract(
        "class Person(models.Model):",
        "    first = models.CharField(max_length=10)",
        "    @property",
        "    label = 'x'",
        "    def not_a_property(self):",
        "        return self.first",
    )

    assert [field.name for field in records[0].fields] == ["first"]


def test_ph1_rec_007_other_decorators_keep_pending_property() -> None:
    records = _extract(
        "class Person(models.Model):",
        "    @property",
        "    @admin.display(description='Label')",
        "    def label(self):",
        "        return 'x'",
        "",
        "    @cached_property",
        "    def total(self):",
        "        return 1",
    )

    assert records[0].fields == (
        Field(name="label", type_tag="property", declaration_line=3, is_computed=True),
        Field(name="total", type_tag="property", declaration_line=7, is_computed=True),
    )


def test_ph1_rec_018_comment_between_decorator_and_method_cancels_property() -> None:
    records = _extract(
        "class Person(models.Model):",
        "    first = models.CharField(max_length=10)",
        "    @property",
        "    # unrelated note",
        "    def label(self):",
        "        return self.first",
    )

    assert records[0].fields == (
        Field(name="first", type_tag="CharField", declaration_line=1),
    )


def test_ph1_rec_008_meta_block_suspends_fields_until_model_ends() -> None:
    records = _extract(
        "class Book(models.Model):",
        "    title = models.CharField(max_length=10)",
        "",
        "    class Meta:",
        "        ordering = ['title']",
        "        default_manager = models.Manager()",
        "",
        "    isbn = models.CharField(max_length=13)",
        "",
        "class Shelf(models.Model):",
        "    label = models.CharField(max_length=10)",
    )

    assert [(field.name, field.declaration_line) for field in records[0].fields] == [
        ("title", 1),
    ]
    assert records[1].fields == (
        Field(name="label", type_tag="CharField", declaration_line=10),
    )


def test_ph1_rec_009_aliased_and_directly_imported_constructors() -> None:
    records = _extract(
        "import django.db.models as dm",
        "from django.db.models import Model, CharField",
        "from .fields import MoneyField",
        "",
        "class Product(Model):",
        "    name = CharField(max_length=10)",
        "    price = MoneyField()",
        "    sku = dm.SlugField()",
        "",
        "class Legacy(dm.Model):",
        "    code = dm.IntegerField()",
    )

    assert [record.name for record in records] == ["Product", "Legacy"]
    assert records[0].fields == (
        Field(name="name", type_tag="CharField", declaration_line=5),
        Field(name="price", type_tag="MoneyField", declaration_line=6),
        Field(name="sku", type_tag="SlugField", declaration_line=7),
    )
    assert records[1].fields == (Field(name="code", type_tag="IntegerField", declaration_line=10),)


def test_ph1_rec_010_fallback_pattern_catches_unknown_constructor() -> None:
    records = _extract(
        "class Task(models.Model):",
        "    title = models.CharField(max_length=10)",
        "    status = StatusField(default='new')",
        "    tags = managers.TaggableManager()",
        "    helper = compute_default()",
        "    slug = fields.slug_field()",
        "    nested = a.b.Deep()",
    )

    assert [(field.name, field.type_tag) for field in records[0].fields] == [
        ("title", "CharField"),
        ("status", "StatusField"),
        ("tags", "TaggableManager"),
        ("helper", "compute_default"),
        ("slug", "slug_field"),
    ]


def test_ph1_rec_019_plain_module_import_is_not_a_field_namespace() -> None:
    records = _extract(
        "import uuid",
        "import shop.fields as sf",
        "from django.db import models",
        "",
        "class Token(models.Model):",
        "    token = uuid.uuid4()",
        "    price = sf.MoneyField()",
    )

    assert records[0].fields == (
        Field(name="price", type_tag="MoneyField", declaration_line=6),
    )


def test_ph1_rec_011_dedent_closes_model_and_can_open_next() -> None:
    records = _extract(
        "class A(models.Model):",
        "    a = models.IntegerField()",
        "class B(models.Model):",
        "    b = models.IntegerField()",
        "x = models.IntegerField()",
    )

    assert records == [
        RecordType(
            name="A",
            declaration_line=0,
            fields=(Field(name="a", type_tag="IntegerField", declaration_line=1),),
        ),
        RecordType(
            name="B",
            declaration_line=2,
            fields=(Field(name="b", type_tag="IntegerField", declaration_line=3),),
        ),
    ]


def test_ph1_rec_012_multiline_class_header_is_joined() -> None:
    records = _extract(
        "class Entry(",
        "    TimestampMixin,  # adds created/updated",
        "    models.Model,",
        "):",
        "    slug = models.SlugField()",
    )

    assert records == [
        RecordType(
            name="Entry",
            declaration_line=0,
            fields=(Field(name="slug", type_tag="SlugField", declaration_line=4),),
        )
    ]


def test_ph1_rec_013_blank_and_comment_lines_do_not_end_model() -> None:
    records = _extract(
        "class Note(models.Model):",
        "    body = models.TextField()",
        "",
        "# disabled for now",
        "",
        "    slug = models.SlugField()",
    )

    assert [field.name for field in records[0].fields] == ["body", "slug"]


def test_ph1_rec_014_unbalanced_field_is_flushed_at_end_of_file() -> None:
    records = _extract(
        "class Draft(models.Model):",
        "    text = models.CharField(",
        "        max_length=10,",
    )

    assert records == [
        RecordType(
            name="Draft",
            declaration_line=0,
            fields=(Field(name="text", type_tag="CharField", declaration_line=1),),
        )
    ]


def test_ph1_rec_015_field_lines_are_strictly_increasing_and_runs_are_identical() -> None:
    source = SourceText.from_text(
        "\n".join(
            [
                "class Order(models.Model):",
                "    number = models.CharField(max_length=10)",
                "    total = models.DecimalField(",
                "        max_digits=10, decimal_places=2",
                "    )",
                "    @property",
                "    def is_paid(self):",
                "        return True",
                "    customer = models.ForeignKey('Customer', on_delete=models.CASCADE)",
            ]
        )
    )
    extractor = RecordExtractor()

    first = extractor.extract_source(source)
    second = extractor.extract_source(source)

    assert first == second
    lines = [field.declaration_line for field in first[0].fields]
    assert lines == sorted(set(lines))
    assert lines == [1, 2, 6, 8]


def test_ph1_rec_016_redefined_model_keeps_latest_declaration() -> None:
    records = _extract(
        "class Tag(models.Model):",
        "    name = models.CharField(max_length=10)",
        "class Tag(models.Model):",
        "    label = models.CharField(max_length=10)",
    )

    assert len(records) == 1
    assert records[0].declaration_line == 2
    assert [field.name for field in records[0].fields] == ["label"]


def test_ph1_rec_017_extract_reads_file_and_tolerates_missing_file(tmp_path: Path) -> None:
    models_path = tmp_path / "shop" / "models.py"
    _write_file(
        models_path,
        "from django.db import models\r\n\r\nclass Item(models.Model):\r\n"
        "    name = models.CharField(max_length=10)\r\n",
    )
    extractor = RecordExtractor()

    records = extractor.extract(models_path)

    assert records == [
        RecordType(
            name="Item",
            declaration_line=2,
            fields=(Field(name="name", type_tag="CharField", declaration_line=3),),
        )
    ]
    assert extractor.extract(tmp_path / "missing.py") == []
