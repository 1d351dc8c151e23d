"""
RECORD SOURCE TESTS - Fast, Deterministic, No Network

Run: pytest tests/test_record_source.py

Uses in-memory data only: lists, DataFrames, and an in-memory SQLite
database for the ORM source.
"""

import sys
from pathlib import Path

import pandas as pd
import pytest
from sqlalchemy import Boolean, Column, Integer, String, create_engine
from sqlalchemy.orm import Session, declarative_base

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from record_sitemap import GeneratorConfig, SitemapEntryGenerator
from record_sitemap.record_source import DataFrameRecordSource, IterableRecordSource, ModelRecordSource

Base = declarative_base()


class Article(Base):
    __tablename__ = "articles"

    id = Column(Integer, primary_key=True)
    slug = Column(String(100), nullable=False)
    updated_at = Column(Integer, nullable=True)
    is_deleted = Column(Boolean, nullable=False, default=False)


@pytest.fixture
def session():
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    with Session(engine) as db:
        db.add_all([
            Article(id=1, slug="mortgages", updated_at=1700000000, is_deleted=False),
            Article(id=2, slug="old-rates", updated_at=1600000000, is_deleted=True),
            Article(id=3, slug="credit-cards", updated_at=None, is_deleted=False),
        ])
        db.commit()
        yield db
    engine.dispose()


# =============================================================================
# 1. ITERABLE SOURCE (2 tests)
# =============================================================================

def test_iterable_source_without_scope_returns_everything():
    assert list(IterableRecordSource([3, 1, 2]).fetch()) == [3, 1, 2]


def test_iterable_source_predicate_scope():
    assert list(IterableRecordSource(range(6)).fetch(lambda r: r % 2 == 0)) == [0, 2, 4]


# =============================================================================
# 2. DATAFRAME SOURCE (5 tests)
# =============================================================================

def test_dataframe_rows_become_dicts_with_none_for_missing():
    frame = pd.DataFrame({"slug": ["a", "b"], "updated": [1700000000, None]})

    records = DataFrameRecordSource(frame).fetch()

    assert records[0] == {"slug": "a", "updated": 1700000000.0}
    assert records[1]["updated"] is None


def test_dataframe_integer_column_with_blanks_yields_ints():
    frame = pd.DataFrame({"id": [1, None, 2]})

    records = DataFrameRecordSource(frame).fetch()

    assert [r["id"] for r in records] == [1, None, 2]
    assert "{id}".format(**records[0]) == "1"


def test_dataframe_scope_filters_and_keeps_order():
    frame = pd.DataFrame({"slug": ["c", "a", "b"], "live": [True, False, True]})

    records = DataFrameRecordSource(frame).fetch(lambda df: df[df["live"]])

    assert [r["slug"] for r in records] == ["c", "b"]


def test_dataframe_scope_must_return_frame():
    frame = pd.DataFrame({"slug": ["a"]})

    with pytest.raises(TypeError):
        DataFrameRecordSource(frame).fetch(lambda df: None)


def test_dataframe_from_csv(tmp_path):
    csv_path = tmp_path / "records.csv"
    csv_path.write_text("slug,priority\nalpha,0.8\nbeta,\n")

    records = DataFrameRecordSource.from_csv(str(csv_path)).fetch()

    assert records == [{"slug": "alpha", "priority": 0.8}, {"slug": "beta", "priority": None}]


# =============================================================================
# 3. ORM MODEL SOURCE (4 tests)
# =============================================================================

def test_model_source_returns_instances(session):
    records = ModelRecordSource(session, Article).fetch(lambda q: q.order_by(Article.id))

    assert [a.slug for a in records] == ["mortgages", "old-rates", "credit-cards"]


def test_model_source_scope_narrows_query(session):
    def scope(query):
        return query.where(Article.is_deleted.is_(False)).order_by(Article.id.desc())

    records = ModelRecordSource(session, Article).fetch(scope)

    assert [a.id for a in records] == [3, 1]


def test_model_source_scope_returning_none_keeps_statement(session):
    seen = []

    def scope(query):
        seen.append(query)

    source = ModelRecordSource(session, Article)
    records = source.fetch(scope)

    assert len(seen) == 1
    assert len(records) == 3


def test_model_source_end_to_end(session):
    generator = SitemapEntryGenerator(GeneratorConfig(
        mapping_function=lambda a: {"loc": f"https://example.com/{a.slug}", "lastmod": a.updated_at},
        scope_function=lambda q: q.where(Article.is_deleted.is_(False)).order_by(Article.id),
        default_changefreq="weekly",
    ))

    entries = generator.generate_from_source(ModelRecordSource(session, Article))

    assert [e.to_dict() for e in entries] == [
        {"loc": "https://example.com/mortgages", "lastmod": "2023-11-14T22:13:20+00:00", "changefreq": "weekly"},
        {"loc": "https://example.com/credit-cards", "changefreq": "weekly"},
    ]
