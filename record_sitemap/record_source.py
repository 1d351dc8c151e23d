"""
1.0 Record Source Module
Where the generator's records come from.

A RecordSource produces an ordered, finite sequence of records, optionally
narrowed by a scope function before anything is read. The scope's shape
depends on the backend:

- IterableRecordSource: predicate, record -> bool
- DataFrameRecordSource: pandas DataFrame -> DataFrame
- ModelRecordSource: SQLAlchemy Select -> Select

Usage:
    from record_sitemap.record_source import ModelRecordSource

    source = ModelRecordSource(session, Article)
    entries = generator.generate_from_source(source)
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional

import pandas as pd
from sqlalchemy import select
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

logger = logging.getLogger(__name__)


class RecordSource(ABC):
    """
    2.0 RecordSource
    Base class for record backends.
    """

    @abstractmethod
    def fetch(self, scope: Optional[Callable[[Any], Any]] = None) -> Iterable[Any]:
        """Apply `scope` (if any) and return the records in order."""


class IterableRecordSource(RecordSource):
    """
    3.0 IterableRecordSource
    Records already in memory (a list, a generator, query results).
    The scope is a predicate that keeps a record when it returns truthy.
    """

    def __init__(self, records: Iterable[Any]):
        self.records = records

    def fetch(self, scope: Optional[Callable[[Any], bool]] = None) -> Iterator[Any]:
        if scope is None:
            return iter(self.records)
        return (record for record in self.records if scope(record))


class DataFrameRecordSource(RecordSource):
    """
    4.0 DataFrameRecordSource
    Tabular records held in a pandas DataFrame. Each record is a row dict
    with missing cells (NaN/NaT) turned into None.
    """

    def __init__(self, frame: pd.DataFrame):
        self.frame = frame

    @classmethod
    def from_csv(cls, path: str, **read_csv_kwargs: Any) -> "DataFrameRecordSource":
        """4.1 Load records from a CSV file."""
        frame = pd.read_csv(path, **read_csv_kwargs)
        logger.info(f"Loaded {len(frame):,} records, {frame.shape[1]} columns from {path}")
        return cls(frame)

    def fetch(self, scope: Optional[Callable[[pd.DataFrame], pd.DataFrame]] = None) -> List[Dict[str, Any]]:
        """
        4.2 Apply the scope to the frame and return the remaining rows.

        The scope must return a DataFrame; row order is whatever the scope leaves.
        """
        frame = self.frame
        if scope is not None:
            frame = scope(frame)
            if not isinstance(frame, pd.DataFrame):
                raise TypeError(f"DataFrame scope must return a DataFrame, got {type(frame).__name__}")
            logger.debug(f"Scope kept {len(frame):,} of {len(self.frame):,} rows")

        # Blank cells turn integer columns into float64; convert_dtypes
        # restores them as nullable Int64 so ids stay 1 rather than 1.0.
        frame = frame.convert_dtypes()
        frame = frame.astype(object).where(frame.notna(), None)
        return frame.to_dict("records")


class ModelRecordSource(RecordSource):
    """
    5.0 ModelRecordSource
    ORM instances of one mapped class, read through a SQLAlchemy session.

    The scope receives `select(model)` and returns the narrowed statement.
    A scope that returns None is assumed to have nothing to add, so the
    unmodified statement runs.
    """

    def __init__(self, session: Session, model: Any):
        self.session = session
        self.model = model

    def build_statement(self, scope: Optional[Callable[[Select], Optional[Select]]] = None) -> Select:
        """5.1 Build the SELECT the records are read with."""
        statement = select(self.model)
        if scope is not None:
            scoped = scope(statement)
            if scoped is not None:
                statement = scoped
        return statement

    def fetch(self, scope: Optional[Callable[[Select], Optional[Select]]] = None) -> List[Any]:
        """5.2 Run the statement and materialize the instances in result order."""
        statement = self.build_statement(scope)
        records = list(self.session.scalars(statement))
        logger.info(f"Fetched {len(records):,} {getattr(self.model, '__name__', self.model)} records")
        return records
