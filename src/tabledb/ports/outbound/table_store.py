"""Table Store port for table persistence.

This outbound port defines the contract for writing a table to, and
reading it back from, durable storage. The store has no knowledge of
the live registry or its locks: callers hand it a consistent snapshot.

References:
    - CsvTableStore: one delimited-text file per table
"""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import Protocol, Sequence

from tabledb.domain.entities import Table


class TableStore(Protocol):
    """Protocol for table persistence.

    Thread Safety:
        Implementations need not be thread-safe. Writes to one database
        directory are serialized by the database lock held during save.
    """

    @abstractmethod
    def ensure_database(self, database: str) -> Path:
        """Create the database directory and any missing parents.

        Returns:
            The database directory.

        Raises:
            TableWriteError: If the directory cannot be created.
        """
        ...

    @abstractmethod
    def write_table(
        self,
        database: str,
        table: str,
        columns: Sequence[str],
        rows: Sequence[Sequence[str]],
    ) -> Path:
        """Truncate or create a table file and write header and rows.

        Args:
            database: Database name (directory).
            table: Table name (file stem).
            columns: Header values, in declared order.
            rows: Positional row values aligned with columns.

        Returns:
            Path of the written file.

        Raises:
            TableWriteError: If the file cannot be written.
        """
        ...

    @abstractmethod
    def read_table(self, database: str, table: str) -> Table:
        """Decode a table file into a standalone Table.

        Raises:
            TableFileNotFoundError: If the file is missing or has no header.
            TableDecodeError: If the header or a row is malformed.
        """
        ...
