"""CSV Table Store implementation.

This adapter implements the TableStore protocol with one delimited-text
file per table.

File Layout:
    <data_dir>/<database>/<table>.<extension>

File Format:
    - First record: column names in declared order
    - Following records: one per row, values in column order
    - Standard CSV quoting for values containing the delimiter, the
      quote character or line breaks; records end with CRLF, so a bare
      carriage return inside a value is quoted like a newline

A row whose only value is the empty string is written as ``""`` so that
it can be told apart from a blank line; blank lines are skipped on read.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Sequence

from tabledb.domain.entities import Table
from tabledb.domain.errors import (
    InvalidIdentifierError,
    TableDecodeError,
    TableFileNotFoundError,
    TableWriteError,
)
from tabledb.domain.value_objects import validate_column_names, validate_table_name
from tabledb.infrastructure.config import get_config
from tabledb.infrastructure.logging import get_logger

logger = get_logger(__name__)


class CsvTableStore:
    """CSV implementation of the TableStore protocol.

    Attributes:
        data_dir: Parent directory of database directories.
        file_extension: Extension of table files, without the dot.
        delimiter: Field delimiter.
    """

    def __init__(
        self,
        data_dir: str | Path | None = None,
        file_extension: str | None = None,
        delimiter: str | None = None,
        encoding: str | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            data_dir: Parent directory of database directories (default from config).
            file_extension: Table file extension (default from config).
            delimiter: Field delimiter (default from config).
            encoding: File encoding (default from config).
        """
        storage = get_config().storage
        self._data_dir = Path(data_dir) if data_dir is not None else storage.data_dir
        self._extension = file_extension or storage.file_extension
        self._delimiter = delimiter or storage.delimiter
        self._encoding = encoding or storage.encoding

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    @property
    def file_extension(self) -> str:
        return self._extension

    @property
    def delimiter(self) -> str:
        return self._delimiter

    def database_dir(self, database: str) -> Path:
        return self._data_dir / database

    def table_path(self, database: str, table: str) -> Path:
        """Path of a table file. The table name must be a valid identifier.

        Raises:
            InvalidIdentifierError: If table is not a valid identifier.
        """
        validate_table_name(table)
        return self.database_dir(database) / f"{table}.{self._extension}"

    def ensure_database(self, database: str) -> Path:
        directory = self.database_dir(database)
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise TableWriteError(str(directory), f"failed to create directory for database: {e}") from e
        return directory

    def write_table(
        self,
        database: str,
        table: str,
        columns: Sequence[str],
        rows: Sequence[Sequence[str]],
    ) -> Path:
        path = self.table_path(database, table)
        try:
            with open(path, "w", newline="", encoding=self._encoding) as f:
                writer = csv.writer(f, delimiter=self._delimiter, lineterminator="\r\n")
                writer.writerow(columns)
                writer.writerows(rows)
        except (OSError, csv.Error, UnicodeError) as e:
            raise TableWriteError(str(path), f"failed to write table {table}: {e}") from e

        logger.debug("table_file_written", table=table, path=str(path), rows=len(rows))
        return path

    def read_table(self, database: str, table: str) -> Table:
        path = self.table_path(database, table)
        if not path.is_file():
            raise TableFileNotFoundError(table, str(path))

        try:
            with open(path, newline="", encoding=self._encoding) as f:
                reader = csv.reader(f, delimiter=self._delimiter, strict=True)
                header = next(reader, None)
                if header is None:
                    raise TableFileNotFoundError(table, str(path))
                columns = self._decode_header(table, path, header)
                rows = [
                    self._decode_record(table, path, columns, record, reader.line_num)
                    for record in reader
                    if record
                ]
        except FileNotFoundError as e:
            raise TableFileNotFoundError(table, str(path)) from e
        except (OSError, csv.Error, UnicodeError) as e:
            raise TableDecodeError(table, str(path), str(e)) from e

        return Table(name=table, columns=columns, rows=rows)

    def _decode_header(self, table: str, path: Path, header: list[str]) -> tuple[str, ...]:
        try:
            return validate_column_names(header)
        except InvalidIdentifierError as e:
            raise TableDecodeError(table, str(path), f"bad header: {e}") from e

    def _decode_record(
        self,
        table: str,
        path: Path,
        columns: tuple[str, ...],
        record: list[str],
        line_num: int,
    ) -> dict[str, str]:
        if len(record) != len(columns):
            raise TableDecodeError(
                table,
                str(path),
                f"line {line_num}: expected {len(columns)} fields, got {len(record)}",
            )
        return dict(zip(columns, record))
