"""
app/services/ingestion_service.py

Service layer for reading, parsing, and merging sales exports.

Each source is parsed independently with header-driven field mapping.
Parsed rows from all sources are concatenated and stably sorted by
transaction date, so the merged dataset is identical regardless of the
order in which file reads complete.

Ingestion is all-or-nothing: one malformed source raises a
:class:`~app.errors.ParseError` naming that source, and no partial
dataset is returned.  A source that is simply empty (no text, or a
header with no rows) is not a failure; it contributes zero records.
"""

from __future__ import annotations

import csv
import io
import logging
from concurrent.futures import ThreadPoolExecutor
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Mapping, Sequence

from app.config import get_ingestion_settings
from app.domain.sales import RowValidationError, SalesRecord, SalesSource
from app.errors import ParseError
from app.logging_utils import log_event
from app.mappers.schema_mapper import MappingResolution, SchemaMapper, SchemaMappingError
from app.validators.sales_row_validator import SalesRowValidator

logger = logging.getLogger(__name__)


class SalesIngestionService:
    """
    Coordinates source decoding, header mapping, row parsing, and merging.
    """

    def __init__(
        self,
        *,
        encoding: str = "utf-8-sig",
        delimiter: str = ",",
        max_workers: int = 4,
        mapper: SchemaMapper | None = None,
        validator: SalesRowValidator | None = None,
    ) -> None:
        self._encoding = encoding
        self._delimiter = delimiter
        self._max_workers = max(1, max_workers)
        self._mapper = mapper or SchemaMapper()
        self._validator = validator or SalesRowValidator()

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def decode_source(self, name: str, data: bytes) -> SalesSource:
        """
        Decode raw bytes into a :class:`SalesSource`.

        Raises
        ------
        ParseError
            When *data* is not valid in the configured encoding.
        """

        try:
            text = data.decode(self._encoding)
        except UnicodeDecodeError as exc:
            raise ParseError(
                f"Source must be {self._encoding} encoded.",
                source=name,
            ) from exc
        return SalesSource(name=name, text=text)

    def load_paths(self, paths: Sequence[str | Path]) -> list[SalesSource]:
        """
        Read every file in *paths*, concurrently when more than one is given.

        Sources are returned in the order of *paths*, independent of the
        order in which reads complete.

        Raises
        ------
        ParseError
            When a file cannot be read or decoded.
        """

        resolved = [Path(path) for path in paths]
        if len(resolved) <= 1 or self._max_workers == 1:
            return [self._read_path(path) for path in resolved]

        with ThreadPoolExecutor(max_workers=min(self._max_workers, len(resolved))) as pool:
            return list(pool.map(self._read_path, resolved))

    def _read_path(self, path: Path) -> SalesSource:
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise ParseError(f"Source could not be read: {exc.strerror or exc}", source=str(path)) from exc
        return self.decode_source(str(path), data)

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def parse_source(
        self,
        source: SalesSource,
        *,
        manual_mapping: Mapping[str, str] | None = None,
    ) -> list[SalesRecord]:
        """
        Parse one delimited-text source into sales records in row order.

        Blank lines are skipped.  Columns with a blank header name are
        ignored.

        Raises
        ------
        ParseError
            On a malformed header, a row whose field count differs from
            the header, a missing required value, or an invalid date.
        CoercionError
            When a numeric field cannot be converted.
        """

        text = source.text.lstrip("\ufeff")
        if not text.strip():
            logger.warning("Sales source %r is empty; no records ingested", source.name)
            return []

        reader = csv.reader(io.StringIO(text, newline=""), delimiter=self._delimiter)
        try:
            header = self._read_header(reader, source=source.name)
            if header is None:
                logger.warning("Sales source %r has no header row; no records ingested", source.name)
                return []

            mapping = self._resolve_mapping(
                header,
                source=source.name,
                header_line=reader.line_num,
                manual_mapping=manual_mapping,
            )
            records: list[SalesRecord] = []
            for raw_row in reader:
                row_number = reader.line_num
                if self._validator.is_completely_empty_row(raw_row):
                    continue
                if len(raw_row) != len(header):
                    raise ParseError(
                        f"Row has {len(raw_row)} fields but the header has {len(header)}.",
                        source=source.name,
                        row_number=row_number,
                    )

                row = {
                    column: value
                    for column, value in zip(header, raw_row)
                    if column.strip()
                }
                mapped_row = self._mapper.map_row(raw_row=row, mapping=mapping)
                records.append(
                    self._validator.parse_row(
                        mapped_row=mapped_row,
                        row_number=row_number,
                        source=source.name,
                    )
                )
        except csv.Error as exc:
            raise ParseError(f"Invalid delimited text: {exc}", source=source.name) from exc

        if not records:
            logger.warning("Sales source %r has a header but no data rows", source.name)
        logger.debug("Parsed %d records from source %r", len(records), source.name)
        return records

    def merge_sources(
        self,
        sources: Iterable[SalesSource],
        *,
        manual_mapping: Mapping[str, str] | None = None,
    ) -> list[SalesRecord]:
        """
        Parse every source, concatenate, and sort ascending by transaction date.

        The sort is stable: records sharing a date keep source order, then
        row order.
        """

        merged: list[SalesRecord] = []
        source_names: list[str] = []
        for source in sources:
            merged.extend(self.parse_source(source, manual_mapping=manual_mapping))
            source_names.append(source.name)

        merged.sort(key=lambda record: record.transaction_date)
        log_event(
            logger,
            logging.INFO,
            "sales_sources_merged",
            sources=source_names,
            records=len(merged),
        )
        return merged

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _read_header(self, reader, *, source: str) -> list[str] | None:
        for raw_header in reader:
            if self._validator.is_completely_empty_row(raw_header):
                continue
            header = [column.strip() for column in raw_header]
            named = [column for column in header if column]
            duplicates = sorted({column for column in named if named.count(column) > 1})
            if duplicates:
                raise ParseError(
                    f"Header contains duplicate column names: {', '.join(duplicates)}.",
                    source=source,
                    row_number=reader.line_num,
                )
            return header
        return None

    def _resolve_mapping(
        self,
        header: Sequence[str],
        *,
        source: str,
        header_line: int,
        manual_mapping: Mapping[str, str] | None,
    ) -> MappingResolution:
        try:
            return self._mapper.resolve_mapping(header, manual_overrides=manual_mapping)
        except SchemaMappingError as exc:
            details = [
                RowValidationError(
                    row_number=header_line,
                    column=error.canonical_field,
                    message=error.message,
                    value=error.source_column,
                )
                for error in exc.errors
            ]
            raise ParseError(exc.message, source=source, row_number=header_line, errors=details) from exc


@lru_cache(maxsize=1)
def get_ingestion_service() -> SalesIngestionService:
    """
    Return a configured singleton ingestion service.
    """

    settings = get_ingestion_settings()
    return SalesIngestionService(
        encoding=settings.encoding,
        delimiter=settings.delimiter,
        max_workers=settings.max_workers,
    )
