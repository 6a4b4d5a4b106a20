"""
loaders/site_importer.py — Bulk CSV import of sites into Supabase.

The importer:
  - Reads the CSV with polars, every column as text
  - Normalises headers to snake_case ("Site Name" / "siteName" -> site_name)
  - Trims strings, turns blank cells into nulls, drops all-null rows
  - Validates each row as SiteCreate and collects rejects with line numbers
  - Inserts valid rows in batches, retrying transient failures with tenacity
  - Handles partial failures: logs failed batches and continues

Usage:
    from cleanerp_pipeline.loaders.site_importer import SiteImporter

    importer = SiteImporter(batch_size=200)
    result = importer.run("sites.csv", client_id="6f1c...", dry_run=False)
    print(result.records_loaded, result.records_failed, len(result.rejects))
"""

from __future__ import annotations

import math
import re
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import httpx
import polars as pl
import structlog
from postgrest.exceptions import APIError
from pydantic import ValidationError
from supabase import Client

from cleanerp_shared.config import settings
from cleanerp_shared.db import get_supabase_client
from cleanerp_shared.mappers import to_snake_case
from cleanerp_shared.models.base import error_location
from cleanerp_shared.models.sites import SiteCreate

from cleanerp_pipeline.utils.retry import retrying

log = structlog.get_logger(__name__)

TABLE = "sites"
ROW_COLUMN = "_line"
# CSV line 1 is the header
FIRST_DATA_LINE = 2

_NON_WORD = re.compile(r"[^0-9A-Za-z]+")


@dataclass(frozen=True)
class RowReject:
    """A CSV row that failed validation."""

    line: int
    errors: list[str]

    def describe(self) -> str:
        return f"line {self.line}: " + "; ".join(self.errors)


@dataclass
class ImportResult:
    """Summary of one import run."""

    table: str = TABLE
    rows_read: int = 0
    rows_valid: int = 0
    records_loaded: int = 0
    records_failed: int = 0
    batches_total: int = 0
    batches_failed: int = 0
    rejects: list[RowReject] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    dry_run: bool = False
    duration_ms: int = 0

    @property
    def status(self) -> str:
        if self.dry_run:
            return "dry_run"
        if self.records_failed == 0 and not self.rejects:
            return "success"
        if self.records_loaded > 0:
            return "partial_failure"
        return "failure"


def normalise_header(name: str) -> str:
    """'Site Name' -> 'site_name', 'addressPostcode' -> 'address_postcode'."""
    words = _NON_WORD.sub(" ", name).split()
    return to_snake_case("_".join(words)).strip("_")


def clean_frame(df: pl.DataFrame) -> pl.DataFrame:
    """
    Normalise a raw CSV frame.

    Headers become snake_case, strings are trimmed, empty strings become
    null and rows with no values at all are dropped. A ROW_COLUMN with the
    original CSV line number is added for reporting.
    """
    df = df.rename({c: normalise_header(c) for c in df.columns})
    df = df.with_row_index(ROW_COLUMN, offset=FIRST_DATA_LINE)

    text_columns = [c for c, dtype in df.schema.items() if dtype == pl.String]
    df = df.with_columns(
        [
            pl.when(pl.col(c).str.strip_chars() == "")
            .then(None)
            .otherwise(pl.col(c).str.strip_chars())
            .alias(c)
            for c in text_columns
        ]
    )
    return df.filter(~pl.all_horizontal(pl.exclude(ROW_COLUMN).is_null()))


def _format_errors(exc: ValidationError) -> list[str]:
    return [
        f"{'.'.join(str(p) for p in error_location(err['loc'])) or 'row'}: {err['msg']}"
        for err in exc.errors(include_url=False)
    ]


class SiteImporter:
    """
    Reads, validates and loads sites from CSV files.

    Writes use the service role key so RLS is bypassed for bulk imports.
    The client is created lazily; dry runs never touch Supabase.
    """

    def __init__(
        self,
        client: Client | None = None,
        *,
        batch_size: int | None = None,
        max_attempts: int | None = None,
        retry_delay: float = 1.0,
    ) -> None:
        self._client = client
        self._batch_size = batch_size or settings.import_batch_size
        self._max_attempts = max_attempts or settings.import_max_attempts
        self._retry_delay = retry_delay

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_supabase_client(service_role=True)
        return self._client

    # ------------------------------------------------------------------
    # Read / validate
    # ------------------------------------------------------------------

    def read_csv(self, path: str | Path) -> pl.DataFrame:
        """Read a CSV as text columns and normalise it with clean_frame()."""
        raw = pl.read_csv(path, infer_schema_length=0)
        log.info("csv_read", path=str(path), rows=raw.height, columns=raw.width)
        return clean_frame(raw)

    def validate(
        self,
        df: pl.DataFrame,
        *,
        client_id: str | None = None,
    ) -> tuple[list[dict[str, Any]], list[RowReject]]:
        """
        Validate every row as SiteCreate.

        Args:
            df:        Frame produced by clean_frame().
            client_id: Applied to rows without their own client_id.

        Returns:
            (insert-ready rows, rejects)
        """
        valid: list[dict[str, Any]] = []
        rejects: list[RowReject] = []

        for row in df.iter_rows(named=True):
            line = row.pop(ROW_COLUMN, None) or 0
            payload = {k: v for k, v in row.items() if v is not None}
            if client_id and not payload.get("client_id"):
                payload["client_id"] = client_id
            try:
                site = SiteCreate.model_validate(payload)
            except ValidationError as exc:
                rejects.append(RowReject(line=line, errors=_format_errors(exc)))
                continue
            valid.append(site.to_insert_dict())

        if rejects:
            log.warning("rows_rejected", table=TABLE, rejected=len(rejects), valid=len(valid))
        return valid, rejects

    # ------------------------------------------------------------------
    # Load
    # ------------------------------------------------------------------

    def _insert_batch(self, batch: list[dict[str, Any]]) -> None:
        controller = retrying(max_attempts=self._max_attempts, base_delay=self._retry_delay)
        controller(lambda: self.client.table(TABLE).insert(batch).execute())

    def insert(self, rows: list[dict[str, Any]], result: ImportResult | None = None) -> ImportResult:
        """Insert rows in batches. Failed batches are recorded, not raised."""
        result = result or ImportResult()
        if not rows:
            log.warning("insert_nothing_to_load", table=TABLE)
            return result

        loader_log = log.bind(table=TABLE, total_rows=len(rows))
        loader_log.info("insert_start")

        n_batches = math.ceil(len(rows) / self._batch_size)
        result.batches_total = n_batches

        for batch_idx in range(n_batches):
            start = batch_idx * self._batch_size
            batch = rows[start : start + self._batch_size]
            try:
                self._insert_batch(batch)
            except (APIError, httpx.HTTPError) as exc:
                log.error("batch_failed", table=TABLE, batch=batch_idx + 1, error=str(exc))
                result.records_failed += len(batch)
                result.batches_failed += 1
                result.errors.append(f"Batch {batch_idx + 1}/{n_batches}: {exc}")
                continue
            result.records_loaded += len(batch)
            loader_log.debug(
                "batch_loaded",
                batch=batch_idx + 1,
                n_batches=n_batches,
                batch_size=len(batch),
            )
        return result

    def run(
        self,
        path: str | Path,
        *,
        client_id: str | None = None,
        dry_run: bool = False,
    ) -> ImportResult:
        """Read, validate and (unless dry_run) insert the sites in path."""
        t0 = time.monotonic()
        df = self.read_csv(path)
        rows, rejects = self.validate(df, client_id=client_id)

        result = ImportResult(
            rows_read=df.height,
            rows_valid=len(rows),
            rejects=rejects,
            dry_run=dry_run,
        )
        if not dry_run:
            self.insert(rows, result)

        result.duration_ms = int((time.monotonic() - t0) * 1000)
        log.info(
            "import_complete",
            table=TABLE,
            rows_read=result.rows_read,
            rows_valid=result.rows_valid,
            records_loaded=result.records_loaded,
            records_failed=result.records_failed,
            rejected=len(result.rejects),
            status=result.status,
            duration_ms=result.duration_ms,
        )
        return result
