from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Protocol
from urllib.parse import quote

import requests

from ..models.config_models import DEFAULT_SHEET_NAME, DEFAULT_TIMEOUT_SECONDS, SourceConfig
from ..sheet.reader import SheetReadError, normalize_row, parse_csv_text, read_csv_file

"""Source providers: the only I/O boundary in front of the transformation core.

Each provider returns ordered raw rows (lists of strings) or raises SourceError.
Callers never see a partial row set: a provider either returns every row it read
or raises.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "SHEETS_API_BASE",
    "CsvFileProvider",
    "CsvUrlProvider",
    "SheetsApiProvider",
    "SourceError",
    "SourceProvider",
    "is_placeholder",
    "provider_from_config",
]

SHEETS_API_BASE = "https://sheets.googleapis.com/v4/spreadsheets"
# Last meaningful column of the layout is W (index 22)
SHEETS_COLUMN_SPAN = "A1:W"

_PLACEHOLDER_MARKERS = ("YOUR_PUBLISHED", "YOUR_SHEET_ID", "YOUR_API_KEY")


class SourceError(Exception):
    """Live rows could not be obtained.

    error_type is an UPPER_SNAKE classification copied into the error log.
    """

    def __init__(self, message: str, *, error_type: str = "SOURCE_ERROR") -> None:
        super().__init__(message)
        self.error_type = error_type


class SourceProvider(Protocol):
    kind: str

    @property
    def location(self) -> str: ...

    def fetch_rows(self) -> list[list[str]]: ...


def is_placeholder(value: str | None) -> bool:
    """True for unset values and the setup placeholders shipped in examples."""
    if not value or not value.strip():
        return True
    return any(marker in value for marker in _PLACEHOLDER_MARKERS)


def _get(url: str, *, timeout: int, params: dict[str, str] | None = None) -> requests.Response:
    try:
        resp = requests.get(url, params=params, timeout=timeout)
    except requests.Timeout as e:
        raise SourceError(f"request timed out after {timeout}s: {e}", error_type="TIMEOUT") from e
    except requests.RequestException as e:
        raise SourceError(f"request failed: {e}", error_type="TRANSPORT_ERROR") from e
    if resp.status_code >= 400:
        raise SourceError(f"HTTP {resp.status_code}", error_type="HTTP_STATUS")
    return resp


class CsvUrlProvider:
    """Sheet tab published to the web as CSV (File -> Share -> Publish to web)."""

    kind = "csv_url"

    def __init__(self, url: str, *, timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS) -> None:
        self.url = url
        self.timeout_seconds = timeout_seconds

    @property
    def location(self) -> str:
        return self.url

    def fetch_rows(self) -> list[list[str]]:
        resp = _get(self.url, timeout=self.timeout_seconds)
        try:
            return parse_csv_text(resp.text)
        except SheetReadError as e:
            raise SourceError(str(e), error_type="INVALID_PAYLOAD") from e


class SheetsApiProvider:
    """Google Sheets values API (read-only, API key)."""

    kind = "sheets_api"

    def __init__(
        self,
        *,
        sheet_id: str,
        api_key: str,
        sheet_name: str = DEFAULT_SHEET_NAME,
        timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.sheet_id = sheet_id
        self.sheet_name = sheet_name
        self._api_key = api_key
        self.timeout_seconds = timeout_seconds

    @property
    def a1_range(self) -> str:
        # Tab names may contain spaces; quote and escape embedded quotes.
        escaped = self.sheet_name.replace("'", "''")
        return f"'{escaped}'!{SHEETS_COLUMN_SPAN}"

    @property
    def location(self) -> str:
        # never include the API key
        return f"{self.sheet_id}/{self.a1_range}"

    @property
    def url(self) -> str:
        return f"{SHEETS_API_BASE}/{self.sheet_id}/values/{quote(self.a1_range, safe='')}"

    def fetch_rows(self) -> list[list[str]]:
        resp = _get(self.url, timeout=self.timeout_seconds, params={"key": self._api_key})
        try:
            payload: Any = resp.json()
        except ValueError as e:
            raise SourceError(f"invalid json: {e}", error_type="INVALID_PAYLOAD") from e
        if not isinstance(payload, dict):
            raise SourceError("unexpected payload shape", error_type="INVALID_PAYLOAD")
        values = payload.get("values", [])
        if not isinstance(values, list):
            return []
        return [normalize_row(r if isinstance(r, list) else []) for r in values]


class CsvFileProvider:
    """Local CSV export of the sheet."""

    kind = "csv_file"

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    @property
    def location(self) -> str:
        return str(self.path)

    def fetch_rows(self) -> list[list[str]]:
        try:
            return read_csv_file(self.path)
        except SheetReadError as e:
            raise SourceError(str(e), error_type="FILE_ERROR") from e


def provider_from_config(cfg: SourceConfig) -> SourceProvider | None:
    """Pick the live provider: csv_path > csv_url > sheet_id + api_key.

    Returns None when nothing usable is configured.
    """
    if not is_placeholder(cfg.csv_path):
        return CsvFileProvider(Path(cfg.csv_path))  # type: ignore[arg-type]
    if not is_placeholder(cfg.csv_url):
        return CsvUrlProvider(cfg.csv_url, timeout_seconds=cfg.timeout_seconds)  # type: ignore[arg-type]
    if not is_placeholder(cfg.sheet_id):
        if is_placeholder(cfg.api_key):
            logger.warning("sheet_id is set but GOOGLE_SHEETS_API_KEY is missing; sheets api disabled")
            return None
        return SheetsApiProvider(
            sheet_id=cfg.sheet_id,  # type: ignore[arg-type]
            api_key=cfg.api_key,  # type: ignore[arg-type]
            sheet_name=cfg.sheet_name,
            timeout_seconds=cfg.timeout_seconds,
        )
    return None
