from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ..models.error_record import ErrorRecord

"""Pipeline source failure log (JSON Lines).

Every live load that ends on the snapshot leaves one ErrorRecord here: which
provider failed (csv_url / sheets_api / csv_file), the URL, sheet range or path
it was reading (never the API key), and the error_type the load cycle assigned
(TIMEOUT, HTTP_STATUS, INVALID_PAYLOAD, FILE_ERROR, UNEXPECTED_ERROR ...).

File: logs/errors-YYYYMMDD-HHMMSS.log (UTC), one per process, created on the
first flush that has records. Tests pass logs_dir to keep it out of the cwd.
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class ErrorLogBuffer:
    """Buffers failed-fetch records until the load cycle flushes them.

    スレッド安全性不要 (ロードサイクルは同時に1つ)
    """

    def __init__(self, logs_dir: Path | None = None) -> None:
        self._records: list[ErrorRecord] = []
        self._logs_dir = logs_dir or LOGS_DIR
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"errors-{stamp}.log"
        return self._file_path

    @property
    def records(self) -> tuple[ErrorRecord, ...]:
        return tuple(self._records)

    def append(self, record: ErrorRecord) -> None:
        self._records.append(record)

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path | None:
        """Write buffered records; returns the file path, or None if nothing was written."""
        if not self._records:
            return None
        fp = self.file_path
        fp.parent.mkdir(parents=True, exist_ok=True)
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
