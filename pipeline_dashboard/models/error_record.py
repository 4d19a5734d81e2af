from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the source failure log.

One record is written per failed live fetch. The load cycle recovers by
switching to the snapshot, so these records are the only trace of the failure
besides the ERROR log line.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        source: Provider kind that failed (csv_url / sheets_api / csv_file)
        location: URL, sheet range or file path the provider was reading
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Exception text or HTTP status description
    """
    timestamp: str  # ISO8601 UTC
    source: str
    location: str
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(source: str, location: str, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            source=source,
            location=location,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        # 追加キー阻止: dataclass -> dict して json.dumps
        return json.dumps(asdict(self), ensure_ascii=False)
