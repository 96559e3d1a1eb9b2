"""Read raw logs from NDJSON files (one `eth_getLogs` result object per line)."""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path

from abidec.core.errors import LoadError
from abidec.core.models import LogRecord


def iter_log_records(path: Path) -> Iterator[LogRecord]:
    """Yield `LogRecord`s from an NDJSON file, skipping blank lines.

    Raises `LoadError` (with the file position) for invalid JSON and for
    records missing `blockNumber` or `logIndex`.
    """
    with open(path, encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                raw = json.loads(line)
            except json.JSONDecodeError as e:
                raise LoadError(f"{path}:{lineno}: invalid JSON log record: {e}") from e
            try:
                record = LogRecord.from_rpc(raw)
            except LoadError as e:
                raise LoadError(f"{path}:{lineno}: {e.reason}", field=e.field) from e
            yield record
