from __future__ import annotations

import logging
import os
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

from abidec.core.models import Column

logger = logging.getLogger(__name__)


class EventTableWriter:
    """
    Event-partitioning table writer: one Parquet file per event name.

    Layout example:
        <root>/
          Transfer.parquet
          Approval.parquet
          _failed.parquet   (rows that could not be decoded, if kept)
    """

    def __init__(self, *, root: Path, codec: str = "zstd") -> None:
        self.root = root
        self.codec = codec
        self.root.mkdir(exist_ok=True, parents=True)

    def _atomic_write(self, out_path: Path, table: pa.Table) -> Path | None:
        """Write Parquet atomically (tmp + replace)."""
        if len(table) == 0:
            return None
        tmp = out_path.with_suffix(".tmp")
        pq.write_table(table, tmp, compression=self.codec)
        os.replace(tmp, out_path)
        logger.info("wrote %s (rows=%d, cols=%d)", out_path, len(table), len(table.schema))
        return out_path

    def table_path(self, event: str) -> Path:
        return self.root / f"{event or '_failed'}.parquet"

    def write(self, column_batch: Column) -> list[Path]:
        """Group rows by `event` and write each group to its own file."""
        if column_batch.size() == 0:
            return []

        idx_by_event: dict[str, list[int]] = {}
        for i, ev in enumerate(column_batch.event):
            idx_by_event.setdefault(ev, []).append(i)

        written: list[Path] = []
        for ev, indices in sorted(idx_by_event.items()):
            tbl = column_batch.take_indices(indices).to_arrow_table()
            out_path = self._atomic_write(self.table_path(ev), tbl)
            if out_path:
                written.append(out_path)
        return written
