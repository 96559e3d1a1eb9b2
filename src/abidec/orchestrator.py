from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from abidec.abi_json import load_interface
from abidec.core.config import BatchDecodeConfig
from abidec.core.errors import DecodeError, TopicNotFound
from abidec.core.models import Column, LogRecord
from abidec.decoding.registry import ContractInterface
from abidec.storage.logs import iter_log_records
from abidec.storage.writer import EventTableWriter

logger = logging.getLogger(__name__)


@dataclass(kw_only=True)
class BatchStats:
    """
    Counters for one batch decode run:
    - total logs read
    - logs decoded into rows
    - logs skipped because no event matched
    - logs that failed to decode (kept as error rows when configured)
    """

    total_logs: int = 0
    decoded: int = 0
    unknown: int = 0
    failed: int = 0
    rows_per_event: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class BatchResult:
    stats: BatchStats
    written: list[Path]


def decode_logs(
    interface: ContractInterface,
    records: Iterable[LogRecord],
    *,
    keep_errors: bool = False,
    skip_unknown: bool = True,
) -> tuple[Column, BatchStats]:
    """Decode raw logs into a `Column` buffer.

    Logs matching no event are counted and skipped (or raise when
    `skip_unknown` is False). Malformed logs raise, unless `keep_errors`
    is set, in which case they become rows with the `error` column filled.
    """
    buf = Column.empty()
    stats = BatchStats()

    for log in records:
        stats.total_logs += 1
        try:
            event, params = interface.decode_event_log(log.topics, log.data_hex)
        except TopicNotFound:
            if not skip_unknown:
                raise
            stats.unknown += 1
            logger.debug("skipping log %s:%d, no matching event", log.tx_hash, log.log_index)
            continue
        except DecodeError as e:
            if not keep_errors:
                raise
            stats.failed += 1
            logger.warning("failed to decode log %s:%d: %s", log.tx_hash, log.log_index, e)
            try:
                name = interface.find_event(log.topics).name
            except (TopicNotFound, DecodeError):
                name = ""  # malformed topics
            buf.append_failed(log, name, f"{type(e).__name__}: {e}")
            continue

        buf.append_decoded(log, event.name, params)
        stats.decoded += 1
        stats.rows_per_event[event.name] = stats.rows_per_event.get(event.name, 0) + 1

    return buf, stats


def run_batch_decode(config: BatchDecodeConfig) -> BatchResult:
    """Load the ABI, decode every log of `config.logs_path` and write per-event tables."""
    interface = load_interface(config.abi_path)
    buf, stats = decode_logs(
        interface,
        iter_log_records(config.logs_path),
        keep_errors=config.keep_errors,
        skip_unknown=config.skip_unknown,
    )
    writer = EventTableWriter(root=config.out_root, codec=config.codec)
    written = writer.write(buf)
    return BatchResult(stats=stats, written=written)
