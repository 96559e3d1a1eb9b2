from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class BatchDecodeConfig:
    """Configuration for decoding a file of raw logs into Parquet tables."""

    abi_path: Path
    logs_path: Path
    out_root: Path = Path("./decoded")
    codec: str = "zstd"
    keep_errors: bool = False  # record per-row errors instead of aborting
    skip_unknown: bool = True  # skip logs whose topic matches no event
