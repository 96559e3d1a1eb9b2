"""Core errors, configuration and batch row models.

This package provides:
- Error taxonomy (GrammarError, LoadError, DecodeError, ...)
- Configuration classes (BatchDecodeConfig)
- Data models (LogRecord, Column) in `abidec.core.models`
"""

from abidec.core.config import BatchDecodeConfig
from abidec.core.errors import (
    AbiError,
    DecodeError,
    GrammarError,
    InsufficientData,
    InsufficientTopics,
    LoadError,
    SelectorNotFound,
    TopicNotFound,
)

__all__ = [
    "BatchDecodeConfig",
    "AbiError",
    "DecodeError",
    "GrammarError",
    "InsufficientData",
    "InsufficientTopics",
    "LoadError",
    "SelectorNotFound",
    "TopicNotFound",
]
