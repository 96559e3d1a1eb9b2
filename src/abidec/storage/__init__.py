from abidec.storage.logs import iter_log_records
from abidec.storage.writer import EventTableWriter

__all__ = ["iter_log_records", "EventTableWriter"]
