import logging
import os
from collections import deque
from threading import Lock
from typing import Deque, Dict, List

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
LOG_BUFFER_SIZE = 500


class MemoryLogHandler(logging.Handler):
    """Keeps the most recent formatted records for the /api/logs endpoint."""

    def __init__(self, capacity: int = LOG_BUFFER_SIZE):
        super().__init__()
        self.records: Deque[Dict[str, str]] = deque(maxlen=capacity)
        self._records_lock = Lock()

    def emit(self, record):
        try:
            entry = {
                "level": record.levelname,
                "source": record.name,
                "message": self.format(record),
            }
            with self._records_lock:
                self.records.append(entry)
        except Exception:
            self.handleError(record)

    def get_logs(self, limit: int = 200) -> List[Dict[str, str]]:
        with self._records_lock:
            entries = list(self.records)
        # newest first
        return entries[::-1][:max(limit, 0)]


def setup_logging() -> MemoryLogHandler:
    logger = logging.getLogger("pwmeter")
    logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))

    # Check if handler already added
    for h in logger.handlers:
        if isinstance(h, MemoryLogHandler):
            return h

    memory_handler = MemoryLogHandler()
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    memory_handler.setFormatter(formatter)
    logger.addHandler(memory_handler)
    return memory_handler
