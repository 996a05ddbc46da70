"""In-memory score store: receipt id -> points, for the life of the process."""

import threading


class ReceiptNotFoundError(LookupError):
    """Raised when no points were ever stored for a receipt id."""


class DuplicateReceiptIdError(ValueError):
    """Raised when a receipt id is stored twice. Records are write-once."""


class ScoreStore:
    """
    Thread-safe mapping of receipt id to points.
    One lock guards the whole dict; it is held only for the dict access.
    Records are never updated or removed.
    """

    def __init__(self):
        self._points: dict[str, int] = {}
        self._lock = threading.Lock()

    def put(self, receipt_id: str, points: int) -> None:
        with self._lock:
            if receipt_id in self._points:
                raise DuplicateReceiptIdError(f"Receipt id already stored: {receipt_id}")
            self._points[receipt_id] = points

    def get(self, receipt_id: str) -> int:
        """Return stored points. Raises ReceiptNotFoundError for an unknown id."""
        with self._lock:
            try:
                return self._points[receipt_id]
            except KeyError:
                raise ReceiptNotFoundError(f"No receipt found for id={receipt_id}") from None

    def __contains__(self, receipt_id: str) -> bool:
        with self._lock:
            return receipt_id in self._points

    def __len__(self) -> int:
        with self._lock:
            return len(self._points)
