import logging
import threading
from typing import Dict
from uuid import uuid4

from errors import ReceiptNotFound

logger = logging.getLogger(__name__)


class ReceiptStore:
    """
    In-memory (receipt id -> reward points) mapping.

    Records live until the process exits; there is no update or delete.
    Reads and writes go through a lock so the store can be shared by the
    request threads of a threaded server.
    """

    def __init__(self):
        self._points: Dict[str, float] = {}
        self._lock = threading.Lock()

    def put(self, points: float) -> str:
        """ Stores the points under a freshly generated id and returns the id """
        with self._lock:
            receipt_id = str(uuid4())
            while receipt_id in self._points:
                logger.debug("Receipt id collision on %s, regenerating", receipt_id)
                receipt_id = str(uuid4())
            self._points[receipt_id] = points
        logger.debug("Stored %s points under receipt id %s", points, receipt_id)
        return receipt_id

    def get(self, receipt_id: str) -> float:
        with self._lock:
            try:
                return self._points[receipt_id]
            except KeyError:
                raise ReceiptNotFound(f"receipt id not found ({receipt_id})") from None

    def __contains__(self, receipt_id: str) -> bool:
        with self._lock:
            return receipt_id in self._points

    def __len__(self) -> int:
        with self._lock:
            return len(self._points)
