# barberqueue/events.py

"""In-process change channel for shop queues.

Events only say that a shop's queue changed. Subscribers re-fetch the queue
and must tolerate duplicate or out-of-order delivery.
"""

import logging
import threading
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueueEvent:
    shop_id: int
    kind: str  # created, started, completed, cancelled, deleted
    appointment_id: int
    version: int


Subscriber = Callable[[QueueEvent], None]


class QueueEventBus:
    def __init__(self):
        self._lock = threading.Lock()
        self._versions: Dict[int, int] = defaultdict(int)
        self._subscribers: Dict[int, List[Subscriber]] = defaultdict(list)

    def version(self, shop_id: int) -> int:
        with self._lock:
            return self._versions[shop_id]

    def subscribe(self, shop_id: int, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` for a shop. Returns a function that unsubscribes it."""
        with self._lock:
            self._subscribers[shop_id].append(callback)

        def unsubscribe():
            with self._lock:
                if callback in self._subscribers[shop_id]:
                    self._subscribers[shop_id].remove(callback)

        return unsubscribe

    def publish(self, shop_id: int, kind: str, appointment_id: int) -> QueueEvent:
        with self._lock:
            self._versions[shop_id] += 1
            event = QueueEvent(shop_id, kind, appointment_id, self._versions[shop_id])
            subscribers = list(self._subscribers[shop_id])

        for callback in subscribers:
            try:
                callback(event)
            except Exception:
                logger.exception(f"Queue subscriber failed for shop {shop_id} ({kind})")
        return event


bus = QueueEventBus()
