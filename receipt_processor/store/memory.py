import logging
import threading
import uuid
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional

from receipt_processor.model.ReceiptModel import Receipt

logger = logging.getLogger(__name__)


def new_receipt_id() -> str:
    return str(uuid.uuid4())


class ReceiptStore(ABC):
    """Keyed collection of submitted receipts."""

    @abstractmethod
    def put(self, receipt: Receipt) -> str:
        """Store a receipt under a fresh identifier and return the identifier."""

    @abstractmethod
    def get(self, receipt_id: str) -> Optional[Receipt]:
        """Return the receipt stored under receipt_id, or None."""


class InMemoryReceiptStore(ReceiptStore):
    """
    Process-local receipt store.

    Identifier generation, the collision check and the insert all happen
    under one lock so two submissions can never share an identifier.
    """

    def __init__(self, id_factory: Callable[[], str] = new_receipt_id):
        self._id_factory = id_factory
        self._receipts: Dict[str, Receipt] = {}
        self._lock = threading.Lock()

    def put(self, receipt: Receipt) -> str:
        with self._lock:
            receipt_id = self._id_factory()
            while receipt_id in self._receipts:
                logger.debug("Receipt id collision on %s, regenerating", receipt_id)
                receipt_id = self._id_factory()
            self._receipts[receipt_id] = receipt
        return receipt_id

    def get(self, receipt_id: str) -> Optional[Receipt]:
        return self._receipts.get(receipt_id)

    def __len__(self) -> int:
        return len(self._receipts)

