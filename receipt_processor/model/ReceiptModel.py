from dataclasses import dataclass, field
from typing import Tuple

from receipt_processor.model.ReceiptItemModel import ReceiptItem


@dataclass(frozen=True)
class Receipt:
    retailer: str
    purchase_date: str
    purchase_time: str
    total: str
    items: Tuple[ReceiptItem, ...] = field(default_factory=tuple)
