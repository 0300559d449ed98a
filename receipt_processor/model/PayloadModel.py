from typing import List

from pydantic import BaseModel

from receipt_processor.model.ReceiptModel import Receipt
from receipt_processor.model.ReceiptItemModel import ReceiptItem


# Wire names are camelCase to match the public receipt JSON.
class ItemPayload(BaseModel):
    shortDescription: str
    price: str


class ReceiptPayload(BaseModel):
    retailer: str
    purchaseDate: str
    purchaseTime: str
    total: str
    items: List[ItemPayload]

    def to_receipt(self) -> Receipt:
        return Receipt(
            retailer=self.retailer,
            purchase_date=self.purchaseDate,
            purchase_time=self.purchaseTime,
            total=self.total,
            items=tuple(
                ReceiptItem(short_description=item.shortDescription, price=item.price)
                for item in self.items
            ),
        )


class ReceiptIdResponse(BaseModel):
    id: str


class PointsResponse(BaseModel):
    points: int


class MessageResponse(BaseModel):
    message: str
