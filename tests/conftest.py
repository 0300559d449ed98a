import pytest
from fastapi.testclient import TestClient

from receipt_processor.app import create_app
from receipt_processor.config import Settings
from receipt_processor.model.ReceiptItemModel import ReceiptItem
from receipt_processor.model.ReceiptModel import Receipt
from receipt_processor.store.memory import InMemoryReceiptStore


@pytest.fixture
def store():
    return InMemoryReceiptStore()


@pytest.fixture
def client(store):
    return TestClient(create_app(store=store, settings=Settings(lenient_scoring=False)))


@pytest.fixture
def lenient_client():
    app = create_app(store=InMemoryReceiptStore(), settings=Settings(lenient_scoring=True))
    return TestClient(app)


@pytest.fixture
def target_payload():
    return {
        "retailer": "Target",
        "purchaseDate": "2022-01-01",
        "purchaseTime": "13:01",
        "items": [
            {"shortDescription": "Mountain Dew 12PK", "price": "6.49"},
            {"shortDescription": "Emils Cheese Pizza", "price": "12.25"},
            {"shortDescription": "Knorr Creamy Chicken", "price": "1.26"},
            {"shortDescription": "Doritos Nacho Cheese", "price": "3.35"},
            {"shortDescription": "   Klarbrunn 12-PK 12 FL OZ  ", "price": "12.00"},
        ],
        "total": "35.35",
    }


@pytest.fixture
def corner_market_receipt():
    return Receipt(
        retailer="M&M Corner Market",
        purchase_date="2022-03-20",
        purchase_time="14:33",
        total="9.00",
        items=tuple(ReceiptItem(short_description="Gatorade", price="2.25") for _ in range(4)),
    )
