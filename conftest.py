import pytest

from app import create_app
from store import ReceiptStore


@pytest.fixture
def store():
    return ReceiptStore()


@pytest.fixture
def app(store):
    app = create_app(store)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def simple_receipt_skeleton():
    # worth 31 points: 6 for "Target" and 25 because 1.25 is a multiple of 0.25
    return {
        "retailer": "Target",
        "purchaseDate": "2022-01-02",
        "purchaseTime": "13:13",
        "total": "1.25",
        "items": [
            {"shortDescription": "Pepsi - 12-oz", "price": "1.25"}
        ]
    }
