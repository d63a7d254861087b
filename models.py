import math
import re
from dataclasses import dataclass
from typing import List, Optional

from errors import MalformedRequestBody

AMOUNT_PATTERN = re.compile(r"(0|[1-9][0-9]*)(\.[0-9]+)?")


@dataclass(frozen=True)
class ReceiptItem:
    short_description: Optional[str] = None
    price: Optional[float] = None

    @classmethod
    def from_json(cls, item: Optional[dict]) -> Optional["ReceiptItem"]:
        if item is None:
            return None
        if not isinstance(item, dict):
            raise MalformedRequestBody("invalid receipt item format")
        return cls(
            short_description=_decode_string(item, "shortDescription"),
            price=_decode_amount(item, "price"),
        )


@dataclass(frozen=True)
class Receipt:
    """
    A receipt document as submitted by the client. Every field is optional
    here: a missing key or a JSON null decodes to None, and it is up to the
    scorer to reject receipts with absent fields.
    """
    retailer: Optional[str] = None
    purchase_date: Optional[str] = None
    purchase_time: Optional[str] = None
    total: Optional[float] = None
    items: Optional[List[Optional[ReceiptItem]]] = None

    @classmethod
    def from_json(cls, document) -> "Receipt":
        """ Decodes a parsed JSON body, raising MalformedRequestBody on wrong types """
        if document is None:
            return cls()
        if not isinstance(document, dict):
            raise MalformedRequestBody("receipt document is not a JSON object")

        items = document.get("items")
        if items is not None:
            if not isinstance(items, list):
                raise MalformedRequestBody("invalid receipt items list format")
            items = [ReceiptItem.from_json(item) for item in items]

        return cls(
            retailer=_decode_string(document, "retailer"),
            purchase_date=_decode_string(document, "purchaseDate"),
            purchase_time=_decode_string(document, "purchaseTime"),
            total=_decode_amount(document, "total"),
            items=items,
        )


def _decode_string(document: dict, attribute: str) -> Optional[str]:
    value = document.get(attribute)
    if value is not None and not isinstance(value, str):
        raise MalformedRequestBody(f"invalid {attribute} format")
    return value


def _decode_amount(document: dict, attribute: str) -> Optional[float]:
    """ Amounts travel as decimal strings, e.g. "35.35" """
    value = _decode_string(document, attribute)
    if value is None:
        return None
    if not AMOUNT_PATTERN.fullmatch(value):
        raise MalformedRequestBody(f"invalid {attribute} amount ({value})")
    amount = float(value)
    if not math.isfinite(amount):
        raise MalformedRequestBody(f"{attribute} amount out of range")
    return amount
