import math
import re
from datetime import date, datetime
from typing import List, Tuple

from errors import InvalidReceipt
from models import Receipt, ReceiptItem

RECEIPT_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
RECEIPT_DATE_FORMAT = '%Y-%m-%d'
RECEIPT_TIME_PART_PATTERN = re.compile(r"[+-]?[0-9]+")
NON_ALPHANUMERIC_PATTERN = re.compile(r"[^a-zA-Z0-9]+")
POINTS_RETAILER_NAME_ALPHANUM_CHARACTER = 1
POINTS_TOTAL_HAS_NO_CENTS = 50
POINTS_TOTAL_IS_MULTIPLE_OF_QUARTERS = 25
POINTS_ITEM_PAIR = 5
POINTS_ITEM_DESCRIPTION = 0.2
POINTS_AFTERNOON_PURCHASE = 10
POINTS_ODD_PURCHASE_DAY = 6
QUARTER = 0.25
REWARD_ITEM_DESCRIPTION_LENGTH_FACTOR = 3
REWARD_HOUR_START = 14
REWARD_HOUR_END = 16


def parse_purchase_time(purchase_time: str) -> Tuple[int, int]:
    """ Splits an HH:MM time into hour and minute, checking both ranges """
    parts = purchase_time.split(":")
    if len(parts) != 2 or not all(RECEIPT_TIME_PART_PATTERN.fullmatch(part) for part in parts):
        raise InvalidReceipt(f"invalid receipt purchase time ({purchase_time})")
    try:
        hour, minute = int(parts[0]), int(parts[1])
    except ValueError:
        raise InvalidReceipt(f"invalid receipt purchase time ({purchase_time})")
    if not 0 <= hour <= 23 or not 0 <= minute <= 59:
        raise InvalidReceipt(f"invalid receipt purchase time ({purchase_time})")
    return hour, minute


def parse_purchase_date(purchase_date: str) -> date:
    if not RECEIPT_DATE_PATTERN.fullmatch(purchase_date):
        raise InvalidReceipt(f"invalid receipt purchase date ({purchase_date})")
    try:
        return datetime.strptime(purchase_date, RECEIPT_DATE_FORMAT).date()
    except ValueError:
        raise InvalidReceipt(f"invalid receipt purchase date ({purchase_date})")


def validate_receipt(receipt: Receipt) -> Tuple[Tuple[int, int], date]:
    """
    Checks that every field needed for scoring is present and well formed.

    Returns the parsed purchase time and date so the rules below do not parse
    them a second time. Raises InvalidReceipt on the first problem found.
    """
    for attribute in ("retailer", "purchase_date", "purchase_time", "total", "items"):
        if getattr(receipt, attribute) is None:
            raise InvalidReceipt(f"missing {attribute} in receipt")

    purchase_time = parse_purchase_time(receipt.purchase_time)
    purchase_date = parse_purchase_date(receipt.purchase_date)

    for item in receipt.items:
        if item is None or item.short_description is None or item.price is None:
            raise InvalidReceipt("invalid receipt item format")
    return purchase_time, purchase_date


def score_retailer(retailer_name: str) -> int:
    """ One point per ASCII letter or digit in the retailer name """
    return len(NON_ALPHANUMERIC_PATTERN.sub("", retailer_name)) * POINTS_RETAILER_NAME_ALPHANUM_CHARACTER


def score_total(total: float) -> int:
    points = 0
    if total - math.floor(total) == 0:
        points += POINTS_TOTAL_HAS_NO_CENTS
    quarters = total / QUARTER
    if math.isfinite(quarters) and quarters - math.floor(quarters) == 0:
        points += POINTS_TOTAL_IS_MULTIPLE_OF_QUARTERS
    return points


def score_item_description(item: ReceiptItem) -> int:
    # length is counted in UTF-8 bytes; an empty description (length 0) also qualifies
    length = len(item.short_description.strip().encode("utf-8"))
    if length % REWARD_ITEM_DESCRIPTION_LENGTH_FACTOR == 0:
        return math.ceil(item.price * POINTS_ITEM_DESCRIPTION)
    return 0


def score_items(items: List[ReceiptItem]) -> float:
    # accumulated as a float; huge prices overflow to inf
    points = float((len(items) // 2) * POINTS_ITEM_PAIR)
    for item in items:
        points += score_item_description(item)
    return points


def score_purchase_time(hour: int, minute: int) -> int:
    """ 2:00pm up to and including 4:00pm """
    if REWARD_HOUR_START <= hour < REWARD_HOUR_END or (hour == REWARD_HOUR_END and minute == 0):
        return POINTS_AFTERNOON_PURCHASE
    return 0


def score_purchase_date(purchase_date: date) -> int:
    if purchase_date.day % 2 == 1:
        return POINTS_ODD_PURCHASE_DAY
    return 0


def score(receipt: Receipt) -> float:
    """
    Validates a receipt and calculates the points it earns.

    Amounts are binary floats and the round-dollar and quarter checks compare
    against the exact floor, without any tolerance. Raises InvalidReceipt if
    the receipt cannot be scored.
    """
    (hour, minute), purchase_date = validate_receipt(receipt)
    points = 0.0
    points += score_retailer(receipt.retailer)
    points += score_total(receipt.total)
    points += score_items(receipt.items)
    points += score_purchase_time(hour, minute)
    points += score_purchase_date(purchase_date)
    if not math.isfinite(points):
        raise InvalidReceipt("points out of range")
    return points


def format_points(points: float) -> str:
    """ Renders a score the way it travels on the wire, e.g. "28" """
    if points.is_integer():
        return str(int(points))
    return repr(points)
