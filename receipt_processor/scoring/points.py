import logging
import math
import re
from datetime import date, datetime, time
from decimal import Decimal, getcontext, localcontext
from typing import Iterable, Union

from receipt_processor.model.ReceiptModel import Receipt
from receipt_processor.model.ReceiptItemModel import ReceiptItem

logger = logging.getLogger(__name__)

Amount = Union[Decimal, float]

AMOUNT_PATTERN = re.compile(r'^([0-9]+(\.[0-9]*)?|\.[0-9]+)$')
DATE_PATTERN = re.compile(r'^[0-9]{4}-[0-9]{2}-[0-9]{2}$')
TIME_PATTERN = re.compile(r'^[0-9]{1,2}:[0-9]{2}$')
# Decimal float syntax accepted by the legacy service's amount parser.
LEGACY_AMOUNT_PATTERN = re.compile(
    r'^[+-]?(([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?|inf|infinity|nan)$',
    re.IGNORECASE,
)

ROUND_DOLLAR_POINTS = 50
QUARTER_MULTIPLE_POINTS = 25
ITEM_PAIR_POINTS = 5
DESCRIPTION_LENGTH_FACTOR = 3
DESCRIPTION_PRICE_MULTIPLIER = Decimal("0.2")
ODD_DAY_POINTS = 6
AFTERNOON_POINTS = 10
AFTERNOON_START_HOUR = 14
AFTERNOON_END_HOUR = 16


class ReceiptParseError(ValueError):
    """A receipt field could not be parsed while scoring."""

    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value
        super().__init__(f"Could not parse {field} of {value!r}")


def parse_amount(value: str, field: str = "amount") -> Decimal:
    if not isinstance(value, str) or not AMOUNT_PATTERN.match(value):
        raise ReceiptParseError(field, value)
    return Decimal(value)


def parse_legacy_amount(value: str) -> float:
    """
    Parse an amount the way the legacy service did.

    Anything that is not a decimal float literal counts as 0.0.
    """
    if not isinstance(value, str) or not LEGACY_AMOUNT_PATTERN.match(value):
        return 0.0
    return float(value)


def parse_purchase_date(value: str) -> date:
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        raise ReceiptParseError("purchaseDate", value)
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise ReceiptParseError("purchaseDate", value)


def parse_purchase_time(value: str) -> time:
    if not isinstance(value, str) or not TIME_PATTERN.match(value):
        raise ReceiptParseError("purchaseTime", value)
    try:
        return datetime.strptime(value, "%H:%M").time()
    except ValueError:
        raise ReceiptParseError("purchaseTime", value)


def _precision_for(amount: Amount) -> int:
    # Room for every digit of the amount plus the quotient or product carry.
    if isinstance(amount, Decimal) and amount.is_finite():
        return max(getcontext().prec, len(amount.as_tuple().digits) + 2)
    return getcontext().prec


def retailer_points(retailer: str) -> int:
    # str.isalnum() also accepts non-ASCII letters and digits
    return sum(1 for char in retailer if char.isascii() and char.isalnum())


def total_points(total: Amount) -> int:
    points = 0
    with localcontext() as ctx:
        ctx.prec = _precision_for(total)
        if total % 1 == 0:
            points += ROUND_DOLLAR_POINTS
        if total % _quarter(total) == 0:
            points += QUARTER_MULTIPLE_POINTS
    return points


def _quarter(amount: Amount) -> Amount:
    return Decimal("0.25") if isinstance(amount, Decimal) else 0.25


def item_count_points(item_count: int) -> int:
    return ITEM_PAIR_POINTS * (item_count // 2)


def description_points(item: ReceiptItem, price: Amount) -> int:
    # Only spaces are trimmed; tabs and newlines count toward the length.
    if len(item.short_description.strip(" ")) % DESCRIPTION_LENGTH_FACTOR != 0:
        return 0
    if isinstance(price, float):
        if not math.isfinite(price):
            return 0
        return math.ceil(price * float(DESCRIPTION_PRICE_MULTIPLIER))
    with localcontext() as ctx:
        ctx.prec = _precision_for(price)
        return math.ceil(price * DESCRIPTION_PRICE_MULTIPLIER)


def date_points(purchase_date: date) -> int:
    return ODD_DAY_POINTS if purchase_date.day % 2 == 1 else 0


def time_points(purchase_time: time) -> int:
    if AFTERNOON_START_HOUR <= purchase_time.hour < AFTERNOON_END_HOUR:
        return AFTERNOON_POINTS
    return 0


def _items_points(items: Iterable[ReceiptItem], strict: bool) -> int:
    points = 0
    for item in items:
        if strict:
            price = parse_amount(item.price, "price")
        else:
            price = parse_legacy_amount(item.price)
        points += description_points(item, price)
    return points


def score(receipt: Receipt, strict: bool = True) -> int:
    """
    Compute the loyalty points for a receipt.

    With strict=True any unparseable date, time or amount raises
    ReceiptParseError. With strict=False amounts are parsed as binary
    floats, unparseable amounts count as zero and an unparseable date or
    time collapses the whole score to zero.
    """
    if strict:
        total = parse_amount(receipt.total, "total")
    else:
        total = parse_legacy_amount(receipt.total)

    points = retailer_points(receipt.retailer)
    points += total_points(total)
    points += item_count_points(len(receipt.items))
    points += _items_points(receipt.items, strict)

    try:
        purchase_date = parse_purchase_date(receipt.purchase_date)
        purchase_time = parse_purchase_time(receipt.purchase_time)
    except ReceiptParseError as e:
        if strict:
            raise
        logger.warning("Scoring collapsed to zero: %s", e)
        return 0

    points += date_points(purchase_date)
    points += time_points(purchase_time)
    return points
