"""Deterministic receipt points engine. Pure code, no I/O, no shared state."""

import math
import re
from datetime import datetime, time
from decimal import Decimal, InvalidOperation

RETAILER_CHAR_RE = re.compile(r"[A-Za-z0-9]")

ROUND_DOLLAR_POINTS = 50
QUARTER_MULTIPLE_POINTS = 25
ITEM_PAIR_POINTS = 5
GENERATED_BY_LLM_POINTS = 5
ODD_DAY_POINTS = 6
AFTERNOON_POINTS = 10

QUARTER = Decimal("0.25")
# amounts of 10^16 or more are treated as unparseable
MAX_AMOUNT_EXPONENT = 15
DESCRIPTION_PRICE_MULTIPLIER = Decimal("0.2")
AFTERNOON_START = time(14, 0)
AFTERNOON_END = time(16, 0)


def _parse_amount(value: str) -> Decimal | None:
    """Parse a currency string. None unless it is a finite amount in [0, 10^16)."""
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return None
    if not amount.is_finite() or amount < 0 or amount.adjusted() > MAX_AMOUNT_EXPONENT:
        return None
    return amount


def _is_multiple(amount: Decimal | None, step: Decimal) -> bool:
    if amount is None:
        return False
    try:
        return amount % step == 0
    except ArithmeticError:
        return False


def _parse_time(value: str) -> time | None:
    try:
        return datetime.strptime(value, "%H:%M").time()
    except (TypeError, ValueError):
        return None


def retailer_points(retailer: str) -> int:
    """One point per ASCII letter or digit anywhere in the name."""
    return len(RETAILER_CHAR_RE.findall(retailer or ""))


def round_dollar_points(total: str) -> int:
    return ROUND_DOLLAR_POINTS if _is_multiple(_parse_amount(total), Decimal(1)) else 0


def quarter_multiple_points(total: str) -> int:
    return QUARTER_MULTIPLE_POINTS if _is_multiple(_parse_amount(total), QUARTER) else 0


def item_pair_points(items: list) -> int:
    return (len(items) // 2) * ITEM_PAIR_POINTS


def item_description_points(item: dict) -> int:
    """
    ceil(price * 0.2) when the trimmed description length is a multiple of 3.
    An empty trimmed description (length 0) qualifies too.
    """
    description = (item.get("shortDescription") or "").strip()
    if len(description) % 3 != 0:
        return 0
    price = _parse_amount(item.get("price"))
    if price is None:
        return 0
    try:
        return math.ceil(price * DESCRIPTION_PRICE_MULTIPLIER)
    except ArithmeticError:
        return 0


def odd_day_points(purchase_date: str) -> int:
    try:
        day = datetime.strptime(purchase_date, "%Y-%m-%d").day
    except (TypeError, ValueError):
        return 0
    return ODD_DAY_POINTS if day % 2 == 1 else 0


def afternoon_points(purchase_time: time) -> int:
    """Strictly after 14:00 and strictly before 16:00."""
    return AFTERNOON_POINTS if AFTERNOON_START < purchase_time < AFTERNOON_END else 0


class RuleEngine:
    """
    Scores receipts. The generated-by-LLM bonus is fixed at construction,
    so an engine instance is a pure function of the receipt.
    """

    def __init__(self, generated_by_llm: bool = False):
        self.generated_by_llm = bool(generated_by_llm)

    def breakdown(self, receipt: dict) -> dict:
        """
        Per-rule contributions plus total.
        If purchaseTime does not parse as HH:MM the whole receipt scores 0
        (purchase_time_valid=False), while every other rule only zeroes its own
        contribution on bad input.
        """
        items = receipt.get("items") or []
        result = {
            "retailer": retailer_points(receipt.get("retailer", "")),
            "round_dollar": round_dollar_points(receipt.get("total")),
            "quarter_multiple": quarter_multiple_points(receipt.get("total")),
            "item_pairs": item_pair_points(items),
            "item_descriptions": sum(item_description_points(i) for i in items),
            "generated_by_llm": GENERATED_BY_LLM_POINTS if self.generated_by_llm else 0,
            "odd_day": odd_day_points(receipt.get("purchaseDate")),
            "afternoon": 0,
            "purchase_time_valid": True,
        }

        purchase_time = _parse_time(receipt.get("purchaseTime"))
        if purchase_time is None:
            result["purchase_time_valid"] = False
            result["total"] = 0
            return result

        result["afternoon"] = afternoon_points(purchase_time)
        result["total"] = sum(v for k, v in result.items() if k != "purchase_time_valid")
        return result

    def score(self, receipt: dict) -> int:
        return self.breakdown(receipt)["total"]


def compute_points(receipt: dict, generated_by_llm: bool = False) -> int:
    """Score a single receipt with a throwaway engine."""
    return RuleEngine(generated_by_llm=generated_by_llm).score(receipt)
