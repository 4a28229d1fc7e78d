import logging
import math
from decimal import ROUND_HALF_UP, Decimal

from invoice_defaults import BASE_CURRENCY, get_currency

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")
WHOLE = Decimal("1")

ONES = ["", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine",
        "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen", "Sixteen",
        "Seventeen", "Eighteen", "Nineteen"]
TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]

LAKH = 100_000
CRORE = 10_000_000


def to_number(value) -> float:
    """Coerce a form value to a float; anything non-numeric becomes 0."""
    try:
        num = float(value)
    except (TypeError, ValueError):
        if value not in (None, ""):
            logger.debug("Non-numeric value %r coerced to 0", value)
        return 0.0
    if not math.isfinite(num):
        logger.debug("Non-finite value %r coerced to 0", value)
        return 0.0
    return num


def money(val, places=TWO_PLACES) -> float:
    """Round to 2 decimals (half away from zero) consistently for money values."""
    return float(Decimal(str(to_number(val))).quantize(places, rounding=ROUND_HALF_UP))


def _group_indian(digits: str) -> str:
    """1234567 -> 12,34,567"""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_currency(amount, currency=BASE_CURRENCY, symbol=None) -> str:
    """Symbol-prefixed amount with 2 decimals. Always renders the absolute value.

    The base currency uses Indian 2-and-3 grouping (₹1,23,456.00), every
    other currency Western 3-digit grouping ($123,456.00).
    """
    cur = get_currency(currency)
    value = Decimal(str(abs(to_number(amount)))).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    whole, frac = f"{value:.2f}".split(".")
    if cur["code"] == BASE_CURRENCY:
        grouped = _group_indian(whole)
    else:
        grouped = f"{int(whole):,}"
    prefix = cur["symbol"] if symbol is None else symbol
    return f"{prefix}{grouped}.{frac}"


def _words(num: int) -> str:
    if num < 20:
        return ONES[num]
    if num < 100:
        return TENS[num // 10] + (" " + ONES[num % 10] if num % 10 else "")
    if num < 1000:
        rest = num % 100
        return ONES[num // 100] + " Hundred" + (" and " + _words(rest) if rest else "")
    if num < LAKH:
        rest = num % 1000
        return _words(num // 1000) + " Thousand" + (" " + _words(rest) if rest else "")
    if num < CRORE:
        rest = num % LAKH
        return _words(num // LAKH) + " Lakh" + (" " + _words(rest) if rest else "")
    rest = num % CRORE
    return _words(num // CRORE) + " Crore" + (" " + _words(rest) if rest else "")


def number_to_words(amount, currency=BASE_CURRENCY) -> str:
    """Amount as Indian-system words, e.g. "Rupees Twelve Thousand Three Hundred and Forty Five Only".

    Lakh/crore grouping is used whatever the currency; only the spoken
    currency name changes. Fractions are rounded half-up to a whole unit.
    """
    spoken = get_currency(currency)["spoken"]
    num = int(Decimal(str(abs(to_number(amount)))).quantize(WHOLE, rounding=ROUND_HALF_UP))
    if num == 0:
        return f"{spoken} Zero Only"
    return f"{spoken} {_words(num)} Only"
