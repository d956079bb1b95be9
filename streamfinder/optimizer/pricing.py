from __future__ import annotations

import re

_PRICE_JUNK = re.compile(r"[^\d.,]")
_LEADING_NUMBER = re.compile(r"\d*\.?\d*")


def parse_price(value: str | None) -> float:
    """Normalize a German price string such as "29,99 €" to 29.99.

    Everything but digits, commas and periods is dropped and the first
    comma becomes the decimal point. The longest leading number wins, so
    "9,99 € (danach 4,99 €)" reads as 9.994 and thousands separators
    ("1.299,00 €") read as 1.299. Empty or unparseable input gives 0.
    """

    if not value:
        return 0.0
    cleaned = _PRICE_JUNK.sub("", str(value)).replace(",", ".", 1)
    number = _LEADING_NUMBER.match(cleaned).group()
    if not number.strip("."):
        return 0.0
    return float(number)
