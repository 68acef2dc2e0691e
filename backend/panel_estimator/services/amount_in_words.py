"""Amounts in words, Indian numbering system (Crore, Lakh, Thousand)."""
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

_ONES = ["", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine"]
_TEENS = ["Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen",
          "Sixteen", "Seventeen", "Eighteen", "Nineteen"]
_TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]

# Largest first
_SCALES = [
    (10_000_000, "Crore"),
    (100_000, "Lakh"),
    (1_000, "Thousand"),
]


def _below_thousand(n: int) -> list:
    words = []
    if n >= 100:
        words += [_ONES[n // 100], "Hundred"]
        n %= 100
    if n >= 20:
        words.append(_TENS[n // 10])
        n %= 10
    if n >= 10:
        words.append(_TEENS[n - 10])
        n = 0
    if n > 0:
        words.append(_ONES[n])
    return words


def amount_in_words(amount: Union[int, float, Decimal]) -> str:
    """
    ``202488.0`` → ``"Two Lakh Two Thousand Four Hundred Eighty Eight Rupees"``.

    The amount is rounded half-up to whole rupees first; zero is ``"Zero"``.
    Crores above 999 are spelled recursively ("One Thousand Crore").
    """
    number = int(Decimal(str(amount)).quantize(Decimal(1), rounding=ROUND_HALF_UP))
    if number < 0:
        raise ValueError("amount must be non-negative")
    if number == 0:
        return "Zero"

    words = []
    for value, label in _SCALES:
        if number >= value:
            head = number // value
            if head >= 1000:
                words += amount_in_words(head).removesuffix(" Rupees").split()
            else:
                words += _below_thousand(head)
            words.append(label)
            number %= value
    words += _below_thousand(number)
    return " ".join(words) + " Rupees"
