"""Indian-notation number formatting shared by replies and prompts."""

from __future__ import annotations


def group_digits(amount: float) -> str:
    """Format a number with Indian digit grouping: 1234567.5 → "12,34,567.5".

    Whole numbers carry no decimals; fractions are kept to two places.
    """
    negative = amount < 0
    rounded = round(abs(amount), 2)
    whole = int(rounded)
    fraction = f"{rounded - whole:.2f}"[2:].rstrip("0")

    digits = str(whole)
    if len(digits) > 3:
        head, tail = digits[:-3], digits[-3:]
        pairs = []
        while len(head) > 2:
            pairs.insert(0, head[-2:])
            head = head[:-2]
        if head:
            pairs.insert(0, head)
        digits = ",".join(pairs) + "," + tail

    text = f"{digits}.{fraction}" if fraction else digits
    return f"-{text}" if negative else text


def format_inr(amount: float) -> str:
    """Rupee amount in Indian notation: 125000 → "₹1,25,000"."""
    text = group_digits(amount)
    if text.startswith("-"):
        return f"-₹{text[1:]}"
    return f"₹{text}"
