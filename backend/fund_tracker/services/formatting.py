"""Display formatting for rupee amounts."""

from decimal import ROUND_HALF_UP, Decimal


def format_inr(amount: float) -> str:
    """Format as rupees with Indian digit grouping and no fraction digits.

    >>> format_inr(123456.7)
    '₹1,23,457'
    """
    rounded = int(Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    sign = "-" if rounded < 0 else ""
    digits = str(abs(rounded))

    # Last three digits, then groups of two (lakh, crore, ...)
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return f"{sign}₹{','.join(groups + [tail])}"
