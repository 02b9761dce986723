from decimal import Decimal, ROUND_HALF_UP

UNITS = ["", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine", "Ten", "Eleven", "Twelve",
         "Thirteen", "Fourteen", "Fifteen", "Sixteen", "Seventeen", "Eighteen", "Nineteen"]
TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]


def format_indian_currency(amount, symbol: str = "₹ ") -> str:
    """Group digits the Indian way: 41,30,000.00"""
    if amount is None:
        amount = Decimal("0")
    amount = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    integer_part, decimal_part = f"{abs(amount):.2f}".split(".")

    if len(integer_part) <= 3:
        return f"{sign}{symbol}{integer_part}.{decimal_part}"

    last_three = integer_part[-3:]
    remaining = integer_part[:-3]

    groups = []
    while len(remaining) > 2:
        groups.insert(0, remaining[-2:])
        remaining = remaining[:-2]
    if remaining:
        groups.insert(0, remaining)

    return f"{sign}{symbol}{','.join(groups)},{last_three}.{decimal_part}"


def _convert(num: int) -> str:
    if num < 20:
        return UNITS[num]
    elif num < 100:
        return TENS[num // 10] + (" " + UNITS[num % 10] if num % 10 else "")
    elif num < 1000:
        return UNITS[num // 100] + " Hundred" + (" " + _convert(num % 100) if num % 100 else "")
    elif num < 100000:
        return _convert(num // 1000) + " Thousand" + (" " + _convert(num % 1000) if num % 1000 else "")
    elif num < 10000000:
        return _convert(num // 100000) + " Lakh" + (" " + _convert(num % 100000) if num % 100000 else "")
    return _convert(num // 10000000) + " Crore" + (" " + _convert(num % 10000000) if num % 10000000 else "")


def amount_to_words(n) -> str:
    """Spell an amount in the Indian numbering system (Thousand, Lakh, Crore, Paise)."""
    if n is None:
        return ""
    n = Decimal(str(n)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    if n < 0:
        return "Minus " + amount_to_words(-n)
    if n == 0:
        return "Zero"

    integer_part = int(n)
    paise = int((n - integer_part) * 100)

    result = _convert(integer_part) if integer_part else "Zero"
    if paise > 0:
        result += " and " + _convert(paise) + " Paise"
    return result


def rupees_in_words(n) -> str:
    return f"{amount_to_words(n)} Rupees Only"
