"""Display formatting for amounts."""


def format_currency(amount: float, currency: str = "$") -> str:
    """
    Compact currency string.

    Millions and tens of thousands are abbreviated to one decimal
    (`$1.2M`, `$12.3K`); smaller amounts keep two decimals.
    """
    magnitude = abs(amount)
    if magnitude >= 1_000_000:
        return f"{currency}{amount / 1_000_000:.1f}M"
    if magnitude >= 10_000:
        return f"{currency}{amount / 1_000:.1f}K"
    return f"{currency}{amount:.2f}"
