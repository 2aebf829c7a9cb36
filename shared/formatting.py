def format_price(amount: int, currency_symbol: str = "$") -> str:
    """Render an amount in the smallest currency unit for display only."""
    sign = "-" if amount < 0 else ""
    whole, cents = divmod(abs(amount), 100)
    return f"{sign}{currency_symbol}{whole:,}.{cents:02d}"
