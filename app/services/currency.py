# Static multipliers against the USD reference price. Not a live feed.
EXCHANGE_RATES = {
    "USD": 1.0,
    "EUR": 0.92,
    "GBP": 0.79,
    "CAD": 1.36,
    "AUD": 1.52,
}

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "CAD": "C$",
    "AUD": "A$",
}


def _rate(currency: str) -> float:
    code = str(currency or "").strip().upper()
    if code not in EXCHANGE_RATES:
        raise ValueError(f"Unsupported currency: {currency}")
    return EXCHANGE_RATES[code]


def convert_from_usd(amount: float, currency: str) -> float:
    return amount * _rate(currency)


def format_currency(amount: float, currency: str) -> str:
    _rate(currency)
    code = str(currency).strip().upper()
    return f"{CURRENCY_SYMBOLS[code]}{amount:,.2f}"
