import re

from app.schemas.esim import CountryOut, ParsedQuery
from app.services.countries import COUNTRIES, Country

MAX_TRIP_DAYS = 365
MAX_BUDGET = 10000

COUNTRY_ALIASES = {
    "usa": "US",
    "us": "US",
    "america": "US",
    "uk": "GB",
    "britain": "GB",
    "england": "GB",
    "uae": "AE",
    "emirates": "AE",
}

# Checked in order; the first hit decides the currency.
CURRENCY_TOKENS = [
    ("$", "USD"),
    ("€", "EUR"),
    ("£", "GBP"),
    ("usd", "USD"),
    ("eur", "EUR"),
    ("euro", "EUR"),
    ("euros", "EUR"),
    ("gbp", "GBP"),
    ("pound", "GBP"),
    ("pounds", "GBP"),
    ("cad", "CAD"),
    ("aud", "AUD"),
    ("dollar", "USD"),
    ("dollars", "USD"),
]

_DAY_PATTERNS = [
    re.compile(r"(\d+)\s*days?\b", re.IGNORECASE),
    re.compile(r"(\d+)\s*-?\s*day\s+(?:trip|stay)", re.IGNORECASE),
    re.compile(r"duration\s+of\s+(\d+)", re.IGNORECASE),
]
_WEEK_PATTERN = re.compile(r"(\d+)\s*weeks?\b", re.IGNORECASE)

_AMOUNT = r"(\d+(?:\.\d+)?)"
_NOT_DAYS = r"(?![\d.]|\s*(?:days?|weeks?|d\b))"

# (pattern, currency implied by the match or None)
_BUDGET_PATTERNS = [
    (re.compile(r"\$\s*" + _AMOUNT), None),
    (re.compile(r"€\s*" + _AMOUNT), "EUR"),
    (re.compile(r"£\s*" + _AMOUNT), "GBP"),
    (re.compile(r"budget\s+of\s+" + _AMOUNT + _NOT_DAYS, re.IGNORECASE), None),
    (re.compile(r"spending\s+" + _AMOUNT + _NOT_DAYS, re.IGNORECASE), None),
    (re.compile(r"spend\s+" + _AMOUNT + _NOT_DAYS, re.IGNORECASE), None),
    (re.compile(r"(?<![\d.])" + _AMOUNT + r"\s*(usd|eur|gbp|cad|aud)\b", re.IGNORECASE), "code"),
    (re.compile(r"up\s+to\s+" + _AMOUNT + _NOT_DAYS, re.IGNORECASE), None),
    (re.compile(r"maximum\s+of\s+" + _AMOUNT + _NOT_DAYS, re.IGNORECASE), None),
    (re.compile(r"max\s+" + _AMOUNT + _NOT_DAYS, re.IGNORECASE), None),
]


def _has_word(text: str, word: str) -> bool:
    return re.search(rf"\b{re.escape(word)}\b", text) is not None


def _match_country(query: str) -> Country | None:
    lowered = query.lower()
    # Longest names first so "South Africa" wins over a shorter overlapping name.
    for country in sorted(COUNTRIES, key=lambda c: len(c.name), reverse=True):
        if _has_word(lowered, country.name.lower()):
            return country

    by_code = {c.code: c for c in COUNTRIES}
    for alias, code in COUNTRY_ALIASES.items():
        if _has_word(lowered, alias):
            return by_code[code]

    # Bare ISO codes only count when typed in capitals ("FR"), otherwise
    # words like "in" or "it" would match India and Italy.
    for token in re.findall(r"\b[A-Z]{2}\b", query):
        if token in by_code:
            return by_code[token]
    return None


def _match_currency(query: str) -> str:
    lowered = query.lower()
    for token, currency in CURRENCY_TOKENS:
        if token.isalpha():
            if _has_word(lowered, token):
                return currency
        elif token in lowered:
            return currency
    return "USD"


def _match_days(query: str) -> int | None:
    for pattern in _DAY_PATTERNS:
        match = pattern.search(query)
        if match:
            days = int(match.group(1))
            if 0 < days <= MAX_TRIP_DAYS:
                return days
    match = _WEEK_PATTERN.search(query)
    if match:
        days = int(match.group(1)) * 7
        if 0 < days <= MAX_TRIP_DAYS:
            return days
    return None


def _match_budget(query: str) -> tuple[float | None, str | None]:
    for pattern, implied in _BUDGET_PATTERNS:
        match = pattern.search(query)
        if not match:
            continue
        budget = float(match.group(1))
        if 0 < budget <= MAX_BUDGET:
            if implied == "code":
                return budget, match.group(2).upper()
            return budget, implied
    return None, None


def parse_natural_language_query(query: str) -> ParsedQuery:
    """Pull destination, trip length, budget and currency out of free text.

    "I'm going to Japan for 10 days, budget €25" ->
    country=Japan, days=10, budget=25.0, currency=EUR.
    """
    text = str(query or "")
    country = _match_country(text)
    currency = _match_currency(text)
    budget, budget_currency = _match_budget(text)
    return ParsedQuery(
        country=CountryOut.model_validate(country) if country else None,
        days=_match_days(text),
        budget=budget,
        currency=budget_currency or currency,
    )
