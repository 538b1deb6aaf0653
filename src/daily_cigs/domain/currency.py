"""Currency resolution for spending figures."""

FALLBACK_CURRENCY = "USD"
CURRENCY_CODE_LENGTH = 3

CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CNY": "¥",
    "INR": "₹",
    "AUD": "A$",
    "CAD": "C$",
    "CHF": "CHF",
    "SEK": "kr",
    "NOK": "kr",
    "DKK": "kr",
    "PLN": "zł",
    "RUB": "₽",
    "BRL": "R$",
    "MXN": "$",
    "ZAR": "R",
    "TRY": "₺",
    "KRW": "₩",
    "SGD": "S$",
    "HKD": "HK$",
    "NZD": "NZ$",
}


def normalize_currency_code(raw: str | None) -> str | None:
    """Return an upper-case three-letter code, or None if the value isn't one."""
    if raw is None:
        return None
    cleaned = raw.strip().upper()
    if len(cleaned) != CURRENCY_CODE_LENGTH or not cleaned.isalpha():
        return None
    return cleaned


def resolve_currency(stored: str | None, locale_currency: str | None) -> str:
    """Pick the stored currency, then the locale's, then USD."""
    return (
        normalize_currency_code(stored)
        or normalize_currency_code(locale_currency)
        or FALLBACK_CURRENCY
    )


def currency_symbol(code: str) -> str:
    return CURRENCY_SYMBOLS.get(code, "$")
