import re
from dataclasses import dataclass


@dataclass(frozen=True)
class Country:
    name: str
    code: str
    flag: str

    @property
    def slug(self) -> str:
        return country_slug(self.name)


COUNTRIES = [
    Country("United States", "US", "🇺🇸"),
    Country("United Kingdom", "GB", "🇬🇧"),
    Country("Canada", "CA", "🇨🇦"),
    Country("Australia", "AU", "🇦🇺"),
    Country("Germany", "DE", "🇩🇪"),
    Country("France", "FR", "🇫🇷"),
    Country("Italy", "IT", "🇮🇹"),
    Country("Spain", "ES", "🇪🇸"),
    Country("Japan", "JP", "🇯🇵"),
    Country("South Korea", "KR", "🇰🇷"),
    Country("China", "CN", "🇨🇳"),
    Country("India", "IN", "🇮🇳"),
    Country("Brazil", "BR", "🇧🇷"),
    Country("Mexico", "MX", "🇲🇽"),
    Country("Argentina", "AR", "🇦🇷"),
    Country("Chile", "CL", "🇨🇱"),
    Country("Thailand", "TH", "🇹🇭"),
    Country("Singapore", "SG", "🇸🇬"),
    Country("Malaysia", "MY", "🇲🇾"),
    Country("Indonesia", "ID", "🇮🇩"),
    Country("Philippines", "PH", "🇵🇭"),
    Country("Vietnam", "VN", "🇻🇳"),
    Country("Turkey", "TR", "🇹🇷"),
    Country("United Arab Emirates", "AE", "🇦🇪"),
    Country("Saudi Arabia", "SA", "🇸🇦"),
    Country("South Africa", "ZA", "🇿🇦"),
    Country("Egypt", "EG", "🇪🇬"),
    Country("Morocco", "MA", "🇲🇦"),
    Country("Greece", "GR", "🇬🇷"),
    Country("Portugal", "PT", "🇵🇹"),
    Country("Netherlands", "NL", "🇳🇱"),
    Country("Belgium", "BE", "🇧🇪"),
    Country("Switzerland", "CH", "🇨🇭"),
    Country("Austria", "AT", "🇦🇹"),
    Country("Sweden", "SE", "🇸🇪"),
    Country("Norway", "NO", "🇳🇴"),
    Country("Denmark", "DK", "🇩🇰"),
    Country("Finland", "FI", "🇫🇮"),
    Country("Poland", "PL", "🇵🇱"),
    Country("Czech Republic", "CZ", "🇨🇿"),
    Country("Hungary", "HU", "🇭🇺"),
    Country("Romania", "RO", "🇷🇴"),
    Country("New Zealand", "NZ", "🇳🇿"),
    Country("Israel", "IL", "🇮🇱"),
    Country("Russia", "RU", "🇷🇺"),
    Country("Ukraine", "UA", "🇺🇦"),
]


def country_slug(name: str) -> str:
    return re.sub(r"\s+", "-", str(name or "").strip().lower())


def search_countries(query: str) -> list[Country]:
    text = str(query or "").strip().lower()
    if not text:
        return []
    return [c for c in COUNTRIES if text in c.name.lower() or text in c.code.lower()]


def find_country(slug: str) -> Country | None:
    """Resolve a URL slug: ISO code, country name or hyphenated name."""
    key = str(slug or "").strip().lower()
    if not key:
        return None
    for country in COUNTRIES:
        name = country.name.lower()
        if key in (country.code.lower(), name, country_slug(name)):
            return country
    return None
