PROVIDER_LOGOS = {
    "Airalo": "/images/airalo-logo.png",
    "Holafly": "/images/holafly-logo.png",
    "Nomad": "/images/nomad-logo.png",
    "Kolet": "/images/kolet-logo.png",
    "Orange": "/images/orange-logo.png",
    "Ubigi": "/images/ubigi-logo.png",
}
DEFAULT_PROVIDER_LOGO = "/images/default-provider.svg"

PROVIDER_EMOJI = {
    "Airalo": "📱",
    "Holafly": "🌐",
    "Nomad": "🗺️",
    "Kolet": "✈️",
    "Orange": "🍊",
    "Ubigi": "🌍",
}
DEFAULT_PROVIDER_EMOJI = "📶"


def get_provider_logo(provider_name: str) -> str:
    name = str(provider_name or "").strip()
    if name in PROVIDER_LOGOS:
        return PROVIDER_LOGOS[name]
    lowered = name.lower()
    for key, value in PROVIDER_LOGOS.items():
        if key.lower() == lowered:
            return value
    return DEFAULT_PROVIDER_LOGO


def get_provider_emoji(provider_name: str) -> str:
    return PROVIDER_EMOJI.get(str(provider_name or "").strip(), DEFAULT_PROVIDER_EMOJI)
