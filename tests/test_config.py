from app.core.config import parse_cors_origins, parse_provider_keys


def test_parse_cors_origins_csv():
    value = "http://localhost:5173, http://localhost:3000"
    assert parse_cors_origins(value) == [
        "http://localhost:5173",
        "http://localhost:3000",
    ]


def test_parse_cors_origins_json_list():
    value = '["http://localhost:5173", "https://esim.example.com"]'
    assert parse_cors_origins(value) == [
        "http://localhost:5173",
        "https://esim.example.com",
    ]


def test_parse_cors_origins_deduplicates():
    value = "http://localhost:5173,http://localhost:5173"
    assert parse_cors_origins(value) == ["http://localhost:5173"]


def test_parse_provider_keys_normalizes_and_deduplicates():
    assert parse_provider_keys(" Airalo, holafly,,AIRALO ,kolet") == ["airalo", "holafly", "kolet"]


def test_parse_provider_keys_empty():
    assert parse_provider_keys("") == []
