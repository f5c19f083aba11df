import os


def _set_test_env() -> None:
    defaults = {
        "APP_NAME": "eSIM Compare Test",
        "ENVIRONMENT": "test",
        "LOG_LEVEL": "WARNING",
        "ESIM_LIVE_SCRAPING": "false",
        "ESIM_PROVIDERS": "airalo,holafly,nomad",
        "PROVIDER_TIMEOUT_SECONDS": "5",
        "PLANS_RATE_LIMIT": "1000/minute",
        "CORS_ORIGINS": "http://localhost:3000,http://localhost:5173",
    }
    for key, value in defaults.items():
        os.environ.setdefault(key, value)


_set_test_env()
