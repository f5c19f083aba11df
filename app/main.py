from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from app.api.v1.routes import router as api_router
from app.core.config import get_settings, parse_cors_origins, parse_provider_keys
import logging
import time
from urllib.parse import urlparse
from app.core.logging import configure_logging
from app.middlewares.rate_limit import limiter
from app.services.scrapers import PROVIDER_PROFILES


settings = get_settings()

configure_logging()

app = FastAPI(title=settings.app_name)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
_started_at = time.time()


configured_origins = parse_cors_origins(settings.cors_origins or "")
def _origin_from_url(raw: str) -> str | None:
    text = str(raw or "").strip()
    if not text:
        return None
    parsed = urlparse(text)
    if parsed.scheme and parsed.netloc:
        return f"{parsed.scheme}://{parsed.netloc}"
    return None


frontend_origin = _origin_from_url(settings.frontend_base_url)
allow_origins = list(dict.fromkeys(configured_origins + ([frontend_origin] if frontend_origin else [])))

logging.getLogger(__name__).info("CORS allow_origins=%s", allow_origins)

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.api_v1_prefix)


def _configured_sources() -> list[str]:
    sources = []
    if settings.esim_live_scraping:
        sources.extend(key for key in parse_provider_keys(settings.esim_providers) if key in PROVIDER_PROFILES)
    sources.append("synthetic")
    return sources


@app.get("/")
def root():
    return {"status": "ok"}


@app.get("/healthz")
def healthz():
    # Liveness: process is up.
    return {
        "status": "ok",
        "uptime_seconds": int(max(0, time.time() - _started_at)),
        "service": settings.app_name,
    }


@app.get("/readyz")
def readyz():
    # Readiness: there is always at least the synthetic source to serve from.
    return {
        "status": "ready",
        "uptime_seconds": int(max(0, time.time() - _started_at)),
        "live_scraping": settings.esim_live_scraping,
        "sources": _configured_sources(),
    }
