#!/usr/bin/env python3
"""Smoke checks against a deployed eSIM comparison backend."""

from __future__ import annotations

import argparse
import time
from dataclasses import dataclass
from typing import Any

import httpx


@dataclass
class SmokeContext:
    base_url: str
    api_prefix: str
    timeout_seconds: float
    verify_tls: bool
    retries: int
    retry_delay_seconds: float


def _api_url(ctx: SmokeContext, path: str) -> str:
    return f"{ctx.base_url}{ctx.api_prefix}/esim{path}"


def _step(name: str) -> None:
    print(f"\n==> {name}")


def _assert_status(resp: httpx.Response, expected: int, step_name: str) -> None:
    if resp.status_code != expected:
        raise RuntimeError(
            f"{step_name} failed: expected HTTP {expected}, got {resp.status_code}. Body: {resp.text}"
        )


def _request(
    client: httpx.Client,
    method: str,
    url: str,
    *,
    step_name: str,
    expected_status: int = 200,
    **kwargs: Any,
) -> httpx.Response:
    retries = int(kwargs.pop("retries", 0))
    retry_delay_seconds = float(kwargs.pop("retry_delay_seconds", 0.0))
    last_error: Exception | None = None
    for attempt in range(retries + 1):
        try:
            resp = client.request(method, url, **kwargs)
            if resp.status_code in {502, 503, 504} and attempt < retries:
                print(f"{step_name}: transient HTTP {resp.status_code}, retrying ({attempt + 1}/{retries})...")
                time.sleep(retry_delay_seconds)
                continue
            _assert_status(resp, expected_status, step_name)
            return resp
        except (httpx.ConnectTimeout, httpx.ReadTimeout, httpx.ConnectError, httpx.RemoteProtocolError) as exc:
            last_error = exc
            if attempt >= retries:
                raise RuntimeError(f"{step_name} request failed: {exc}") from exc
            print(f"{step_name}: transient error ({exc}), retrying ({attempt + 1}/{retries})...")
            time.sleep(retry_delay_seconds)
        except httpx.HTTPError as exc:
            raise RuntimeError(f"{step_name} request failed: {exc}") from exc
    if last_error:
        raise RuntimeError(f"{step_name} request failed: {last_error}") from last_error
    raise RuntimeError(f"{step_name} failed unexpectedly.")


def _check_plans(body: dict, step_name: str) -> list[dict]:
    plans = body.get("data") or []
    if not body.get("success") or not plans:
        raise RuntimeError(f"{step_name}: expected a non-empty plan list, got {body}")
    prices = [plan["price"] for plan in plans]
    if any(price <= 0 for price in prices):
        raise RuntimeError(f"{step_name}: plan with non-positive price in {prices}")
    return plans


def run_smoke(
    *,
    base_url: str,
    api_prefix: str,
    country_code: str,
    country_name: str,
    currency: str,
    timeout_seconds: float,
    verify_tls: bool,
    retries: int,
    retry_delay_seconds: float,
    check_compare: bool,
) -> None:
    ctx = SmokeContext(
        base_url=base_url.rstrip("/"),
        api_prefix="/" + api_prefix.strip("/"),
        timeout_seconds=timeout_seconds,
        verify_tls=verify_tls,
        retries=retries,
        retry_delay_seconds=retry_delay_seconds,
    )
    retry = {"retries": ctx.retries, "retry_delay_seconds": ctx.retry_delay_seconds}

    with httpx.Client(timeout=ctx.timeout_seconds, verify=ctx.verify_tls) as client:
        _step("Health checks")
        _request(client, "GET", f"{ctx.base_url}/healthz", step_name="GET /healthz", **retry)
        ready = _request(client, "GET", f"{ctx.base_url}/readyz", step_name="GET /readyz", **retry).json()
        if "synthetic" not in (ready.get("sources") or []):
            raise RuntimeError(f"/readyz lists no synthetic fallback source: {ready}")
        print(f"live_scraping={ready.get('live_scraping')} sources={ready.get('sources')}")

        _step("Countries")
        countries = _request(client, "GET", _api_url(ctx, "/countries"), step_name="GET /countries", **retry).json()
        print(f"{len(countries)} countries listed")

        _step(f"Plans for {country_name}")
        plans = _check_plans(
            _request(
                client,
                "GET",
                _api_url(ctx, "/plans"),
                step_name="GET /plans",
                params={"country_code": country_code, "country_name": country_name, "currency": currency},
                **retry,
            ).json(),
            "GET /plans",
        )
        print(f"{len(plans)} plans, cheapest {plans[0]['display_price']} from {plans[0]['provider']}")

        _step("Missing country is rejected")
        _request(
            client,
            "GET",
            _api_url(ctx, "/plans"),
            step_name="GET /plans without country",
            expected_status=400,
            params={"country_code": country_code},
            **retry,
        )
        print("400 returned as expected")

        _step("Natural language search")
        parsed = _request(
            client,
            "GET",
            _api_url(ctx, "/search"),
            step_name="GET /search",
            params={"q": f"{country_name} for 10 days under $30"},
            **retry,
        ).json()
        print(f"Parsed: {parsed}")

        if check_compare:
            _step("Compare cheapest plans")
            fields = ("id", "provider", "provider_image", "data", "data_type", "duration", "price", "network_rating")
            selection = [{key: plan[key] for key in fields} for plan in plans[:2]]
            result = _request(
                client,
                "POST",
                _api_url(ctx, "/plans/compare"),
                step_name="POST /plans/compare",
                json={"plans": selection, "currency": currency},
                **retry,
            ).json()
            print(f"best_value={result.get('best_value')} cheapest={result.get('cheapest')}")

        _step("Currencies")
        rates = _request(client, "GET", _api_url(ctx, "/currencies"), step_name="GET /currencies", **retry).json()
        print(", ".join(f"{rate['code']}={rate['rate']}" for rate in rates))

    print("\nSUCCESS: smoke checks passed.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run eSIM comparison smoke checks.")
    parser.add_argument("--base-url", required=True, help="Backend base URL, e.g. https://your-api.onrender.com")
    parser.add_argument("--api-prefix", default="/api/v1", help="API prefix (default: /api/v1)")
    parser.add_argument("--country-code", default="FR", help="ISO code used for the plans check")
    parser.add_argument("--country-name", default="France", help="Country name used for the plans check")
    parser.add_argument("--currency", default="USD", help="Display currency for plan prices")
    parser.add_argument("--timeout", type=float, default=30.0, help="HTTP timeout in seconds")
    parser.add_argument("--retries", type=int, default=3, help="Retries for transient network/5xx errors")
    parser.add_argument("--retry-delay", type=float, default=5.0, help="Delay between retries in seconds")
    parser.add_argument("--insecure", action="store_true", help="Disable TLS certificate verification")
    parser.add_argument("--skip-compare", action="store_true", help="Skip the plan comparison check")
    return parser


def main() -> None:
    args = build_parser().parse_args()
    run_smoke(
        base_url=args.base_url,
        api_prefix=args.api_prefix,
        country_code=args.country_code,
        country_name=args.country_name,
        currency=args.currency.upper(),
        timeout_seconds=args.timeout,
        verify_tls=not args.insecure,
        retries=max(0, args.retries),
        retry_delay_seconds=max(0.0, args.retry_delay),
        check_compare=not args.skip_compare,
    )


if __name__ == "__main__":
    main()
