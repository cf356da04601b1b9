#!/usr/bin/env python3
"""
Remote smoke run for the counter checkout service.

Walks one customer through check-in, item selection and checkout against
a running instance, then cleans the customer up again.

Run:
    BASE_URL=http://localhost:8000 python remote_e2e.py
"""

import os
import sys
import json
import requests

BASE_URL = os.getenv("BASE_URL", "http://localhost:8000").rstrip("/")
TIMEOUT = 25
PHONE = os.getenv("SMOKE_PHONE", "0412345678")


def _url(path: str) -> str:
    path = path if path.startswith("/") else f"/{path}"
    return f"{BASE_URL}{path}"


def jprint(step: str, r: requests.Response):
    if not (200 <= r.status_code < 300):
        ct = r.headers.get("content-type", "")
        body = r.text if "application/json" not in ct else json.dumps(r.json(), indent=2)
        print(f"\n❌ {step} -> {r.status_code}\n{body}\n", file=sys.stderr)
        sys.exit(1)
    print(f"✅ {step} [{r.status_code}]")
    return r.json() if r.headers.get("content-type", "").startswith("application/json") and r.text else {}


def main() -> int:
    s = requests.Session()

    jprint("GET /healthz", s.get(_url("/healthz"), timeout=TIMEOUT))
    products = jprint("GET /catalog/", s.get(_url("/catalog/"), timeout=TIMEOUT))
    if not products:
        print("❌ catalog is empty", file=sys.stderr)
        return 1

    cid = jprint("POST /customers/", s.post(_url("/customers/"), json={}, timeout=TIMEOUT))["id"]
    try:
        jprint("GET /order/{id}", s.get(_url(f"/order/{cid}"), timeout=TIMEOUT))
        view = jprint(
            "POST /order/{id}/quantity",
            s.post(_url(f"/order/{cid}/quantity"), json={"product_id": products[0]["id"], "delta": 2}, timeout=TIMEOUT),
        )
        print(f"   total: ${view['total']:.2f}")

        # checkout waits out the fallback and success delays (~3.5 s)
        view = jprint(
            "POST /order/{id}/checkout",
            s.post(_url(f"/order/{cid}/checkout"), json={"name": "Smoke Test", "phone": PHONE}, timeout=TIMEOUT),
        )
        print(f"   state={view['state']} screen={view['screen']} navigate_to={view['navigate_to']}")
        if view["state"] == "error":
            print(f"❌ checkout error: {view['error_message']}", file=sys.stderr)
            return 1

        rec = jprint("GET /customers/{id}", s.get(_url(f"/customers/{cid}"), timeout=TIMEOUT))
        print(f"   paymentStatus={rec['paymentStatus']} paymentId={rec.get('paymentId')}")
    finally:
        jprint("DELETE /customers/{id}", s.delete(_url(f"/customers/{cid}"), timeout=TIMEOUT))

    print("\n🎉 smoke run passed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
