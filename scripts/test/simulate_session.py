# scripts/test/simulate_session.py
"""Drive a running backend through a short parking session (park, correct, resize, leave)."""

import argparse
import requests

from datetime import datetime

DEFAULT_BACKEND = "http://127.0.0.1:8080/api/v1"


def call(method, url, api_key=None, **kwargs):
    headers = {"X-API-Key": api_key} if api_key else {}
    resp = requests.request(method, url, headers=headers, timeout=10, **kwargs)
    body = resp.json()
    mark = "✅" if resp.ok else "⚠️ "
    print(f"{mark} {method} {url.rsplit('/api/v1', 1)[-1]} → HTTP {resp.status_code}: {body}")
    return resp


def simulate(base, plate, spot, capacity, api_key):
    lot = call("GET", f"{base}/lot", api_key).json()
    print(f"   lot: {lot['total_spots']}/{lot['capacity']} spots, {lot['available_spots']} available")

    call("POST", f"{base}/lot/spots/{spot}/occupy", api_key, json={"vehicle_number": plate})
    call("PUT", f"{base}/lot/spots/{spot}", api_key, json={"vehicle_number": plate + "-X"})
    call("GET", f"{base}/lot/spots/{spot}", api_key)

    if capacity is not None:
        call("PUT", f"{base}/lot/capacity", api_key, json={"capacity": str(capacity)})

    call("POST", f"{base}/lot/spots", api_key)
    call("DELETE", f"{base}/lot/spots/last", api_key)
    call("POST", f"{base}/lot/spots/{spot}/vacate", api_key)
    print(f"🏁 Session finished at {datetime.utcnow():%H:%M:%S}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Simulate a parking session against the API")
    parser.add_argument("--url", default=DEFAULT_BACKEND)
    parser.add_argument("--plate", default="ABC-123")
    parser.add_argument("--spot", type=int, default=0)
    parser.add_argument("--capacity", type=int, default=None)
    parser.add_argument("--api-key", default=None)
    args = parser.parse_args()

    simulate(args.url.rstrip("/"), args.plate, args.spot, args.capacity, args.api_key)
