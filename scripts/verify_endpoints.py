#!/usr/bin/env python3
"""
Verify the Holiday Email Orchestrator endpoints are working.

Checks the public endpoints and that protected ones reject unauthenticated
requests.

Usage:
    python scripts/verify_endpoints.py [--base-url URL]

Requires the server to be running.
"""

import argparse
import sys

import httpx


def check_endpoint(client: httpx.Client, method: str, url: str, name: str, expected: int) -> bool:
    """Check that an endpoint answers with the expected status."""
    try:
        response = client.request(method, url, headers={"Accept": "application/json"})
    except httpx.HTTPError as e:
        print(f"  [FAIL] {name}: {url} ({e})")
        return False

    if response.status_code == expected:
        print(f"  [OK] {name}: {url}")
        return True

    print(f"  [FAIL] {name}: {url} (status {response.status_code}, expected {expected})")
    return False


def main():
    parser = argparse.ArgumentParser(description="Verify Holiday Email Orchestrator endpoints")
    parser.add_argument(
        "--base-url",
        default="http://localhost:4000",
        help="Base URL of the API (default: http://localhost:4000)",
    )
    args = parser.parse_args()

    base_url = args.base_url.rstrip("/")

    print(f"\nVerifying Holiday Email Orchestrator at {base_url}\n")
    print("=" * 60)

    endpoints = [
        ("GET", f"{base_url}/health", "Health Check", 200),
        ("GET", f"{base_url}/", "Service Info", 200),
        ("POST", f"{base_url}/auth/login", "Login (empty body rejected)", 400),
        ("GET", f"{base_url}/api/email-logs", "Email Logs (auth required)", 401),
    ]

    with httpx.Client(timeout=10) as client:
        results = [check_endpoint(client, *endpoint) for endpoint in endpoints]

    print("=" * 60)

    passed = sum(results)
    total = len(results)

    if all(results):
        print(f"\nAll {total} endpoints OK")
        return 0
    else:
        print(f"\n{passed}/{total} endpoints OK")
        return 1


if __name__ == "__main__":
    sys.exit(main())
