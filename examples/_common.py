"""
Shared helpers for Review Store examples.

Handles the health check and account setup (register + login) so each
example can focus on its own workflow.
"""

import sys
import uuid

import httpx

BASE = "http://localhost:8000/api/v1"


def check_backend() -> None:
    """Verify the backend is reachable and its database answers."""
    try:
        resp = httpx.get(f"{BASE}/health", timeout=5)
    except httpx.ConnectError:
        print(f"ERROR: Backend not reachable at {BASE}")
        print("Start it with:  reviewstore init-db && reviewstore serve --reload")
        sys.exit(1)

    if resp.status_code != 200:
        print(f"ERROR: Health check returned {resp.status_code}")
        sys.exit(1)

    health = resp.json()
    print(f"Backend {health['version']}: {health['status']}")
    print(f"  Database: {'✓' if health['database'] == 'ok' else '✗'}")

    if health["database"] != "ok":
        print("\nERROR: Database is not reachable. Check REVIEWSTORE_DATABASE_URL.")
        sys.exit(1)


def login_client(username: str, password: str) -> httpx.Client:
    """Register (or reuse) an account and return a client carrying its token."""
    resp = httpx.post(
        f"{BASE}/users/register",
        json={"username": username, "password": password},
        timeout=10,
    )
    if resp.status_code not in (201, 409):  # 409 = already registered
        print(f"ERROR: Registration failed: {resp.status_code} {resp.text}")
        sys.exit(1)

    resp = httpx.post(
        f"{BASE}/users/login",
        json={"username": username, "password": password},
        timeout=10,
    )
    if resp.status_code != 200:
        print(f"ERROR: Login failed: {resp.status_code} {resp.text}")
        sys.exit(1)

    return httpx.Client(
        base_url=BASE,
        timeout=10,
        headers={"Authorization": f"Bearer {resp.json()['token']}"},
    )


def unique_name(prefix: str) -> str:
    """Usernames and item titles are unique, so suffix each run."""
    return f"{prefix}-{uuid.uuid4().hex[:6]}"
