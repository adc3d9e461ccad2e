"""
Shared helpers for tokengate examples.

Handles the health check and account setup so each example can focus
on its specific session workflow.
"""

import sys
import uuid

import httpx

BASE = "http://localhost:8000/api/v1"


def check_backend() -> None:
    """Verify the backend is reachable and healthy."""
    try:
        resp = httpx.get(f"{BASE}/health", timeout=5)
    except httpx.ConnectError:
        print(f"ERROR: Backend not reachable at {BASE}")
        print("Start it with:  tokengate serve --reload")
        sys.exit(1)

    if resp.status_code != 200:
        print(f"ERROR: Health check returned {resp.status_code}")
        sys.exit(1)

    health = resp.json()
    print("Backend health:")
    print(f"  Status:  {health['status']}")
    print(f"  Store:   {health['store']}")

    if health["store"] == "error":
        print("\nERROR: Database is not reachable. Check TOKENGATE_DATABASE_URL.")
        sys.exit(1)


def register_user(password: str = "demo-password-123") -> tuple[str, str]:
    """Register a fresh user, returning (email, password).

    Uses a unique email per run so examples are idempotent.
    """
    run_id = uuid.uuid4().hex[:8]
    email = f"demo-{run_id}@example.com"

    resp = httpx.post(
        f"{BASE}/auth/register",
        json={"email": email, "name": f"Demo User {run_id}", "password": password},
        timeout=10,
    )
    if resp.status_code != 201:
        print(f"ERROR: Registration failed: {resp.status_code} {resp.text}")
        sys.exit(1)
    return email, password


def login(email: str, password: str) -> dict:
    """Login and return the token pair body."""
    resp = httpx.post(
        f"{BASE}/auth/login",
        json={"email": email, "password": password},
        timeout=10,
    )
    if resp.status_code != 200:
        print(f"ERROR: Login failed: {resp.status_code} {resp.text}")
        sys.exit(1)
    return resp.json()


def auth_headers(tokens: dict) -> dict:
    return {"Authorization": f"Bearer {tokens['access_token']}"}
