#!/usr/bin/env python3
"""
tokengate Quickstart — one session lifecycle in one script.

register → login → call a protected route → refresh → reuse the old
refresh token (rejected) → logout → refresh again (rejected).
Run with: python examples/quickstart.py

Requires: pip install httpx
Backend must be running: http://localhost:8000
"""

import httpx

from _common import BASE, auth_headers, check_backend, login, register_user


def main():
    check_backend()
    client = httpx.Client(base_url=BASE, timeout=10)

    # ── Register + login ──────────────────────────────────────────
    print("\n1. Registering and logging in...")
    email, password = register_user()
    tokens = login(email, password)
    print(f"   User:    {email}")
    print(f"   Access:  {tokens['access_token'][:24]}... (expires in {tokens['expires_in']}s)")
    print(f"   Refresh: {tokens['refresh_token'][:8]}...")

    # ── Protected route ───────────────────────────────────────────
    print("\n2. Calling /auth/me with the access token...")
    resp = client.get("/auth/me", headers=auth_headers(tokens))
    assert resp.status_code == 200, f"Failed: {resp.text}"
    print(f"   Identity: {resp.json()['email']} ({resp.json()['id'][:8]}...)")

    # ── Rotate ────────────────────────────────────────────────────
    print("\n3. Rotating the refresh token...")
    resp = client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert resp.status_code == 200, f"Failed: {resp.text}"
    rotated = resp.json()
    print(f"   New refresh: {rotated['refresh_token'][:8]}...")

    # ── Replay the old one ────────────────────────────────────────
    print("\n4. Replaying the consumed refresh token...")
    resp = client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    print(f"   {resp.status_code} {resp.json()['error']['code']}: {resp.json()['error']['message']}")

    # ── Logout ────────────────────────────────────────────────────
    print("\n5. Logging out...")
    resp = client.post(
        "/auth/logout",
        json={"refresh_token": rotated["refresh_token"]},
        headers=auth_headers(rotated),
    )
    assert resp.status_code == 204, f"Failed: {resp.text}"
    resp = client.post("/auth/refresh", json={"refresh_token": rotated["refresh_token"]})
    print(f"   Refresh after logout: {resp.status_code}")

    print("\nDone.")


if __name__ == "__main__":
    main()
