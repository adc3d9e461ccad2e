#!/usr/bin/env python3
"""
Multi-device sessions — each login is its own session.

Logs in from three "devices", changes the password from one of them and
shows that every refresh token died with the old password.
Run with: python examples/multi_device.py
"""

import httpx

from _common import BASE, auth_headers, check_backend, login, register_user


def main():
    check_backend()
    client = httpx.Client(base_url=BASE, timeout=10)

    email, password = register_user()
    devices = {name: login(email, password) for name in ("laptop", "phone", "tablet")}
    print(f"\nLogged in {email} on: {', '.join(devices)}")

    print("\nChanging the password from the laptop...")
    resp = client.put(
        "/users/me/password",
        json={"current_password": password, "new_password": "a-much-better-password"},
        headers=auth_headers(devices["laptop"]),
    )
    assert resp.status_code == 204, f"Failed: {resp.text}"

    for name, tokens in devices.items():
        resp = client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
        print(f"  {name:<7} refresh → {resp.status_code}")

    tokens = login(email, "a-much-better-password")
    resp = client.post("/auth/logout-all", headers=auth_headers(tokens))
    print(f"\nFresh login, then logout-all revoked {resp.json()['revoked']} session(s).")


if __name__ == "__main__":
    main()
