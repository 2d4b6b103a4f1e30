#!/usr/bin/env python3
"""
Review Store Quickstart — the whole lifecycle in one script.

Two users → an item → a review → a comment → an ownership check → delete.
Run with: python examples/quickstart.py

Requires: pip install httpx
Backend must be running: http://localhost:8000
"""

import sys

import httpx

from _common import BASE, check_backend, login_client, unique_name


def main():
    check_backend()
    anonymous = httpx.Client(base_url=BASE, timeout=10)

    # ── Two accounts ──────────────────────────────────────────────
    print("\n1. Registering alice and bob...")
    alice = login_client(unique_name("alice"), "pw1")
    bob = login_client(unique_name("bob"), "pw2")
    print(f"   alice: {alice.get('/users/me').json()['username']}")
    print(f"   bob:   {bob.get('/users/me').json()['username']}")

    # ── Item ──────────────────────────────────────────────────────
    print("\n2. alice adds an item...")
    resp = alice.post("/items", json={"title": unique_name("Book"), "details": "A paperback"})
    assert resp.status_code == 201, f"Failed: {resp.text}"
    item = resp.json()
    print(f"   Item: {item['title']} ({item['id'][:8]}...)")

    # ── Review ────────────────────────────────────────────────────
    print("\n3. alice reviews it...")
    resp = alice.post(f"/items/{item['id']}/reviews", json={"text": "ok", "score": 3})
    assert resp.status_code == 201, f"Failed: {resp.text}"
    review = resp.json()
    print(f"   Review: '{review['text']}' score={review['score']}")

    resp = anonymous.get(f"/items/{item['id']}/reviews")
    print(f"   Anyone can read it: {len(resp.json())} review(s) listed")

    # ── Comment ───────────────────────────────────────────────────
    print("\n4. bob comments (once)...")
    resp = bob.post(f"/reviews/{review['id']}/comments", json={"content": "Too generous"})
    assert resp.status_code == 201, f"Failed: {resp.text}"
    resp = bob.post(f"/reviews/{review['id']}/comments", json={"content": "Again"})
    print(f"   Second comment: {resp.status_code} {resp.json()['error']['code']}")

    # ── Ownership ─────────────────────────────────────────────────
    print("\n5. bob tries to delete alice's review...")
    resp = bob.delete(f"/reviews/{review['id']}")
    print(f"   → {resp.status_code} {resp.json()['error']['code']}")
    if resp.status_code != 403:
        print("   Unexpected: non-owner delete was not refused")
        sys.exit(1)

    print("\n6. alice deletes it...")
    resp = alice.delete(f"/reviews/{review['id']}")
    print(f"   → {resp.status_code}")
    resp = anonymous.get(f"/reviews/{review['id']}")
    print(f"   Read after delete → {resp.status_code}")

    print("\nDone.")


if __name__ == "__main__":
    main()
