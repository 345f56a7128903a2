"""
smoke_check.py - exercise a running server with every seeded account

Prints the allow/deny matrix for the role-gated endpoints, then creates,
re-roles and deletes a throwaway user as system_admin.

Usage:
  python smoke_check.py --base http://127.0.0.1:8081
"""
import argparse
import asyncio
import time
import uuid
from datetime import datetime, timezone

import httpx

from auth.config import DEFAULT_ACCOUNTS

ACCESS_CHECKS = [
    ("GET", "/service/admin/ping"),
    ("GET", "/service/read/ping"),
    ("GET", "/service/write/ping"),
    ("GET", "/auth/users"),
]


def _now_iso():
    return datetime.now(timezone.utc).isoformat()


async def _check_access(client: httpx.AsyncClient, base: str, username: str, password: str, method: str, path: str):
    try:
        r = await client.request(method, f"{base}{path}", auth=(username, password), timeout=10)
        return r.status_code
    except httpx.HTTPError as exc:
        return f"ERR({type(exc).__name__})"


async def _matrix(client: httpx.AsyncClient, base: str):
    print(f"{'user':<16}" + "".join(f"{path:<24}" for _, path in ACCESS_CHECKS))
    for seed in DEFAULT_ACCOUNTS:
        results = await asyncio.gather(
            *(_check_access(client, base, seed.username, seed.password, m, p) for m, p in ACCESS_CHECKS)
        )
        print(f"{seed.username:<16}" + "".join(f"{str(code):<24}" for code in results))


async def _user_lifecycle(client: httpx.AsyncClient, base: str):
    admin = DEFAULT_ACCOUNTS[0]
    auth = (admin.username, admin.password)
    username = f"smoke_{uuid.uuid4().hex[:8]}"

    steps = [
        ("create", "POST", "/auth/users", {"username": username, "password": "smoke_pass", "roles": ["READ"]}),
        ("duplicate", "POST", "/auth/users", {"username": username, "password": "smoke_pass", "roles": ["READ"]}),
        ("bad role", "PUT", f"/auth/users/{username}/roles", {"roles": ["SUPERUSER"]}),
        ("re-role", "PUT", f"/auth/users/{username}/roles", {"roles": ["WRITE"]}),
        ("delete", "DELETE", f"/auth/users/{username}", None),
        ("delete again", "DELETE", f"/auth/users/{username}", None),
    ]
    for label, method, path, body in steps:
        try:
            r = await client.request(method, f"{base}{path}", auth=auth, json=body, timeout=10)
        except httpx.HTTPError as exc:
            print(f"{label:<14} {method:<6} {path:<40} -> ERR({type(exc).__name__}); stopping")
            return False
        print(f"{label:<14} {method:<6} {path:<40} -> {r.status_code}")
    return True


async def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--base", default="http://127.0.0.1:8081")
    args = parser.parse_args()

    start_iso = _now_iso()
    t0 = time.perf_counter()

    async with httpx.AsyncClient() as client:
        await _matrix(client, args.base)
        print()
        await _user_lifecycle(client, args.base)

    dt = time.perf_counter() - t0
    print()
    print(f"START: {start_iso}")
    print(f"END:   {_now_iso()}")
    print(f"TOTAL: {dt:.3f} s")


if __name__ == "__main__":
    asyncio.run(main())
