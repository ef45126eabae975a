#!/usr/bin/env python3
"""
Grant the admin role to an existing profile.

The user must already have signed up through Supabase Auth so that a
profiles row exists for them.

Required environment variables:
- SALTAIRE_DATABASE_URL
- ADMIN_EMAIL
"""

import os
import sys

import psycopg


def _required_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value


def main() -> int:
    database_url = _required_env("SALTAIRE_DATABASE_URL")
    email = _required_env("ADMIN_EMAIL").strip().lower()

    with psycopg.connect(database_url) as conn:
        with conn.cursor() as cur:
            cur.execute("SELECT id, role FROM profiles WHERE lower(email) = %s LIMIT 1", (email,))
            existing = cur.fetchone()
            if not existing:
                print(f"no profile found for {email}; sign up first", file=sys.stderr)
                return 1
            if existing[1] == "admin":
                print(f"{email} is already an admin")
                return 0

            cur.execute("UPDATE profiles SET role = 'admin' WHERE id = %s", (existing[0],))
        conn.commit()

    print(f"promoted to admin: {email}")
    return 0


if __name__ == "__main__":
    try:
        raise SystemExit(main())
    except Exception as exc:  # noqa: BLE001
        print(f"promote_admin failed: {exc}", file=sys.stderr)
        raise SystemExit(1)
