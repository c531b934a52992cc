#!/usr/bin/env python3
"""
Issue a session token for local testing.

The token is signed with SESSION_SECRET from config/.env (or the
environment) and can be sent as ``Authorization: Bearer <token>``.

Usage:
    python scripts/issue_session.py user-123 --email reader@example.com
    python scripts/issue_session.py admin-1 --admin --ttl 30
"""

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

# Project root
PROJECT_ROOT = Path(__file__).parent.parent


def main():
    parser = argparse.ArgumentParser(description="Issue a bookstore session token")
    parser.add_argument("user_id", help="User ID to put in the token subject")
    parser.add_argument("--email", default=None, help="Email claim")
    parser.add_argument("--admin", action="store_true", help="Issue an ADMIN session")
    parser.add_argument("--ttl", type=int, default=None, help="Lifetime in minutes")
    args = parser.parse_args()

    load_dotenv(PROJECT_ROOT / "config" / ".env")

    # Imported after the env file is loaded so settings pick it up
    from bookstore.core.config import settings
    from bookstore.security.session import Role, create_session_token

    if settings.session_secret == "change-me-in-production":
        print("! SESSION_SECRET is the default value; set it in config/.env", file=sys.stderr)

    token = create_session_token(
        user_id=args.user_id,
        email=args.email,
        role=Role.ADMIN if args.admin else Role.USER,
        ttl_minutes=args.ttl,
    )
    print(token)


if __name__ == "__main__":
    main()
