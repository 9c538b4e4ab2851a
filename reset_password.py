#!/usr/bin/env python3
"""
Reset a user's password in the Chat API SQLite database.

Goes through ``UserService.update_user`` so the same lookup and error
text as ``PATCH /user/resetPassword`` apply.  Passwords are stored in
plain form, as the API stores them.

Usage:
    python reset_password.py --username user1 --password "newPassword"
    python reset_password.py --db ./chat.db --username user1

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import asyncio
import getpass
import os
import sys
from typing import List, Optional

from chat_api.app.core.db import get_database_path
from chat_api.app.core.errors import ErrorResult
from chat_api.app.core.store import Store
from chat_api.app.services.user_service import UserService


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Reset a Chat API user's password (SQLite).")
    ap.add_argument("--db", help="Path to SQLite DB file (defaults to DATABASE_URL / chat.db)")
    ap.add_argument("--username", required=True, help="Username to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    return ap


async def reset(username: str, password: str, database_url: Optional[str] = None) -> int:
    service = UserService(Store.sqlite(database_url).users)
    result = await service.update_user(username, {"password": password})
    if isinstance(result, ErrorResult):
        print(f"[!] {result.error}", file=sys.stderr)
        return 2
    print(f"[+] Password updated for user: {result.username}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    db_path = get_database_path(args.db)
    if not os.path.exists(db_path):
        print(f"[!] DB not found: {db_path}", file=sys.stderr)
        return 1

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if not new_password:
        print("[!] Empty password is not allowed.", file=sys.stderr)
        return 1

    return asyncio.run(reset(args.username, new_password, db_path))


if __name__ == "__main__":
    sys.exit(main())
