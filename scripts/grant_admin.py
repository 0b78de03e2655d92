#!/usr/bin/env python3
# =============================================================================
# scripts/grant_admin.py - Grant or Revoke the Admin Role
# =============================================================================
# Admins can read every gift's private message. The flag lives in the user's
# Supabase app_metadata, which only the service role can write, and reaches
# the API through the user's next access token.
#
# Usage:
#   poetry run python scripts/grant_admin.py <email>            # grant
#   poetry run python scripts/grant_admin.py <email> --revoke   # revoke
#
# The user must sign in again (or refresh their session) to pick up the change.
# =============================================================================

import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from lib.supabase_client import SupabaseClient, SupabaseClientError


def main(argv: list[str]) -> int:
    args = [a for a in argv if not a.startswith("--")]
    flags = {a for a in argv if a.startswith("--")}

    if len(args) != 1 or flags - {"--revoke"}:
        print("Usage: grant_admin.py <email> [--revoke]")
        return 2

    email = args[0].strip().lower()
    is_admin = "--revoke" not in flags

    try:
        user = SupabaseClient.fetch_user_by_email(email)
        if user is None:
            print(f"ERROR: no user with email {email}")
            return 1

        SupabaseClient.set_admin_flag(user["id"], is_admin)
    except SupabaseClientError as e:
        print(f"ERROR: {e}")
        return 1

    action = "Granted" if is_admin else "Revoked"
    print(f"{action} admin for {email} (user id {user['id']})")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
