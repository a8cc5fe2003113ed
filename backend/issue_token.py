#!/usr/bin/env python3
"""Script to mint a bearer token for local testing of protected endpoints."""

import argparse

from catalog.core.config import get_settings
from catalog.core.security import create_access_token

settings = get_settings()

parser = argparse.ArgumentParser(description=__doc__)
parser.add_argument("subject", help="User identifier placed in the 'sub' claim")
parser.add_argument(
    "--role",
    action="append",
    default=[],
    help=f"Role to grant (repeatable). Editors: {', '.join(settings.editor_roles)}; "
    f"admin: {settings.admin_role}",
)
parser.add_argument("--minutes", type=int, default=settings.access_token_expire_minutes)
args = parser.parse_args()

token = create_access_token(args.subject, args.role, expires_minutes=args.minutes)
print(f"Roles: {', '.join(args.role) or '(none)'}")
print(f"\nAuthorization: Bearer {token}")
