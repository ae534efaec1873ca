"""Mint a bearer token for local use.

Usage:
    python -m app.tools.issue_token --sub admin-1 --role ADMIN
    python -m app.tools.issue_token --sub acc-7 --role ACCOUNTANT --email acc@example.com --minutes 60
"""

from __future__ import annotations

import argparse
import logging

from app.domain.value_objects.enums import Role
from app.infrastructure.api.auth import create_access_token

logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Issue a signed JWT for the transport API")
    parser.add_argument("--sub", required=True, help="User id placed in the 'sub' claim")
    parser.add_argument(
        "--role", default=Role.ADMIN.value, choices=[r.value for r in Role],
        help="Role claim (default: ADMIN)",
    )
    parser.add_argument("--email", default=None, help="Optional email claim")
    parser.add_argument(
        "--minutes", type=int, default=None,
        help="Lifetime in minutes (default: JWT_EXPIRE_MINUTES)",
    )
    args = parser.parse_args()

    token = create_access_token(args.sub, args.role, email=args.email, expires_minutes=args.minutes)
    logger.info("Issued %s token for %s", args.role, args.sub)
    print(token)


if __name__ == "__main__":
    main()
