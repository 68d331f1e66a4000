"""Maintenance commands for the notification store."""

from __future__ import annotations

import argparse
from datetime import timedelta

from sqlalchemy.exc import SQLAlchemyError

from pawmatch.application.use_cases.notifications import (
    cleanup_duplicate_notifications,
    delete_invalid_notifications,
    find_invalid_notifications,
    summarize_notifications,
)
from pawmatch.config import get_settings
from pawmatch.infrastructure.database import SessionLocal, initialize_database
from pawmatch.infrastructure.security import ADMIN_ROLE, create_access_token
from pawmatch.logging import setup_logging


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for the maintenance commands."""

    parser = argparse.ArgumentParser(
        description="Inspect and repair PawMatch notifications.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    dedup = subparsers.add_parser("dedup", help="Collapse duplicate notifications of a user")
    dedup.add_argument("--user-id", required=True, help="Recipient whose notifications are cleaned")

    scan = subparsers.add_parser("scan", help="List notifications with broken references")
    scan.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Number of newest notifications to scan (default: ADMIN_SCAN_LIMIT)",
    )

    delete = subparsers.add_parser("delete-invalid", help="Delete invalid notifications")
    target = delete.add_mutually_exclusive_group(required=True)
    target.add_argument("--ids", type=int, nargs="+", help="Notification identifiers to delete")
    target.add_argument(
        "--all",
        action="store_true",
        help="Delete every invalid notification found by a scan",
    )
    delete.add_argument("--limit", type=int, default=None, help="Scan size used with --all")

    token = subparsers.add_parser("issue-token", help="Sign an access token for local testing")
    token.add_argument("--user-id", required=True, help="Value of the token subject")
    token.add_argument("--admin", action="store_true", help="Grant the administrator role")
    token.add_argument("--minutes", type=int, default=60, help="Token lifetime in minutes")

    return parser.parse_args()


def _dedup(args: argparse.Namespace) -> None:
    session = SessionLocal()
    try:
        result = cleanup_duplicate_notifications(session, args.user_id)
    finally:
        session.close()
    if not result.success:
        raise SystemExit(f"Cleanup failed: {result.error}")
    print(f"Removed {result.count} duplicate notification(s) for {args.user_id}")


def _scan(args: argparse.Namespace) -> None:
    limit = args.limit or get_settings().admin_scan_limit
    session = SessionLocal()
    try:
        counts = summarize_notifications(session, limit=limit)
        invalid = find_invalid_notifications(session, limit=limit)
    except SQLAlchemyError as exc:
        raise SystemExit(f"Could not scan notifications: {exc}") from exc
    finally:
        session.close()

    print(f"Scanned {counts.total} notification(s), {counts.invalid} invalid")
    for notification_type, count in sorted(counts.types.items()):
        print(f"  {notification_type}: {count}")
    for item in invalid:
        notification = item.notification
        issues = "; ".join(
            f"{issue.field}: {issue.issue}" for issue in item.validation.issues
        )
        print(f"#{notification.id} [{notification.type}] user={notification.user_id} {issues}")


def _delete_invalid(args: argparse.Namespace) -> None:
    session = SessionLocal()
    try:
        if args.all:
            limit = args.limit or get_settings().admin_scan_limit
            try:
                ids = [item.notification.id for item in find_invalid_notifications(session, limit=limit)]
            except SQLAlchemyError as exc:
                raise SystemExit(f"Could not scan notifications: {exc}") from exc
        else:
            ids = args.ids
        result = delete_invalid_notifications(session, ids)
    finally:
        session.close()
    if not result.success:
        raise SystemExit(f"Deletion failed: {result.error}")
    print(f"Deleted {result.count} notification(s)")


def _issue_token(args: argparse.Namespace) -> None:
    claims: dict[str, object] = {"sub": args.user_id}
    if args.admin:
        claims["role"] = ADMIN_ROLE
    print(create_access_token(claims, expires_delta=timedelta(minutes=args.minutes)))


COMMANDS = {
    "dedup": _dedup,
    "scan": _scan,
    "delete-invalid": _delete_invalid,
    "issue-token": _issue_token,
}


def main() -> None:
    """Run the maintenance command selected on the command line."""

    args = parse_args()
    setup_logging(get_settings())
    if args.command != "issue-token":
        initialize_database()
    COMMANDS[args.command](args)


if __name__ == "__main__":
    main()
