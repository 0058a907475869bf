"""Application entry point."""

from __future__ import annotations

import argparse
import logging
import sys

from bankcore_app.core.container import ServiceContainer, build_container
from bankcore_app.core.logging_config import setup_logging
from bankcore_app.core.validation import to_decimal
from bankcore_app.models.insurance import (
    POLICY_TYPES,
    CoverageOption,
    PolicyError,
    PolicyTenure,
    PremiumFrequency,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bankcore", description="Account ledger and insurance quotes.")
    commands = parser.add_subparsers(dest="command", required=True)

    account = commands.add_parser("account", help="Inspect and update accounts.")
    account_commands = account.add_subparsers(dest="action", required=True)

    show = account_commands.add_parser("show", help="Show balance and transfer limit.")
    show.add_argument("account_number")

    history = account_commands.add_parser("history", help="Print transaction history.")
    history.add_argument("account_number")

    trail = account_commands.add_parser("trail", help="Print audited mutations.")
    trail.add_argument("account_number")

    close = account_commands.add_parser("close", help="Delete a stored account.")
    close.add_argument("account_number")

    clear = account_commands.add_parser("clear-history", help="Erase transaction history.")
    clear.add_argument("account_number")

    deposit = account_commands.add_parser("deposit", help="Deposit an amount.")
    deposit.add_argument("account_number")
    deposit.add_argument("amount")

    withdraw = account_commands.add_parser("withdraw", help="Withdraw an amount.")
    withdraw.add_argument("account_number")
    withdraw.add_argument("amount")
    withdraw.add_argument(
        "--minimum-balance",
        default=None,
        help="Treat the account as a savings account with this floor.",
    )

    set_limit = account_commands.add_parser("set-limit", help="Change the transfer limit.")
    set_limit.add_argument("account_number")
    set_limit.add_argument("limit")

    policy = commands.add_parser("policy", help="Insurance policies.")
    policy_commands = policy.add_subparsers(dest="action", required=True)
    quote = policy_commands.add_parser("quote", help="Quote a new policy.")
    quote.add_argument("--type", dest="policy_type", choices=sorted(POLICY_TYPES), required=True)
    quote.add_argument("--start", dest="start_date", required=True, help="yyyy-mm-dd")
    quote.add_argument(
        "--coverage",
        default=CoverageOption.BASIC.name,
        help=", ".join(option.name for option in CoverageOption),
    )
    quote.add_argument(
        "--tenure",
        default=PolicyTenure.FIVE_YEARS.name,
        help=", ".join(option.name for option in PolicyTenure),
    )
    quote.add_argument(
        "--frequency",
        default=PremiumFrequency.MONTHLY.name,
        help=", ".join(option.name for option in PremiumFrequency),
    )
    quote.add_argument("--age", type=int, required=True)
    quote.add_argument(
        "--risk",
        action="store_true",
        help="Smoker (life, health) or past injuries (accident).",
    )

    batch = commands.add_parser("import", help="Apply a CSV file.")
    batch.add_argument("kind", choices=["transactions", "policies"])
    batch.add_argument("file_path")

    audit = commands.add_parser("audit", help="List recent audit logs.")
    audit.add_argument("--limit", type=int, default=20)
    audit.add_argument("--entity", choices=["account", "policy"], default=None)
    audit.add_argument("--key", dest="entity_key", default=None)

    return parser


def _run_account(container: ServiceContainer, args: argparse.Namespace) -> None:
    service = container.account_service

    if args.action == "withdraw":
        accepted = service.withdraw(args.account_number, args.amount, args.minimum_balance)
        if not accepted:
            raise ValueError("Cannot withdraw. Minimum balance must be maintained.")
        account = service.open_account(args.account_number)
        print(account.display_account_info(), end="")
        return

    if args.action == "close":
        service.close_account(args.account_number)
        print(f"[INFO] account closed: {args.account_number.strip()}")
        return

    account = service.open_account(args.account_number)
    if args.action == "show":
        print(account.display_account_info(), end="")
    elif args.action == "history":
        print(account.transaction_history(), end="")
    elif args.action == "trail":
        for event in service.audit_trail(account.account_number):
            print(f"{event['action']} balance={event.get('balance', '')}")
    elif args.action == "clear-history":
        account.clear_history()
        print(f"[INFO] history cleared: {account.account_number}")
    elif args.action == "deposit":
        account.deposit(args.amount)
        print(account.display_account_info(), end="")
    elif args.action == "set-limit":
        account.set_transfer_limit(to_decimal(args.limit))
        print(account.display_account_info(), end="")


def _run_policy(container: ServiceContainer, args: argparse.Namespace) -> None:
    policy = container.insurance_service.create_policy(
        policy_type=args.policy_type,
        start_date=args.start_date,
        coverage=args.coverage,
        tenure=args.tenure,
        frequency=args.frequency,
        age=args.age,
        risk_flag=args.risk,
    )
    print(policy.display_policy_details(), end="")


def _run_import(container: ServiceContainer, args: argparse.Namespace) -> None:
    importer = container.csv_import_service
    if args.kind == "transactions":
        result = importer.import_transactions(args.file_path)
    else:
        result = importer.import_policies(args.file_path)

    print(f"[INFO] applied: {result.created_count}, failed: {result.failed_count}")
    for message in result.error_messages:
        print(f"  {message}")
    for policy_number in result.policy_numbers:
        print(f"  policy {policy_number}")


def _run_audit(container: ServiceContainer, args: argparse.Namespace) -> None:
    logs = container.audit_repo.list_logs(
        limit=args.limit,
        entity=args.entity,
        entity_key=args.entity_key,
    )
    for entry in logs:
        print(entry.summary())


def main(argv: list[str] | None = None, container: ServiceContainer | None = None) -> int:
    """Parse arguments, dispatch one command and return the exit code."""
    args = build_parser().parse_args(argv)
    owns_container = container is None
    container = container or build_container()
    try:
        return _dispatch(container, args)
    finally:
        if owns_container:
            container.close()


def _dispatch(container: ServiceContainer, args: argparse.Namespace) -> int:
    setup_logging(container.config.logging.level)

    removed = container.audit_repo.cleanup_old_logs(container.config.logging.retention_days)
    if removed:
        logger.info("Cleaned old audit logs: %d", removed)

    handlers = {
        "account": _run_account,
        "policy": _run_policy,
        "import": _run_import,
        "audit": _run_audit,
    }
    try:
        handlers[args.command](container, args)
    except (PolicyError, ValueError, OSError) as error:
        print(f"[ERROR] {error}", file=sys.stderr)
        return 1
    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
