"""Command line interface for the Qayd accounting API.

Usage examples:

    qayd login
    qayd list journals --status draft --page 2
    qayd actions invoices 6f1c...
    qayd run payments 6f1c... cancel --reason "Duplicate"
    qayd export customers --format excel --output ./exports
    qayd --locale ar search "قيود"
    qayd check-redirect "/ar/dashboard"
"""

import argparse
import asyncio
import json
import sys
from dataclasses import dataclass
from typing import Any

import structlog

from qayd.api.client import QaydAPIClient
from qayd.auth import AuthContext
from qayd.calculations import format_currency
from qayd.config import configure_logging, get_settings
from qayd.constants import DEFAULT_PAGE_SIZE, PAGE_SIZE_OPTIONS
from qayd.errors import FormValidationError, QaydError
from qayd.exports import EXPORT_TARGETS, ExportFormat
from qayd.i18n import localized, normalize_locale
from qayd.listing import filter_records, paginate
from qayd.search import search_navigation
from qayd.security import is_valid_redirect, sanitize_redirect
from qayd.workflow import Action, ActionRunner, Entity, available_actions

logger = structlog.get_logger(__name__)

AMOUNT_COLUMNS = frozenset(
    {
        "amount",
        "total",
        "total_amount",
        "total_debit",
        "book_value",
        "output_vat",
        "input_vat",
        "net_vat",
    }
)
LOCALIZED_COLUMNS = frozenset({"name", "description"})


@dataclass(frozen=True)
class EntityInfo:
    resource: str
    entity: Entity | None
    columns: tuple[str, ...]
    search_fields: tuple[str, ...]


ENTITIES: dict[str, EntityInfo] = {
    "journals": EntityInfo(
        "journals",
        Entity.JOURNAL,
        ("id", "journal_number", "transaction_date", "description", "total_debit", "status"),
        ("journal_number", "description_en", "description_ar", "reference"),
    ),
    "invoices": EntityInfo(
        "invoices",
        Entity.INVOICE,
        ("id", "invoice_number", "invoice_date", "party_name", "total_amount", "status"),
        ("invoice_number", "party_name", "reference"),
    ),
    "payments": EntityInfo(
        "payments",
        Entity.PAYMENT,
        ("id", "payment_number", "payment_date", "party_name", "amount", "status"),
        ("payment_number", "party_name", "reference"),
    ),
    "quotations": EntityInfo(
        "quotations",
        Entity.QUOTATION,
        ("id", "quotation_number", "quotation_date", "customer_name", "total_amount", "status"),
        ("quotation_number", "customer_name"),
    ),
    "purchase-orders": EntityInfo(
        "purchase_orders",
        Entity.PURCHASE_ORDER,
        ("id", "po_number", "po_date", "vendor_name", "total_amount", "status"),
        ("po_number", "vendor_name"),
    ),
    "expenses": EntityInfo(
        "expenses",
        Entity.EXPENSE,
        ("id", "expense_number", "expense_date", "category", "amount", "status"),
        ("expense_number", "description", "category"),
    ),
    "assets": EntityInfo(
        "assets",
        Entity.FIXED_ASSET,
        ("id", "asset_number", "name", "category", "book_value", "status"),
        ("asset_number", "name_en", "name_ar", "category"),
    ),
    "reconciliations": EntityInfo(
        "reconciliations",
        Entity.RECONCILIATION,
        ("id", "statement_date", "statement_balance", "status"),
        ("statement_date", "status"),
    ),
    "vat-returns": EntityInfo(
        "vat_returns",
        Entity.VAT_RETURN,
        ("id", "period_start", "period_end", "output_vat", "input_vat", "net_vat", "status"),
        ("period_start", "period_end", "status"),
    ),
    "vat-rates": EntityInfo(
        "vat_rates",
        None,
        ("id", "code", "name", "rate", "type", "is_default"),
        ("code", "name", "type"),
    ),
    "fiscal-years": EntityInfo(
        "fiscal_years",
        None,
        ("id", "name", "year", "start_date", "end_date", "is_locked", "is_current"),
        ("name", "description"),
    ),
    "cost-centers": EntityInfo(
        "cost_centers",
        None,
        ("id", "code", "name", "is_active"),
        ("code", "name_en", "name_ar", "description"),
    ),
    "customers": EntityInfo(
        "customers",
        None,
        ("id", "code", "name", "email", "phone"),
        ("code", "name_en", "name_ar", "email", "phone"),
    ),
    "vendors": EntityInfo(
        "vendors",
        None,
        ("id", "code", "name", "email", "phone"),
        ("code", "name_en", "name_ar", "email", "phone"),
    ),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qayd",
        description="Qayd accounting API client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Credentials are read from QAYD_EMAIL and QAYD_PASSWORD.",
    )
    parser.add_argument("--locale", default=None, help="Display locale: en or ar")
    parser.add_argument("--json", action="store_true", help="Print raw JSON output")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("login", help="Sign in and show the current user")

    list_cmd = commands.add_parser("list", help="List records")
    list_cmd.add_argument("entity", choices=sorted(ENTITIES))
    list_cmd.add_argument("--status", help="Only records in this status")
    list_cmd.add_argument("--search", help="Case-insensitive text filter")
    list_cmd.add_argument("--page", type=int, default=1)
    list_cmd.add_argument(
        "--page-size", type=int, default=DEFAULT_PAGE_SIZE, choices=PAGE_SIZE_OPTIONS
    )

    show_cmd = commands.add_parser("show", help="Show one record")
    show_cmd.add_argument("entity", choices=sorted(ENTITIES))
    show_cmd.add_argument("id")

    actions_cmd = commands.add_parser("actions", help="List actions available for a record")
    actions_cmd.add_argument("entity", choices=sorted(ENTITIES))
    actions_cmd.add_argument("id")

    run_cmd = commands.add_parser("run", help="Run a workflow action on a record")
    run_cmd.add_argument("entity", choices=sorted(ENTITIES))
    run_cmd.add_argument("id")
    run_cmd.add_argument("action", choices=[action.value for action in Action])
    run_cmd.add_argument("--reason", help="Reason for cancel or reject")
    run_cmd.add_argument("--data", help="JSON object with fields to update (edit)")
    run_cmd.add_argument("--disposal-date", help="Disposal date (YYYY-MM-DD)")
    run_cmd.add_argument("--disposal-amount", type=float, help="Sale proceeds")
    run_cmd.add_argument("--filing-date", help="VAT return filing date (YYYY-MM-DD)")
    run_cmd.add_argument("--payment-date", help="VAT payment date (YYYY-MM-DD)")
    run_cmd.add_argument("--payment-reference", help="VAT payment reference")

    export_cmd = commands.add_parser("export", help="Download a list export")
    export_cmd.add_argument("entity", choices=sorted(EXPORT_TARGETS))
    export_cmd.add_argument(
        "--format", dest="fmt", choices=["csv", "excel"], default="csv"
    )
    export_cmd.add_argument("--output", default=".", help="Directory to save into")
    export_cmd.add_argument("--include-inactive", action="store_true")

    search_cmd = commands.add_parser("search", help="Search pages by name or keyword")
    search_cmd.add_argument("query", nargs="+")
    search_cmd.add_argument("--limit", type=int, default=None)

    redirect_cmd = commands.add_parser("check-redirect", help="Check a post-login redirect")
    redirect_cmd.add_argument("url")

    return parser


# === Output ===


def _cell(record: dict[str, Any], column: str, locale: str) -> str:
    if column in LOCALIZED_COLUMNS:
        return localized(record, column, locale)
    value = record.get(column)
    if value is None:
        return ""
    if column in AMOUNT_COLUMNS:
        return format_currency(value, record.get("currency") or get_settings().currency, locale)
    return str(value)


def print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def print_table(records: list[dict[str, Any]], columns: tuple[str, ...], locale: str) -> None:
    rows = [[_cell(record, column, locale) for column in columns] for record in records]
    widths = [
        max([len(column)] + [len(row[i]) for row in rows]) for i, column in enumerate(columns)
    ]
    print("  ".join(column.upper().ljust(width) for column, width in zip(columns, widths)))
    for row in rows:
        print("  ".join(value.ljust(width) for value, width in zip(row, widths)))


def _require_workflow(name: str) -> Entity:
    entity = ENTITIES[name].entity
    if entity is None:
        raise QaydError(f"{name} have no workflow actions")
    return entity


# === Commands ===


async def cmd_login(client: QaydAPIClient, args: argparse.Namespace, locale: str) -> int:
    auth = AuthContext(client)
    if not client.is_authenticated:
        await auth.sign_in()
    user = await auth.refresh() or {}
    if args.json:
        print_json({"user": user, "tenant": auth.tenant})
    else:
        print(f"Signed in as {user.get('email', 'unknown')}")
    return 0


async def cmd_list(client: QaydAPIClient, args: argparse.Namespace, locale: str) -> int:
    info = ENTITIES[args.entity]
    records = await getattr(client, info.resource).list()
    if args.status:
        records = [record for record in records if record.get("status") == args.status]
    records = filter_records(records, args.search, info.search_fields)
    page = paginate(records, args.page, args.page_size)

    if args.json:
        print_json(
            {
                "items": page.items,
                "page": page.page,
                "page_size": page.page_size,
                "total_items": page.total_items,
                "total_pages": page.total_pages,
            }
        )
        return 0

    print_table(page.items, info.columns, locale)
    print(
        f"\n{page.start_index}-{page.end_index} of {page.total_items}"
        f" (page {page.page}/{page.total_pages})"
    )
    return 0


async def cmd_show(client: QaydAPIClient, args: argparse.Namespace, locale: str) -> int:
    record = await getattr(client, ENTITIES[args.entity].resource).get(args.id)
    print_json(record)
    return 0


async def cmd_actions(client: QaydAPIClient, args: argparse.Namespace, locale: str) -> int:
    entity = _require_workflow(args.entity)
    record = await getattr(client, ENTITIES[args.entity].resource).get(args.id)
    actions = [action.value for action in available_actions(entity, record)]
    if args.json:
        print_json({"status": record.get("status"), "actions": actions})
    else:
        print(f"status: {record.get('status') or 'unknown'}")
        for action in actions:
            print(f"  {action}")
    return 0


async def cmd_run(client: QaydAPIClient, args: argparse.Namespace, locale: str) -> int:
    entity = _require_workflow(args.entity)
    options: dict[str, Any] = {
        "reason": args.reason,
        "disposal_date": args.disposal_date,
        "disposal_amount": args.disposal_amount,
        "filing_date": args.filing_date,
        "payment_date": args.payment_date,
        "payment_reference": args.payment_reference,
    }
    if args.data:
        try:
            options["data"] = json.loads(args.data)
        except json.JSONDecodeError as e:
            raise FormValidationError(f"--data is not valid JSON: {e}") from e
        if not isinstance(options["data"], dict):
            raise FormValidationError("--data must be a JSON object")

    record = await getattr(client, ENTITIES[args.entity].resource).get(args.id)
    result = await ActionRunner(client).run(entity, record, args.action, **options)
    if args.json:
        print_json(result.to_dict())
    elif result.success:
        print(result.message)
    if not result.success:
        print(f"error: {result.message}", file=sys.stderr)
        for error in result.errors:
            print(f"  - {error}", file=sys.stderr)
        return 1
    return 0


async def cmd_export(client: QaydAPIClient, args: argparse.Namespace, locale: str) -> int:
    exported = await client.exports.export(
        args.entity,
        ExportFormat(args.fmt),
        language=locale,  # type: ignore[arg-type]
        include_inactive=args.include_inactive or None,
    )
    path = exported.save(args.output)
    print(str(path))
    return 0


def cmd_search(args: argparse.Namespace, locale: str) -> int:
    results = search_navigation(" ".join(args.query), locale=locale, limit=args.limit)
    if args.json:
        print_json(
            [
                {"id": item.id, "label": item.label(locale), "href": item.href}
                for item in results
            ]
        )
        return 0
    if not results:
        print("No matching pages")
        return 0
    for item in results:
        suffix = "" if item.implemented else " (coming soon)"
        print(f"{item.label(locale)}  {item.href}  [{item.module_label(locale)}]{suffix}")
    return 0


def cmd_check_redirect(args: argparse.Namespace) -> int:
    valid = is_valid_redirect(args.url)
    target = sanitize_redirect(args.url)
    if args.json:
        print_json({"url": args.url, "valid": valid, "redirect": target})
    else:
        print(f"{'valid' if valid else 'rejected'}: {target}")
    return 0 if valid else 1


API_COMMANDS = {
    "login": cmd_login,
    "list": cmd_list,
    "show": cmd_show,
    "actions": cmd_actions,
    "run": cmd_run,
    "export": cmd_export,
}


async def main(argv: list[str] | None = None, client: QaydAPIClient | None = None) -> int:
    """Run the CLI and return the process exit code."""
    configure_logging()
    args = build_parser().parse_args(argv)
    locale = normalize_locale(args.locale or get_settings().locale)
    structlog.contextvars.bind_contextvars(command=args.command)

    try:
        if args.command == "search":
            return cmd_search(args, locale)
        if args.command == "check-redirect":
            return cmd_check_redirect(args)

        async with client or QaydAPIClient() as api:
            return await API_COMMANDS[args.command](api, args, locale)

    except FormValidationError as e:
        print("error: validation failed", file=sys.stderr)
        for error in e.errors:
            print(f"  - {error}", file=sys.stderr)
        return 1
    except QaydError as e:
        logger.debug("command_failed", error=str(e))
        print(f"error: {e}", file=sys.stderr)
        return 1


def run() -> None:
    """Console script entry point."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.info("interrupted")
        sys.exit(130)


if __name__ == "__main__":
    run()
