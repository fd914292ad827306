from __future__ import annotations

import argparse
import json

from billing.api.utils import invoice_view_payload
from billing.core.config import get_settings
from billing.core.errors import BillingError
from billing.core.logging import configure_logging
from billing.demo import seed_default_catalog
from billing.domain.invoices.service import get_invoice
from billing.domain.users.service import register_user
from billing.persistence.pg import init_db, session_scope


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Billing & inventory CLI")
    top = parser.add_subparsers(dest="command", required=True)

    top.add_parser("init-db", help="Create database tables")

    user = top.add_parser("create-user", help="Register a user account")
    user.add_argument("username")
    user.add_argument("--password", required=True)
    user.add_argument("--role", default="staff")

    top.add_parser("seed-demo", help="Seed the demo user and catalog")

    show = top.add_parser("show-invoice", help="Print an invoice as JSON")
    show.add_argument("invoice_id")

    serve = top.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)

    return parser


def _init_db(_: argparse.Namespace) -> int:
    init_db()
    return 0


def _create_user(args: argparse.Namespace) -> int:
    init_db()
    with session_scope() as session:
        user = register_user(session, args.username, args.password, args.role)
        print(json.dumps({"id": user.id, "username": user.username, "role": user.role}, indent=2))
    return 0


def _seed_demo(_: argparse.Namespace) -> int:
    init_db()
    with session_scope() as session:
        print(json.dumps(seed_default_catalog(session), indent=2))
    return 0


def _show_invoice(args: argparse.Namespace) -> int:
    with session_scope() as session:
        view = get_invoice(session, args.invoice_id)
        print(json.dumps(invoice_view_payload(view), ensure_ascii=False, indent=2))
    return 0


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "billing.main:app",
        host=args.host or settings.api_host,
        port=args.port or settings.api_port,
        log_config=None,
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    parser = _build_parser()
    args = parser.parse_args(argv)

    handlers = {
        "init-db": _init_db,
        "create-user": _create_user,
        "seed-demo": _seed_demo,
        "show-invoice": _show_invoice,
        "serve": _serve,
    }
    try:
        return handlers[args.command](args)
    except BillingError as exc:
        print(json.dumps(exc.to_response()))
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
