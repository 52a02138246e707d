#!/usr/bin/env python3
"""
Order Desk CLI entry point.

Usage examples:
  python main.py check                                  # Show config, ping the backend
  python main.py order submit order.json                # Validate and send an order form
  python main.py order submit order.json --dry-run      # Validate and print the payload only
  python main.py po download PO-1001                    # Save PO-1001_PurchaseOrder.pdf
  python main.py po download PO-1001 --output pdfs/

  python main.py yarn request --count 30 --content Cotton --spun-type Combed --bags 10 --kgs 500
  python main.py yarn view --status pending
  python main.py yarn receive --spun-type Combed --kgs-received 480 --bags-received 10 \
                              --received-date 2024-05-01T09:30 --vendor-id V-12
  python main.py yarn view-all

order.json holds the form as typed: order fields, a "sizes" list, and
"labels" whose trims/sizes are comma-delimited strings.
"""
import json
import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from config import Config
from services.api_client import ApiError, OrderApiClient
from services.order_form import OrderFormPage, OrderFormState, build_payload, validate
from services.po_export import PurchaseOrderExporter
from services.yarn_actions import (
    YarnPage,
    select_action,
    set_status,
    update_receipt,
    update_request,
)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
        datefmt="%H:%M:%S",
    )
    # Quieten noisy third-party loggers
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _client(ctx: click.Context) -> OrderApiClient:
    return OrderApiClient(ctx.obj["config"])


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--api", default=None, help="Backend base URL (default: $API_BASE_URL)")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, api: str | None) -> None:
    """Order Desk: submit orders, export purchase orders, manage yarn."""
    ctx.ensure_object(dict)
    _setup_logging(verbose)
    config = Config()
    if api:
        config.api_base_url = api.strip().rstrip("/")
    ctx.obj["config"] = config


# --------------------------------------------------------------------
# check command
# --------------------------------------------------------------------

@cli.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """Show the active settings and verify the backend answers."""
    config: Config = ctx.obj["config"]
    click.echo("\n=== Order Desk Setup Check ===\n")
    click.echo(f"  Backend:           {config.api_base_url}")
    try:
        records = _client(ctx).view_all_yarn()
        count = len(records) if isinstance(records, list) else 1
        click.echo(f"  Backend status:    ✓ reachable ({count} yarn records)")
    except ApiError as e:
        click.echo(f"  Backend status:    ✗ NOT reachable ({e})")
        click.echo("  → Check API_BASE_URL in your .env")

    tick = "✓" if config.output_dir.exists() else "✗"
    click.echo(f"  Output directory:  {tick}  {config.output_dir}")
    click.echo()


# --------------------------------------------------------------------
# order commands
# --------------------------------------------------------------------

@cli.group()
def order() -> None:
    """Purchase order entry."""


@order.command("submit")
@click.argument("form_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--dry-run", is_flag=True, help="Validate and print the payload without sending it")
@click.pass_context
def order_submit(ctx: click.Context, form_file: str, dry_run: bool) -> None:
    """Validate an order form (JSON) and send it to the backend."""
    try:
        state = OrderFormState.model_validate(json.loads(Path(form_file).read_text(encoding="utf-8")))
    except (ValueError, ValidationError) as e:
        click.echo(f"Error: '{form_file}' is not a valid order form: {e}", err=True)
        sys.exit(1)

    if dry_run:
        error = validate(state, state.labels)
        if error:
            click.echo(f"✗ {error}", err=True)
            sys.exit(1)
        click.echo(json.dumps(build_payload(state).model_dump(), indent=2))
        return

    page = OrderFormPage(_client(ctx), state)
    ok = page.submit()
    click.echo(f"{'✓' if ok else '✗'} {page.message}")
    if not ok:
        sys.exit(1)


# --------------------------------------------------------------------
# po commands
# --------------------------------------------------------------------

@cli.group()
def po() -> None:
    """Purchase order export."""


@po.command("download")
@click.argument("po_number")
@click.option("--output", "-o", default=None, type=click.Path(), help="Directory for the PDF")
@click.pass_context
def po_download(ctx: click.Context, po_number: str, output: str | None) -> None:
    """Fetch a purchase order and save it as <PO>_PurchaseOrder.pdf."""
    config: Config = ctx.obj["config"]
    if output:
        config.output_dir = Path(output)

    outcome = PurchaseOrderExporter(_client(ctx), config).download_as_pdf(po_number)
    click.echo(f"{'✓' if outcome.ok else '✗'} {outcome.message}")
    if outcome.ok:
        click.echo(f"  Saved to: {outcome.path}")
    else:
        sys.exit(1)


# --------------------------------------------------------------------
# yarn commands
# --------------------------------------------------------------------

def _run_yarn(page: YarnPage) -> None:
    state = page.handle_action()
    if state.error:
        click.echo(f"⚠ {state.error}", err=True)
        sys.exit(1)
    if state.notice:
        click.echo(state.notice)
        return
    if state.all_yarn:
        for i, yarn in enumerate(state.all_yarn, 1):
            yarn_id = yarn.get("_id", i) if isinstance(yarn, dict) else i
            click.echo(f"\nYarn ID: {yarn_id}")
            click.echo(json.dumps(yarn, indent=2, default=str))
        return
    click.echo(f"✓ {json.dumps(state.result, indent=2, default=str)}")


@cli.group()
def yarn() -> None:
    """Yarn requests and receipts."""


@yarn.command("request")
@click.option("--count", required=True, help="Yarn count")
@click.option("--content", required=True, help="Fibre content, e.g. Cotton")
@click.option("--spun-type", required=True, help="Spun type, e.g. Combed")
@click.option("--bags", required=True, help="Number of bags")
@click.option("--kgs", required=True, help="Weight in kg")
@click.pass_context
def yarn_request(ctx: click.Context, count: str, content: str, spun_type: str, bags: str, kgs: str) -> None:
    """Request yarn from a vendor."""
    page = YarnPage(_client(ctx))
    page.apply(select_action, "request")
    for field, value in (("count", count), ("content", content), ("spun_type", spun_type),
                         ("bags", bags), ("kgs", kgs)):
        page.apply(update_request, field, value)
    _run_yarn(page)


@yarn.command("view")
@click.option("--status", default="", help="Filter by status, e.g. pending, approved")
@click.pass_context
def yarn_view(ctx: click.Context, status: str) -> None:
    """List yarn requests, optionally filtered by status."""
    page = YarnPage(_client(ctx))
    page.apply(select_action, "view")
    page.apply(set_status, status)
    _run_yarn(page)


@yarn.command("receive")
@click.option("--spun-type", required=True, help="Spun type")
@click.option("--kgs-received", required=True, help="Weight received in kg")
@click.option("--bags-received", required=True, help="Bags received")
@click.option("--received-date", required=True, help="Receipt time, e.g. 2024-05-01T09:30")
@click.option("--vendor-id", required=True, help="Vendor ID")
@click.pass_context
def yarn_receive(
    ctx: click.Context,
    spun_type: str,
    kgs_received: str,
    bags_received: str,
    received_date: str,
    vendor_id: str,
) -> None:
    """Record yarn received from a vendor."""
    page = YarnPage(_client(ctx))
    page.apply(select_action, "receive")
    for field, value in (("spun_type", spun_type), ("kgs_received", kgs_received),
                         ("bags_recevied", bags_received), ("received_date", received_date),
                         ("vendor_id", vendor_id)):
        page.apply(update_receipt, field, value)
    _run_yarn(page)


@yarn.command("view-all")
@click.pass_context
def yarn_view_all(ctx: click.Context) -> None:
    """List every yarn record."""
    page = YarnPage(_client(ctx))
    page.apply(select_action, "viewAll")
    _run_yarn(page)


if __name__ == "__main__":
    cli()
