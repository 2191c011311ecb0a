"""Command-line interface for the report store and record store helpers."""

from __future__ import annotations

import argparse
import json
import logging
from typing import Any

import anyio
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from report_card_data.config import Settings
from report_card_data.forms.grading import calculate_grade, get_overall_remark
from report_card_data.forms.storage import JsonFileStorage
from report_card_data.forms.store import ReportStore
from report_card_data.records.qdrant_store import RecordStore


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Report card data helpers (student reports + record store)."
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    reports_parser = subparsers.add_parser("reports", help="Manage saved student reports.")
    reports_sub = reports_parser.add_subparsers(dest="action", required=True)
    reports_sub.add_parser("list", help="List saved reports.")
    reports_sub.add_parser("add", help="Add a blank report.")
    remove_parser = reports_sub.add_parser("remove", help="Remove a report by id.")
    remove_parser.add_argument("id", type=str, help="Report id.")

    grade_parser = subparsers.add_parser("grade", help="Grade a score.")
    grade_parser.add_argument("score", type=float, help="Score to grade.")

    records_parser = subparsers.add_parser("records", help="Read from the record store.")
    records_sub = records_parser.add_subparsers(dest="action", required=True)
    get_parser = records_sub.add_parser("get", help="Fetch a point by id.")
    get_parser.add_argument("id", type=str, help="Point id.")
    search_parser = records_sub.add_parser(
        "search", help="Find points whose payload matches key=value pairs."
    )
    search_parser.add_argument("filters", nargs="*", help="Filters as key=value.")
    search_parser.add_argument(
        "--limit", type=int, default=None, help="Maximum number of results."
    )

    return parser.parse_args(argv)


def _load_settings(console: Console) -> Settings:
    try:
        return Settings()
    except ValidationError as exc:
        console.print("[red]Configuration error:[/red]")
        for error in exc.errors():
            field = error.get("loc", ("unknown",))[0]
            msg = error.get("msg", "Invalid value")
            console.print(f"  [yellow]{field}[/yellow]: {msg}")
        raise


def _parse_filters(pairs: list[str]) -> dict[str, Any]:
    filters: dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Invalid filter {pair!r}, expected key=value")
        filters[key] = value
    return filters


def _build_report_store(settings: Settings) -> ReportStore:
    storage = (
        JsonFileStorage(settings.reports_storage_path)
        if settings.reports_persistence_enabled
        else None
    )
    return ReportStore(storage, key=settings.reports_storage_key)


def _run_reports(args: argparse.Namespace, settings: Settings, console: Console) -> int:
    store = _build_report_store(settings)

    if args.action == "add":
        report = store.add()
        console.print(f"Added report [bold]{report['id']}[/bold]")
        return 0

    if args.action == "remove":
        if store.get(args.id) is None:
            console.print(f"[red]No report with id {args.id}[/red]")
            return 1
        store.remove(args.id)
        console.print(f"Removed report [bold]{args.id}[/bold]")
        return 0

    table = Table(title="Student reports")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Class")
    table.add_column("Session")
    for report in store:
        table.add_row(
            str(report.get("id", "")),
            str(report.get("fullName") or "-"),
            str(report.get("class", "")),
            str(report.get("session", "")),
        )
    console.print(table)
    return 0


async def _run_records(args: argparse.Namespace, settings: Settings) -> int:
    async with RecordStore(settings) as store:
        if args.action == "get":
            result: Any = await store.get(args.id)
            if result is None:
                print(json.dumps(None))
                return 1
        else:
            result = await store.search_by_payload(
                _parse_filters(args.filters), limit=args.limit
            )
    print(json.dumps(result, default=str))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    console = Console()

    if args.command == "grade":
        grade = calculate_grade(args.score)
        console.print(f"Grade: [bold]{grade}[/bold]  Remark: {get_overall_remark(grade)}")
        return 0

    try:
        settings = _load_settings(console)
    except ValidationError:
        return 1

    if args.command == "reports":
        return _run_reports(args, settings, console)
    if args.command == "records":
        try:
            return anyio.run(_run_records, args, settings)
        except ValueError as exc:
            console.print(f"[red]{exc}[/red]")
            return 1
    return 1


def run() -> None:
    raise SystemExit(main())


if __name__ == "__main__":
    run()
