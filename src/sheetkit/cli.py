"""Command-line interface for sheetkit."""

import argparse
import json
import sys
from typing import Optional

from .config import settings
from .errors import SheetsError
from .logging_config import configure_logging
from .sheets import SheetsClient
from .sheets.models import MAJOR_DIMENSIONS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="sheetkit - Google Sheets helper commands")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("auth", help="Authenticate with Google Sheets API")

    create_parser = subparsers.add_parser("create", help="Create a spreadsheet")
    create_parser.add_argument("title", help="Title of the new spreadsheet")

    info_parser = subparsers.add_parser("info", help="Show a spreadsheet and its tabs")
    info_parser.add_argument("spreadsheet_id")

    rename_parser = subparsers.add_parser("rename", help="Rename a spreadsheet")
    rename_parser.add_argument("spreadsheet_id")
    rename_parser.add_argument("title")

    read_parser = subparsers.add_parser("read", help="Read values from a range")
    read_parser.add_argument("spreadsheet_id")
    read_parser.add_argument("range", help="Range in A1 notation (e.g., 'Sheet1!A1:C10')")
    read_parser.add_argument("--flat", action="store_true", help="Flatten the grid row by row")
    read_parser.add_argument(
        "--strings", action="store_true", help="Flatten and require every cell to be text"
    )
    read_parser.add_argument("--lower", action="store_true", help="Lower-case values (with --strings)")

    write_parser = subparsers.add_parser("write", help="Write or append values to a range")
    write_parser.add_argument("spreadsheet_id")
    write_parser.add_argument("range")
    write_parser.add_argument("--values", required=True, help="JSON list of rows")
    write_parser.add_argument(
        "--append", action="store_true", help="Append below existing data instead of overwriting"
    )
    write_parser.add_argument(
        "--major-dimension",
        default="ROWS",
        type=str.upper,
        choices=MAJOR_DIMENSIONS,
        help="ROWS or COLUMNS (default: ROWS)",
    )

    clear_parser = subparsers.add_parser("clear", help="Clear values in a range")
    clear_parser.add_argument("spreadsheet_id")
    clear_parser.add_argument("range")

    add_tab_parser = subparsers.add_parser("add-tab", help="Add a tab to a spreadsheet")
    add_tab_parser.add_argument("spreadsheet_id")
    add_tab_parser.add_argument("name")

    rename_tab_parser = subparsers.add_parser("rename-tab", help="Rename a tab")
    rename_tab_parser.add_argument("spreadsheet_id")
    rename_tab_parser.add_argument("old_name")
    rename_tab_parser.add_argument("new_name")

    delete_tab_parser = subparsers.add_parser("delete-tab", help="Delete a tab")
    delete_tab_parser.add_argument("spreadsheet_id")
    delete_tab_parser.add_argument("name")

    return parser


def run_command(client: SheetsClient, args: argparse.Namespace):
    """Run a parsed command against ``client`` and return its JSON-able result."""
    if args.command == "create":
        return client.create_spreadsheet(args.title).model_dump()
    if args.command == "info":
        return client.get_spreadsheet(args.spreadsheet_id).model_dump()
    if args.command == "rename":
        return client.rename_spreadsheet(args.spreadsheet_id, args.title).model_dump()
    if args.command == "read":
        if args.strings:
            return client.get_column_values_as_string(args.spreadsheet_id, args.range, args.lower)
        if args.flat:
            return client.get_column_values(args.spreadsheet_id, args.range)
        return client.get_values(args.spreadsheet_id, args.range)
    if args.command == "write":
        values = json.loads(args.values)
        return client.write_range(
            args.spreadsheet_id, args.range, args.major_dimension, values, overwrite=not args.append
        )
    if args.command == "clear":
        return client.clear_values(args.spreadsheet_id, args.range)
    if args.command == "add-tab":
        return client.insert_tab(args.spreadsheet_id, args.name)

    spreadsheet = client.get_spreadsheet(args.spreadsheet_id)
    if args.command == "rename-tab":
        return client.rename_tab_by_name(spreadsheet, args.old_name, args.new_name)
    if args.command == "delete-tab":
        return client.delete_tab_by_name(spreadsheet, args.name)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[list[str]] = None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    configure_logging(settings.log_level)

    try:
        client = SheetsClient.from_settings(settings)
        if args.command == "auth":
            print("Authentication successful!")
            return
        result = run_command(client, args)
    except SheetsError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except json.JSONDecodeError as e:
        print(f"Invalid --values JSON: {e}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(result, indent=2, default=str))


if __name__ == "__main__":
    main()
