"""CLI entry point for editing a field document.

Usage:
    python -m designfields show
    python -m designfields --file chair.json add-field Color --kind dropdown
    python -m designfields --file chair.json add-option <field_id> Red
    python -m designfields --file chair.json visible --select <field_id>=Red

Every mutating command loads the document, applies one builder function and
writes the result back. The document is left untouched when the builder
rejects the change.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional

from designfields.lib.codec import dumps, read_collection, write_collection
from designfields.lib.conditions import (
    add_condition,
    evaluate_visibility,
    remove_condition,
)
from designfields.lib.errors import FieldConfigError
from designfields.lib.logging import setup_logging
from designfields.lib.settings import BuilderSettings, load_settings
from designfields.lib.store import (
    add_field,
    remove_field,
    rename_field,
    reorder,
    summarize,
)
from designfields.lib.validate import (
    ValidationSeverity,
    format_validation_report,
    validate_collection,
)
from designfields.lib.values import (
    add_option,
    clear_default_option,
    clear_single_value,
    default_placeholder,
    initial_selections,
    remove_option,
    set_default_option,
    set_single_value,
)
from designfields.models import DropdownField, FieldCollection, FieldKind

logger = logging.getLogger("designfields")

Mutation = Callable[[FieldCollection, argparse.Namespace], FieldCollection]


def format_collection(snapshot: FieldCollection) -> str:
    """Render a snapshot as a numbered, human-readable listing."""
    if not len(snapshot):
        return "No fields added yet."

    labels = {f.id: f.label for f in snapshot}
    lines: List[str] = []
    for position, f in enumerate(snapshot, start=1):
        lines.append(f"{position}. {f.label} [{f.kind.value}]  id={f.id}")
        if not isinstance(f, DropdownField):
            lines.append(f"     value: {f.value!r}" if f.value else "     value: (empty)")
            continue

        for index, option in enumerate(f.options):
            marker = "  (default)" if option == f.default_option else ""
            lines.append(f"     [{index}] {option}{marker}")
        lines.append(f"     shows: {default_placeholder(f)}")
        if f.conditions:
            for index, condition in enumerate(f.conditions):
                watched = labels.get(condition.depends_on, condition.depends_on)
                lines.append(
                    f"     when ({index}) {watched} = {condition.required_value!r}"
                )
        else:
            lines.append("     always visible")

    lines.append("")
    lines.append(str(summarize(snapshot)))
    return "\n".join(lines)


def _parse_selections(pairs: List[str]) -> Dict[str, str]:
    selections: Dict[str, str] = {}
    for pair in pairs:
        field_id, sep, value = pair.partition("=")
        if not sep or not field_id:
            raise argparse.ArgumentTypeError(
                f"Expected FIELD_ID=VALUE, got '{pair}'"
            )
        selections[field_id] = value
    return selections


# Mutating commands: name -> function applying the change to a snapshot
MUTATIONS: Dict[str, Mutation] = {
    "add-field": lambda s, a: add_field(
        s, a.label, FieldKind(a.kind), id_prefix=a.id_prefix
    ),
    "remove-field": lambda s, a: remove_field(s, a.field_id),
    "rename": lambda s, a: rename_field(s, a.field_id, a.label),
    "move": lambda s, a: reorder(s, a.from_index, a.to_index),
    "set-value": lambda s, a: set_single_value(s, a.field_id, a.text),
    "clear-value": lambda s, a: clear_single_value(s, a.field_id),
    "add-option": lambda s, a: add_option(s, a.field_id, a.text),
    "remove-option": lambda s, a: remove_option(s, a.field_id, a.index),
    "set-default": lambda s, a: set_default_option(s, a.field_id, a.value),
    "clear-default": lambda s, a: clear_default_option(s, a.field_id),
    "add-condition": lambda s, a: add_condition(
        s, a.field_id, a.depends_on, a.value
    ),
    "remove-condition": lambda s, a: remove_condition(s, a.field_id, a.index),
}


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="design-fields",
        description="Edit core design element fields and their visibility conditions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Create a dropdown and give it options
    python -m designfields --file chair.json add-field Color --kind dropdown
    python -m designfields --file chair.json add-option field_color_1718000000000 Red

    # Only show Finish when Color is Red
    python -m designfields --file chair.json add-condition <finish_id> <color_id> Red

    # Which fields show for a given selection
    python -m designfields --file chair.json visible --select <color_id>=Red

Indexes are zero-based.
        """,
    )
    parser.add_argument(
        "--file",
        "-f",
        dest="document",
        help="Field document (.json, .yaml or .yml); defaults to the configured document_path",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--json-log",
        action="store_true",
        help="Output logs in JSON format (for log aggregation systems)",
    )
    parser.add_argument(
        "--log-file",
        help="Write logs to a file in addition to console",
    )

    commands = parser.add_subparsers(dest="command", metavar="command")

    show = commands.add_parser("show", help="List fields, options and conditions")
    show.add_argument(
        "--format",
        choices=["text", "json", "yaml"],
        default="text",
        help="Output format (default: text)",
    )

    commands.add_parser("check", help="Validate the document")

    visible = commands.add_parser("visible", help="Evaluate field visibility")
    visible.add_argument(
        "--select",
        action="append",
        default=[],
        metavar="FIELD_ID=VALUE",
        help="Selected value for a field; defaults come from the document",
    )
    visible.add_argument("--json", action="store_true", help="Print a JSON mapping")

    add = commands.add_parser("add-field", help="Append a new field")
    add.add_argument("label")
    add.add_argument(
        "--kind",
        choices=[k.value for k in FieldKind],
        default=FieldKind.SINGLE.value,
        help="Field kind (default: text)",
    )

    remove = commands.add_parser("remove-field", help="Remove a field and conditions on it")
    remove.add_argument("field_id")

    rename = commands.add_parser("rename", help="Change a field label")
    rename.add_argument("field_id")
    rename.add_argument("label")

    move = commands.add_parser("move", help="Move a field to another position")
    move.add_argument("from_index", type=int)
    move.add_argument("to_index", type=int)

    set_value = commands.add_parser("set-value", help="Set a text field's value")
    set_value.add_argument("field_id")
    set_value.add_argument("text")

    clear_value = commands.add_parser("clear-value", help="Empty a text field's value")
    clear_value.add_argument("field_id")

    add_opt = commands.add_parser("add-option", help="Append a dropdown option")
    add_opt.add_argument("field_id")
    add_opt.add_argument("text")

    remove_opt = commands.add_parser("remove-option", help="Remove a dropdown option")
    remove_opt.add_argument("field_id")
    remove_opt.add_argument("index", type=int)

    set_default = commands.add_parser("set-default", help="Set a dropdown's default")
    set_default.add_argument("field_id")
    set_default.add_argument("value")

    clear_default = commands.add_parser("clear-default", help="Clear a dropdown's default")
    clear_default.add_argument("field_id")

    add_cond = commands.add_parser("add-condition", help="Show a field only for a value")
    add_cond.add_argument("field_id")
    add_cond.add_argument("depends_on")
    add_cond.add_argument("value")

    remove_cond = commands.add_parser("remove-condition", help="Remove a condition")
    remove_cond.add_argument("field_id")
    remove_cond.add_argument("index", type=int)

    return parser


def _document_path(args: argparse.Namespace, settings: BuilderSettings) -> Path:
    if args.document:
        return Path(args.document)
    return settings.get_document_path()


def run_command(args: argparse.Namespace, settings: BuilderSettings) -> int:
    """Execute one parsed command and return the exit status."""
    path = _document_path(args, settings)

    if args.command in MUTATIONS:
        snapshot = read_collection(path, missing_ok=True)
        args.id_prefix = settings.id_prefix
        updated = MUTATIONS[args.command](snapshot, args)
        if updated == snapshot:
            print("No changes.")
            return 0
        write_collection(path, updated, indent=settings.indent)
        logger.info("Applied %s to %s", args.command, path)
        if args.command == "add-field":
            print(f"Added field {updated.fields[-1].id}")
        else:
            print(f"Updated {path}")
        return 0

    # check reports broken documents instead of refusing to load them
    snapshot = read_collection(
        path,
        missing_ok=args.command == "show",
        validate=args.command != "check",
    )

    if args.command == "show":
        if args.format == "text":
            print(format_collection(snapshot))
        else:
            print(dumps(snapshot, args.format, indent=settings.indent), end="")
        return 0

    if args.command == "check":
        issues = validate_collection(snapshot)
        print(format_validation_report(issues))
        has_errors = any(i.severity == ValidationSeverity.ERROR for i in issues)
        return 1 if has_errors else 0

    if args.command == "visible":
        selections = initial_selections(snapshot)
        selections.update(_parse_selections(args.select))
        visibility = evaluate_visibility(snapshot, selections)
        if args.json:
            print(json.dumps(visibility, indent=settings.indent))
        else:
            for f in snapshot:
                state = "visible" if visibility[f.id] else "hidden"
                print(f"{f.label:<24} {state}")
        return 0

    raise ValueError(f"Unknown command '{args.command}'")


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    settings = load_settings()
    setup_logging(
        verbose=args.verbose,
        json_format=args.json_log or settings.log_format == "json",
        log_file=args.log_file or settings.log_file,
        level=settings.log_level,
    )

    try:
        status = run_command(args, settings)
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))
    except FieldConfigError as e:
        logger.debug("Command %s rejected", args.command, extra={"error": e.to_dict()})
        print(f"Error: {e.message}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        sys.exit(130)

    if status:
        sys.exit(status)


if __name__ == "__main__":
    main()
