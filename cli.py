import argparse
import random
import sys
from pathlib import Path

from api.utils.json_utils import read_json_file
from core.logging_setup import setup_console_logging
from errors import UnknownTypeError
from question_types import resolve_type
from serialization import project_display, render_display_json
from structure_validation import validate_structure

setup_console_logging()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Check and preview question structures")
    commands = parser.add_subparsers(dest="command", required=True)

    validate = commands.add_parser("validate", help="Report rule violations of a form data file")
    validate.add_argument("type", help="Question type id, e.g. QCM_S")
    validate.add_argument("file", type=Path, help="Path to a JSON form data file")

    preview = commands.add_parser("preview", help="Print the display payload of a form data file")
    preview.add_argument("type", help="Question type id, e.g. QCM_S")
    preview.add_argument("file", type=Path, help="Path to a JSON form data file")
    preview.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the matching and ordering shuffles",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        type_id = resolve_type(args.type)
    except UnknownTypeError as exc:
        print(exc, file=sys.stderr)
        return 2
    if not args.file.exists():
        print(f"File not found: {args.file}", file=sys.stderr)
        return 2
    form_data = read_json_file(args.file, {})
    if not isinstance(form_data, dict):
        print(f"Expected a JSON object in {args.file}", file=sys.stderr)
        return 2

    if args.command == "validate":
        errors = validate_structure(type_id, form_data)
        for error in errors:
            print(f"- {error}")
        if errors:
            return 1
        print(f"{type_id.value} structure is valid")
        return 0

    rng = random.Random(args.seed) if args.seed is not None else None
    print(render_display_json(project_display(type_id, form_data, rng)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
