"""Command line interface.

Usage::

    umbrella-mbox list archive.mbox --since 2025-01-01 --from '^alice' --json
    umbrella-mbox dump archive.mbox sender subject --strip-comments
    cat archive.mbox | umbrella-mbox list -
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date
from typing import BinaryIO

from pydantic import ValidationError

from .config import ReaderConfig
from .errors import MessageParseError
from .fields import FIELD_GROUPS, FieldDumper
from .filters import MessageFilter
from .logging import setup_logging
from .models import MessageSummary
from .reader import MboxReader

EXIT_OK = 0
EXIT_IO_ERROR = 1
EXIT_PARSE_ERROR = 2

MESSAGE_SEPARATOR = "---"


def _iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="umbrella-mbox",
        description="Inspect the messages of an mbox archive",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    list_cmd = sub.add_parser("list", help="List messages matching the given criteria")
    list_cmd.add_argument("mbox", help="Path to the mbox file, or - for stdin")
    list_cmd.add_argument("--since", type=_iso_date, help="Earliest date (YYYY-MM-DD)")
    list_cmd.add_argument("--until", type=_iso_date, help="Latest date, exclusive (YYYY-MM-DD)")
    list_cmd.add_argument(
        "--from",
        dest="senders",
        action="append",
        default=[],
        metavar="EXPR",
        help="Sender expression: text, ^prefix, suffix$, =exact, !negated (repeatable)",
    )
    list_cmd.add_argument(
        "--to",
        dest="recipients",
        action="append",
        default=[],
        metavar="EXPR",
        help="Recipient expression matched against To and Cc (repeatable)",
    )
    list_cmd.add_argument("--subject", help="Case-insensitive subject substring")
    list_cmd.add_argument(
        "--reply",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Only replies (or, with --no-reply, only non-replies)",
    )
    list_cmd.add_argument(
        "--attachment",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Only messages with (or without) named attachments",
    )
    list_cmd.add_argument(
        "--unique",
        action="store_true",
        help="Skip messages whose Message-Id was already listed",
    )
    list_cmd.add_argument("--json", action="store_true", help="Emit one JSON object per line")

    dump_cmd = sub.add_parser("dump", help="Print header fields of every message and part")
    dump_cmd.add_argument("mbox", help="Path to the mbox file, or - for stdin")
    dump_cmd.add_argument(
        "fields",
        nargs="*",
        metavar="FIELD",
        help=f"Header names or groups ({', '.join(FIELD_GROUPS)}); all fields when omitted",
    )
    dump_cmd.add_argument(
        "--strip-comments",
        action="store_true",
        help="Remove parenthetical comments from values",
    )
    dump_cmd.add_argument(
        "--experimental",
        action="store_true",
        help="Include X- headers when dumping all fields",
    )
    return parser


@contextmanager
def _open_input(path: str) -> Iterator[BinaryIO]:
    if path == "-":
        yield sys.stdin.buffer
        return
    with open(path, "rb") as fp:
        yield fp


def cmd_list(args: argparse.Namespace, config: ReaderConfig) -> int:
    criteria = MessageFilter(
        since=args.since,
        until=args.until,
        senders=args.senders,
        recipients=args.recipients,
        subject=args.subject,
        reply=args.reply,
        attachment=args.attachment,
        unique=args.unique,
    )
    with _open_input(args.mbox) as fp:
        reader = MboxReader(fp, config)
        for listed, message in enumerate(criteria.select(reader), start=1):
            if args.json:
                summary = MessageSummary.from_message(reader.messages_read, message)
                print(summary.model_dump_json())
            else:
                print(
                    listed,
                    message.date().isoformat(),
                    message.sender(),
                    message.subject(),
                )
    return EXIT_OK


def cmd_dump(args: argparse.Namespace, config: ReaderConfig) -> int:
    dumper = FieldDumper(
        args.fields,
        strip_comments=args.strip_comments,
        experimental=args.experimental,
    )
    with _open_input(args.mbox) as fp:
        for i, message in enumerate(MboxReader(fp, config)):
            if i > 0:
                print(MESSAGE_SEPARATOR)
            for line in dumper.message_lines(message):
                print(line)
    return EXIT_OK


_COMMANDS = {
    "list": cmd_list,
    "dump": cmd_dump,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = ReaderConfig()
        setup_logging(json=config.log_json, level=config.log_level)
        return _COMMANDS[args.command](args, config)
    except ValidationError as exc:
        parser.error(str(exc))
    except MessageParseError as exc:
        print(f"{args.mbox}: {exc}", file=sys.stderr)
        return EXIT_PARSE_ERROR
    except OSError as exc:
        print(f"{args.mbox}: {exc.strerror or exc}", file=sys.stderr)
        return EXIT_IO_ERROR
