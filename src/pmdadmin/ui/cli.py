# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import mimetypes
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from pmdadmin.app import (
    check_secondary_id,
    delete_entry,
    employee_stats,
    list_entries,
    list_ranks,
    register_catalog_url,
    upload_to_catalog,
    upload_to_storage,
)
from pmdadmin.config import configure_logging
from pmdadmin.domain.errors import ValidationError
from pmdadmin.domain.uploads import DEFAULT_UPLOADER, UploadKind, UploadRequest

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from pmdadmin.domain.model import CatalogEntry

log = logging.getLogger(__name__)

_KINDS = {"documents": UploadKind.DOCUMENT, "gallery": UploadKind.IMAGE}


def _add_catalog_commands(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    for name, kind in _KINDS.items():
        noun = "documents" if kind is UploadKind.DOCUMENT else "gallery images"
        parser = subparsers.add_parser(name, help=f"Manage {noun}")
        actions = parser.add_subparsers(dest="action", required=True)

        listing = actions.add_parser("list", help=f"List {noun}, newest first")
        listing.add_argument(
            "--cache-ttl",
            type=float,
            help="Cache catalog listings on disk for this many seconds",
        )

        upload = actions.add_parser("upload", help="Upload a file or register a URL")
        source = upload.add_mutually_exclusive_group(required=True)
        source.add_argument("--file", type=Path, help="Local file to upload")
        source.add_argument("--url", type=str, help="Externally hosted URL to register")
        upload.add_argument("--title", type=str, required=True)
        upload.add_argument("--category", type=str, default="")
        upload.add_argument("--description", type=str, default="")
        upload.add_argument("--uploaded-by", type=str, default=DEFAULT_UPLOADER)
        upload.add_argument("--mime-type", type=str, help="Override the guessed MIME type")
        upload.add_argument(
            "--via",
            choices=("storage", "catalog"),
            default="storage",
            help="Object storage plus record store, or the catalog script (default: %(default)s)",
        )

        delete = actions.add_parser("delete", help="Delete by identity key, record id or title")
        delete.add_argument("key", type=str)
        delete.add_argument("--uploaded-by", type=str, default=DEFAULT_UPLOADER)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Police mobile directory administration")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    _add_catalog_commands(subparsers)

    ranks = subparsers.add_parser("ranks", help="Inspect the rank master")
    rank_actions = ranks.add_subparsers(dest="action", required=True)
    rank_actions.add_parser("list", help="List active ranks by seniority")
    check = rank_actions.add_parser("check", help="Check whether a rank needs a metal number")
    check.add_argument("rank", type=str)
    check.add_argument("--metal-number", type=str)

    subparsers.add_parser("stats", help="Show employee statistics")

    return parser.parse_args(list(argv))


def _format_entry(entry: CatalogEntry) -> str:
    created = entry.created_at.strftime("%Y-%m-%d %H:%M") if entry.created_at else "-"
    return f"{created}  [{entry.source}] {entry.title}  {entry.locator}  ({entry.identity})"


def _read_upload(args: argparse.Namespace) -> UploadRequest:
    path: Path = args.file
    if not path.is_file():
        raise ValidationError(f"No such file: {path}")
    mime_type = args.mime_type or mimetypes.guess_type(path.name)[0]
    return UploadRequest(
        title=args.title,
        data=path.read_bytes(),
        mime_type=mime_type,
        category=args.category,
        description=args.description,
        uploaded_by=args.uploaded_by,
    )


def _run_catalog_command(args: argparse.Namespace) -> None:
    kind = _KINDS[args.command]
    if args.action == "list":
        for entry in list_entries(kind, cache_ttl=args.cache_ttl):
            print(_format_entry(entry))
    elif args.action == "upload" and args.url:
        result = register_catalog_url(
            kind,
            args.title,
            args.url,
            category=args.category,
            description=args.description,
            uploaded_by=args.uploaded_by,
        )
        log.info("Registered %s: %s", args.title, result.message or result.url or "ok")
    elif args.action == "upload" and args.via == "catalog":
        result = upload_to_catalog(kind, _read_upload(args))
        log.info("Uploaded %s: %s", args.title, result.url or result.message or "ok")
    elif args.action == "upload":
        stored = upload_to_storage(kind, _read_upload(args))
        print(stored.url)
    elif args.action == "delete":
        entry = delete_entry(kind, args.key, uploaded_by=args.uploaded_by)
        log.info("Deleted %r (%s)", entry.title, entry.source)
    else:
        raise ValueError(f"Unsupported action: {args.action}")


def _run_rank_command(args: argparse.Namespace) -> None:
    if args.action == "list":
        for rank in list_ranks():
            flag = " *metal number*" if rank.requires_secondary_id else ""
            code = rank.equivalent_code or "-"
            print(f"{rank.seniority_order or '-':>3}  {rank.id:<12} {code:<8} {rank.label}{flag}")
    elif args.action == "check":
        required = check_secondary_id(args.rank, args.metal_number)
        print(f"{args.rank}: metal number {'required' if required else 'not required'}")
    else:
        raise ValueError(f"Unsupported action: {args.action}")


def _run_stats() -> None:
    stats = employee_stats()
    print(f"Employees: {stats.total} ({stats.approved} approved, {stats.pending} pending)")
    print(f"Districts: {stats.districts_count}, stations: {stats.stations_count}")
    for title, counts in (
        ("By district", stats.by_district),
        ("By rank", stats.by_rank),
    ):
        print(f"{title}:")
        for name, count in sorted(counts.items(), key=lambda item: (-item[1], item[0])):
            print(f"  {name:<30} {count}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command in _KINDS:
            _run_catalog_command(parsed_args)
        elif parsed_args.command == "ranks":
            _run_rank_command(parsed_args)
        elif parsed_args.command == "stats":
            _run_stats()
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except ValueError as exc:
        log.error("Invalid input: %s", exc)  # noqa: TRY400
        sys.exit(2)
    except Exception:
        log.exception("Command failed")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    signal(SIGINT, sigint_handler)
    main()
