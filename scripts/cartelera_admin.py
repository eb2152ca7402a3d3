#!/usr/bin/env python3
"""Command-line access to the catalog and its local overlay.

Remote commands (``list``, ``show``, ``create``, ``update``, ``remove``)
go through :class:`pycartelera.CarteleraClient`, so writes fall back to
the overlay when the remote blocks them. Local commands (``add``, ``edit``,
``delete``, ``undelete``, ``reset``, ``dump``) only touch the overlay.

Configuration comes from ``CARTELERA_*`` environment variables; set
``CARTELERA_STORAGE_DIR`` (or ``--storage-dir``) to keep the overlay
between runs.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pycartelera import (  # noqa: E402
    CarteleraClient,
    CarteleraConfig,
    CarteleraError,
    CarteleraHttpError,
)

_RECORD_FIELDS = ("imdbID", "Title", "Year", "Type", "Ubication", "Poster", "description")


def _print_json(value: Any) -> None:
    print(json.dumps(value, indent=2, ensure_ascii=False, default=str))


def _record_from_args(args: argparse.Namespace) -> dict[str, Any]:
    record: dict[str, Any] = {}
    if args.json_record:
        loaded = json.loads(args.json_record)
        if not isinstance(loaded, dict):
            raise SystemExit("--json must be a JSON object")
        record.update(loaded)
    for field_name in _RECORD_FIELDS:
        value = getattr(args, field_name.lower(), None)
        if value is not None:
            record[field_name] = value
    return record


def _add_record_options(parser: argparse.ArgumentParser) -> None:
    for field_name in _RECORD_FIELDS:
        parser.add_argument(f"--{field_name.lower()}", dest=field_name.lower(), help=f"{field_name} field")
    parser.add_argument("--json", dest="json_record", help="Full record as a JSON object")


async def _run(args: argparse.Namespace) -> int:
    overrides: dict[str, Any] = {}
    if args.storage_dir:
        overrides["storage_dir"] = args.storage_dir
    config = CarteleraConfig.from_env(**overrides)

    async with CarteleraClient(config) as client:
        admin = client.admin
        command = args.command

        if command == "list":
            movies = await client.list_movies(args.title, args.ubication)
            if not movies:
                print("No results for the given criteria.")
            else:
                _print_json(movies)
        elif command == "show":
            movie = await client.get_movie(args.imdb_id)
            if movie is None:
                print("Movie not found.")
            else:
                _print_json(movie)
        elif command == "create":
            print((await client.create_movie(_record_from_args(args))).message)
        elif command == "update":
            print((await client.update_movie(args.imdb_id, _record_from_args(args))).message)
        elif command == "remove":
            print((await client.delete_movie(args.imdb_id)).message)
        elif command == "add":
            print(admin.add(_record_from_args(args)))
        elif command == "edit":
            form = await client.load_for_edit(args.imdb_id)
            form.update({k: v for k, v in _record_from_args(args).items() if k != "imdbID"})
            print(admin.save_edit(form))
        elif command == "delete":
            print(admin.delete(args.imdb_id))
        elif command == "undelete":
            print(admin.undo_delete(args.imdb_id))
        elif command == "reset":
            print(admin.reset())
        elif command == "dump":
            store = client.store
            _print_json(
                {
                    "overrides": store.get_overrides(),
                    "adds": store.get_adds(),
                    "deletes": sorted(store.get_deletes()),
                }
            )
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Browse and edit the movie catalog with a local overlay.")
    parser.add_argument("--storage-dir", help="Overlay directory (default: CARTELERA_STORAGE_DIR or in-memory)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="List movies (remote + overlay)")
    p_list.add_argument("--title", default="")
    p_list.add_argument("--ubication", default="")

    for name, help_text in (
        ("show", "Show one movie (remote + overlay)"),
        ("remove", "Delete remotely, falling back to a local tombstone"),
        ("delete", "Delete locally (removes a local add, otherwise tombstones)"),
        ("undelete", "Revert a local deletion"),
    ):
        sub.add_parser(name, help=help_text).add_argument("imdb_id")

    p_create = sub.add_parser("create", help="Create remotely, falling back to a local add")
    _add_record_options(p_create)
    p_update = sub.add_parser("update", help="Update remotely, falling back to a local override")
    p_update.add_argument("imdb_id")
    _add_record_options(p_update)
    p_add = sub.add_parser("add", help="Add a movie to the overlay only")
    _add_record_options(p_add)
    p_edit = sub.add_parser("edit", help="Edit a movie in the overlay only")
    p_edit.add_argument("imdb_id")
    _add_record_options(p_edit)

    sub.add_parser("reset", help="Clear every local modification")
    sub.add_parser("dump", help="Print the raw overlay tables")

    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        return asyncio.run(_run(args))
    except CarteleraHttpError as exc:
        print(f"Error: HTTP {exc.status_code}: {exc.body}", file=sys.stderr)
        return 1
    except CarteleraError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
