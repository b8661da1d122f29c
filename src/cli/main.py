"""Cella CLI entry points.
This module exposes commands for inspecting and appending to a store file.
It maps argparse commands onto store and collection calls.
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Sequence

from core.config import CellaConfig
from core.logging_config import configure_logging
from core.types import Identifier
from store.document_store import DocumentStore
from store.store_factory import open_store


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="cella", description="Cella document store CLI")
    parser.add_argument("--store", help="Override CELLA_STORE_PATH for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("collections", help="List collections and record counts")
    subparsers.add_parser("dump", help="Print the serialized store")
    _add_get_command(subparsers)
    _add_query_command(subparsers)
    _add_insert_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Cella CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    config = CellaConfig.from_env()
    configure_logging(config.log_level)
    if args.command == "insert" and args.int_id and args.record_id is None:
        parser.error("--int-id requires --id")
    store = _build_store(config, args.store)
    if args.command == "collections":
        return _run_collections_command(store)
    if args.command == "dump":
        print(store.serialize())
        return 0
    if args.command == "get":
        return _run_get_command(store, args.collection, _parse_record_id(parser, args))
    if args.command == "query":
        query = _parse_json_argument(parser, args.query, "query") if args.query else None
        return _run_query_command(store, args.collection, query)
    if args.command == "insert":
        fields = _parse_json_argument(parser, args.fields, "fields")
        if not isinstance(fields, dict):
            parser.error("fields must be a JSON object")
        record_id = _parse_record_id(parser, args) if args.record_id is not None else None
        return _run_insert_command(store, args.collection, fields, record_id)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_store(config: CellaConfig, store_path: str | None) -> DocumentStore:
    """Open the configured store with optional path override.

    Args:
        config: Runtime configuration.
        store_path: Optional override path.

    Returns:
        Opened store.
    """
    path = Path(store_path).expanduser() if store_path else config.store_path
    return open_store(path, json_indent=config.json_indent)


def _add_get_command(subparsers: Any) -> None:
    parser = subparsers.add_parser("get", help="Print one record by id")
    parser.add_argument("collection")
    parser.add_argument("record_id")
    parser.add_argument("--int-id", action="store_true", help="Treat the id as an integer")


def _add_query_command(subparsers: Any) -> None:
    parser = subparsers.add_parser("query", help="Print records matching a JSON query")
    parser.add_argument("collection")
    parser.add_argument("query", nargs="?", help="Mongo-style JSON query, all records if omitted")


def _add_insert_command(subparsers: Any) -> None:
    parser = subparsers.add_parser("insert", help="Insert a record and persist the store")
    parser.add_argument("collection")
    parser.add_argument("fields", help="Record fields as a JSON object")
    parser.add_argument("--id", dest="record_id", help="Record id, generated when omitted")
    parser.add_argument("--int-id", action="store_true", help="Treat the id as an integer")


def _run_collections_command(store: DocumentStore) -> int:
    """Handle collections command.

    Args:
        store: Opened store.

    Returns:
        Exit code.
    """
    for name in store.collection_names():
        print(f"{name}\t{store.collections(name).count()}")
    return 0


def _run_get_command(store: DocumentStore, collection_name: str, record_id: Identifier) -> int:
    """Handle get command.

    Args:
        store: Opened store.
        collection_name: Collection to read from.
        record_id: Identifier to look up.

    Returns:
        Exit code, 1 when the record is absent.
    """
    if not store.has_collection(collection_name):
        return 1
    record = store.collections(collection_name).get(record_id)
    if record is None:
        return 1
    print(json.dumps(record, sort_keys=True))
    return 0


def _run_query_command(store: DocumentStore, collection_name: str, query: Any) -> int:
    """Handle query command.

    Args:
        store: Opened store.
        collection_name: Collection to scan.
        query: Decoded query mapping or None.

    Returns:
        Exit code.
    """
    if not store.has_collection(collection_name):
        return 0
    for record in store.collections(collection_name).query(query):
        print(json.dumps(record, sort_keys=True))
    return 0


def _run_insert_command(
    store: DocumentStore,
    collection_name: str,
    fields: dict[str, Any],
    record_id: Identifier | None,
) -> int:
    """Handle insert command.

    Args:
        store: Opened store.
        collection_name: Target collection.
        fields: Decoded record fields.
        record_id: Optional identifier; generated when None.

    Returns:
        Exit code.
    """
    inserted_id = store.collections(collection_name).insert(fields, record_id)
    print(inserted_id)
    return 0


def _parse_record_id(parser: argparse.ArgumentParser, args: argparse.Namespace) -> Identifier:
    """Convert the CLI id argument to its identifier type.

    Args:
        parser: Parser used to report argument errors.
        args: Parsed CLI args with record_id and int_id.

    Returns:
        String id, or integer id when --int-id is set.
    """
    if not args.int_id:
        return str(args.record_id)
    try:
        return int(args.record_id)
    except ValueError:
        parser.error(f"--int-id requires an integer id, got '{args.record_id}'")
        raise


def _parse_json_argument(parser: argparse.ArgumentParser, raw_value: str, label: str) -> Any:
    try:
        return json.loads(raw_value)
    except json.JSONDecodeError as error:
        parser.error(f"{label} is not valid JSON: {error.msg}")
        raise
