#!/usr/bin/env python3
"""
Garden activity logbook: record entries, manage tags and ask questions.

Usage:
  python3 apps/cli/logbook.py --db /path/to/logbook.db add "Regué el árbol de limón"
  python3 apps/cli/logbook.py --db /path/to/logbook.db list --tag riego
  python3 apps/cli/logbook.py --db /path/to/logbook.db --lang es ask "¿Cuántos árboles planté este año?"
  NEON_DATABASE_URL=postgresql://... python3 apps/cli/logbook.py --backend neon list
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Any


ROOT = Path(__file__).resolve().parents[2]
ENGINE_DIR = ROOT / "apps" / "engine"
if str(ENGINE_DIR) not in sys.path:
    sys.path.insert(0, str(ENGINE_DIR))

from kv_runtime import (  # noqa: E402
    DEFAULT_NEON_CONNECT_TIMEOUT_S,
    DEFAULT_NEON_DSN_ENV,
    open_kv_store,
)
from lemma_nlp import no_expansion, spacy_expansion  # noqa: E402
from log_store import LogEntry, LogStore  # noqa: E402
from query_engine import LogAssistant  # noqa: E402
from tag_catalog import DEFAULT_LANGUAGE, LANGUAGES, Language  # noqa: E402
from tagger import Tagger  # noqa: E402


DEFAULT_LANG_ENV = "GARDEN_LOGBOOK_LANG"
DEFAULT_DB_ENV = "GARDEN_LOGBOOK_DB"


def entry_payload(store: LogStore, entry: LogEntry, language: Language) -> dict[str, Any]:
    return {
        "id": entry.id,
        "text": entry.text,
        "created_at": entry.created_at.isoformat(),
        "tag_ids": list(entry.tag_ids),
        "tags": store.localized_tags(entry, language),
    }


def read_text(args: argparse.Namespace) -> str:
    chunks: list[str] = []
    cli_text = " ".join(args.text).strip()
    if cli_text:
        chunks.append(cli_text)
    if getattr(args, "stdin", False):
        stdin_text = sys.stdin.read().strip()
        if stdin_text:
            chunks.append(stdin_text)
    return "\n".join(chunks)


def parse_date(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise SystemExit(f"invalid date (expected ISO 8601): {value}") from exc


def open_store(args: argparse.Namespace) -> LogStore:
    kv = open_kv_store(
        backend=args.backend,
        db=args.db,
        neon_dsn=args.neon_dsn,
        neon_dsn_env=args.neon_dsn_env,
        neon_connect_timeout=args.neon_connect_timeout,
    )
    tagger = Tagger(expander=no_expansion if args.no_nlp else spacy_expansion)
    return LogStore(kv, tagger=tagger)


def cmd_add(store: LogStore, args: argparse.Namespace) -> dict[str, Any]:
    entry = store.add_log(read_text(args))
    return {
        "created": entry is not None,
        "log": entry_payload(store, entry, args.lang) if entry else None,
    }


def cmd_list(store: LogStore, args: argparse.Namespace) -> dict[str, Any]:
    entries = store.logs_with_tag(args.tag) if args.tag else store.sorted_logs
    return {
        "count": len(entries),
        "logs": [entry_payload(store, entry, args.lang) for entry in entries],
    }


def cmd_delete(store: LogStore, args: argparse.Namespace) -> dict[str, Any]:
    existed = store.log(args.log_id) is not None
    store.delete_log(args.log_id)
    return {"deleted": existed, "id": args.log_id}


def _log_result(store: LogStore, args: argparse.Namespace) -> dict[str, Any]:
    entry = store.log(args.log_id)
    return {
        "found": entry is not None,
        "log": entry_payload(store, entry, args.lang) if entry else None,
    }


def cmd_tag(store: LogStore, args: argparse.Namespace) -> dict[str, Any]:
    store.add_tag(args.tag_id, args.log_id)
    return _log_result(store, args)


def cmd_untag(store: LogStore, args: argparse.Namespace) -> dict[str, Any]:
    store.remove_tag(args.tag_id, args.log_id)
    return _log_result(store, args)


def cmd_redate(store: LogStore, args: argparse.Namespace) -> dict[str, Any]:
    store.update_log_date(args.log_id, parse_date(args.date))
    return _log_result(store, args)


def cmd_tags(store: LogStore, args: argparse.Namespace) -> dict[str, Any]:
    if args.all:
        tag_ids = store.all_suggested_tag_ids(args.lang)
    else:
        tag_ids = store.available_tag_ids(args.lang)
    return {
        "tags": [
            {"id": tag_id, "name": store.tag_name(tag_id, args.lang) or tag_id}
            for tag_id in tag_ids
        ],
    }


def cmd_ask(store: LogStore, args: argparse.Namespace) -> dict[str, Any]:
    question = read_text(args)
    answer = LogAssistant(store).answer(question, args.lang)
    return {"question": question, "answer": answer, "language": args.lang}


COMMANDS = {
    "add": cmd_add,
    "list": cmd_list,
    "delete": cmd_delete,
    "tag": cmd_tag,
    "untag": cmd_untag,
    "redate": cmd_redate,
    "tags": cmd_tags,
    "ask": cmd_ask,
}


def run(args: argparse.Namespace) -> int:
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    store = open_store(args)
    try:
        result_payload = COMMANDS[args.command](store, args)
    finally:
        close = getattr(store.kv, "close", None)
        if callable(close):
            close()
    print(json.dumps(result_payload, ensure_ascii=False))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Garden activity logbook.")
    parser.add_argument(
        "--backend",
        choices=["sqlite", "neon"],
        default="sqlite",
        help="Storage backend",
    )
    parser.add_argument(
        "--db",
        default=os.environ.get(DEFAULT_DB_ENV),
        help=f"SQLite database path (for --backend sqlite, env: {DEFAULT_DB_ENV})",
    )
    parser.add_argument("--neon-dsn", help="Neon PostgreSQL DSN (for --backend neon)")
    parser.add_argument(
        "--neon-dsn-env",
        default=DEFAULT_NEON_DSN_ENV,
        help="Environment variable name for Neon DSN",
    )
    parser.add_argument(
        "--neon-connect-timeout",
        type=int,
        default=DEFAULT_NEON_CONNECT_TIMEOUT_S,
        help="Neon connection timeout seconds",
    )
    parser.add_argument(
        "--lang",
        choices=list(LANGUAGES),
        default=os.environ.get(DEFAULT_LANG_ENV) or DEFAULT_LANGUAGE,
        help=f"Answer and tag-name language (env: {DEFAULT_LANG_ENV})",
    )
    parser.add_argument("--no-nlp", action="store_true", help="Match raw tokens only, skip spaCy")
    parser.add_argument("--verbose", action="store_true", help="Debug logging to stderr")

    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="Record a new log entry")
    add.add_argument("text", nargs="*", help="Entry text (use --stdin to read from standard input)")
    add.add_argument("--stdin", action="store_true", help="Read entry text from stdin")

    list_cmd = sub.add_parser("list", help="List entries, most recent first")
    list_cmd.add_argument("--tag", help="Only entries carrying this tag id")

    delete = sub.add_parser("delete", help="Delete an entry")
    delete.add_argument("log_id")

    tag = sub.add_parser("tag", help="Add a tag to an entry")
    tag.add_argument("log_id")
    tag.add_argument("tag_id")

    untag = sub.add_parser("untag", help="Remove a tag from an entry")
    untag.add_argument("log_id")
    untag.add_argument("tag_id")

    redate = sub.add_parser("redate", help="Change the date of an entry")
    redate.add_argument("log_id")
    redate.add_argument("date", help="ISO 8601 date or datetime")

    tags = sub.add_parser("tags", help="List tags in use")
    tags.add_argument("--all", action="store_true", help="List the whole catalog")

    ask = sub.add_parser("ask", help="Ask a question about the logs")
    ask.add_argument("text", nargs="*", help="Question text")
    ask.add_argument("--stdin", action="store_true", help="Read the question from stdin")
    return parser


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()
    if args.backend == "sqlite" and not args.db:
        parser.error("--db is required when --backend sqlite")
    if args.lang not in LANGUAGES:
        parser.error(f"unsupported language: {args.lang}")
    return run(args)


if __name__ == "__main__":
    raise SystemExit(main())
