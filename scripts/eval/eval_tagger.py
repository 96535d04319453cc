#!/usr/bin/env python3
"""Evaluate tagger and assistant quality on local gold fixtures."""

from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Any


ROOT = Path(__file__).resolve().parents[2]
ENGINE_DIR = ROOT / "apps" / "engine"
if str(ENGINE_DIR) not in sys.path:
    sys.path.insert(0, str(ENGINE_DIR))

from kv_runtime import MemoryKeyValueStore  # noqa: E402
from log_store import STORAGE_KEY, LogStore  # noqa: E402
from query_engine import LogAssistant  # noqa: E402
from tag_catalog import TAG_CATALOG  # noqa: E402
from tagger import Tagger  # noqa: E402


def load_jsonl(path: Path) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    with path.open("r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            rows.append(json.loads(line))
    return rows


def tagging_metrics(rows: list[dict[str, Any]], tagger: Tagger) -> dict[str, Any]:
    labels = [definition.id for definition in TAG_CATALOG]
    stats = {label: {"tp": 0, "fp": 0, "fn": 0} for label in labels}
    exact = 0
    order_ok = 0
    for row in rows:
        expected = [str(t) for t in row["expected_tags"]]
        predicted = tagger.extract_tag_ids(str(row["text"]))
        if set(predicted) == set(expected):
            exact += 1
        if predicted == [label for label in labels if label in predicted]:
            order_ok += 1

        for label in labels:
            if label in predicted and label in expected:
                stats[label]["tp"] += 1
            elif label in predicted:
                stats[label]["fp"] += 1
            elif label in expected:
                stats[label]["fn"] += 1

    tp = sum(s["tp"] for s in stats.values())
    fp = sum(s["fp"] for s in stats.values())
    fn = sum(s["fn"] for s in stats.values())
    precision = tp / (tp + fp) if (tp + fp) else 0.0
    recall = tp / (tp + fn) if (tp + fn) else 0.0
    f1 = 2 * precision * recall / (precision + recall) if (precision + recall) else 0.0

    samples = len(rows)
    return {
        "samples": samples,
        "micro_precision": round(precision, 4),
        "micro_recall": round(recall, 4),
        "micro_f1": round(f1, 4),
        "exact_match_rate": round(exact / samples, 4) if samples else 0.0,
        "catalog_order_rate": round(order_ok / samples, 4) if samples else 0.0,
        "misses": {label: s["fn"] for label, s in stats.items() if s["fn"]},
        "false_positives": {label: s["fp"] for label, s in stats.items() if s["fp"]},
    }


def _seed_store(logs: list[dict[str, Any]], now: datetime, tagger: Tagger) -> LogStore:
    payload = [
        {
            "id": f"eval-{idx}",
            "text": str(log["text"]),
            "createdAt": str(log["created_at"]),
            "tagIDs": [],
        }
        for idx, log in enumerate(logs, start=1)
    ]
    kv = MemoryKeyValueStore()
    if payload:
        kv.set(STORAGE_KEY, json.dumps(payload, ensure_ascii=False).encode("utf-8"))
    return LogStore(kv, tagger=tagger, clock=lambda: now)


def answer_metrics(rows: list[dict[str, Any]], tagger: Tagger) -> dict[str, Any]:
    hits = 0
    failures: list[dict[str, str]] = []
    for row in rows:
        now = datetime.fromisoformat(str(row["now"]))
        store = _seed_store(list(row["logs"]), now, tagger)
        answer = LogAssistant(store).answer(str(row["question"]), row.get("language", "en"))
        expected = str(row["expected_contains"])
        if expected in answer:
            hits += 1
        else:
            failures.append({"question": str(row["question"]), "answer": answer, "expected": expected})

    samples = len(rows)
    return {
        "samples": samples,
        "accuracy": round(hits / samples, 4) if samples else 0.0,
        "failures": failures,
    }


def main() -> int:
    parser = argparse.ArgumentParser(description="Evaluate local tagging and answer quality.")
    parser.add_argument(
        "--tagger-labels",
        default="tests/fixtures/gold/tagger_labels.jsonl",
        help="Gold tag sets for free-text entries",
    )
    parser.add_argument(
        "--question-labels",
        default="tests/fixtures/gold/assistant_questions.jsonl",
        help="Gold answers for assistant questions",
    )
    parser.add_argument("--min-micro-f1", type=float, default=0.95)
    parser.add_argument("--min-answer-accuracy", type=float, default=1.0)
    parser.add_argument("--expected-tagger-samples", type=int, default=20)
    parser.add_argument("--expected-question-samples", type=int, default=11)
    parser.add_argument("--enforce", action="store_true", help="Exit non-zero when thresholds fail")
    args = parser.parse_args()

    # Gold labels assume raw-token matching, so no lemma expansion here.
    tagger = Tagger()
    tagging = tagging_metrics(load_jsonl(ROOT / args.tagger_labels), tagger)
    answers = answer_metrics(load_jsonl(ROOT / args.question_labels), tagger)
    report = {
        "tagging": tagging,
        "answers": answers,
        "thresholds": {
            "min_micro_f1": args.min_micro_f1,
            "min_answer_accuracy": args.min_answer_accuracy,
            "expected_tagger_samples": args.expected_tagger_samples,
            "expected_question_samples": args.expected_question_samples,
        },
    }
    print(json.dumps(report, ensure_ascii=False, indent=2))

    if args.enforce:
        if tagging["samples"] != args.expected_tagger_samples:
            return 1
        if answers["samples"] != args.expected_question_samples:
            return 1
        if tagging["micro_f1"] < args.min_micro_f1:
            return 1
        if answers["accuracy"] < args.min_answer_accuracy:
            return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
