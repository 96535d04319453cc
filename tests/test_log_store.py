import json
import sys
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path


ROOT = Path(__file__).resolve().parents[1]
ENGINE_DIR = ROOT / "apps/engine"
if str(ENGINE_DIR) not in sys.path:
    sys.path.insert(0, str(ENGINE_DIR))

from kv_runtime import MemoryKeyValueStore  # noqa: E402
from log_store import (  # noqa: E402
    STORAGE_KEY,
    LogStore,
    reconcile_tags_from_text,
)
from tagger import Tagger  # noqa: E402


T0 = datetime(2026, 10, 10, 9, 0, tzinfo=timezone.utc)


class SteppingClock:
    def __init__(self, start: datetime, step: timedelta = timedelta(hours=1)) -> None:
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + self.step
        return value


class LogStoreTest(unittest.TestCase):
    def setUp(self) -> None:
        self.kv = MemoryKeyValueStore()
        self.store = LogStore(self.kv, clock=SteppingClock(T0))

    def persisted(self) -> list[dict]:
        return json.loads(self.kv.get(STORAGE_KEY).decode("utf-8"))

    def test_blank_text_is_ignored(self) -> None:
        self.assertIsNone(self.store.add_log("   \n "))
        self.assertEqual(len(self.store), 0)
        self.assertIsNone(self.kv.get(STORAGE_KEY))

    def test_add_log_trims_tags_and_persists(self) -> None:
        entry = self.store.add_log("  Today I watered the lemon tree  ")
        self.assertIsNotNone(entry)
        self.assertEqual(entry.text, "Today I watered the lemon tree")
        self.assertEqual(entry.created_at, T0)
        self.assertEqual(entry.tag_ids, ("riego", "arbol", "limon"))

        rows = self.persisted()
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]["id"], entry.id)
        self.assertEqual(rows[0]["text"], entry.text)
        self.assertEqual(rows[0]["tagIDs"], ["riego", "arbol", "limon"])
        self.assertEqual(datetime.fromisoformat(rows[0]["createdAt"]), T0)

    def test_ids_are_unique(self) -> None:
        first = self.store.add_log("one")
        second = self.store.add_log("two")
        self.assertNotEqual(first.id, second.id)

    def test_sorted_logs_most_recent_first(self) -> None:
        first = self.store.add_log("first")
        second = self.store.add_log("second")
        self.assertEqual([e.id for e in self.store.logs], [first.id, second.id])
        self.assertEqual([e.id for e in self.store.sorted_logs], [second.id, first.id])

        self.store.update_log_date(first.id, T0 + timedelta(days=5))
        self.assertEqual([e.id for e in self.store.sorted_logs], [first.id, second.id])
        self.assertEqual(self.store.log(first.id).text, "first")

    def test_delete_log(self) -> None:
        entry = self.store.add_log("Watered the lettuce")
        self.store.delete_log("missing-id")
        self.assertEqual(len(self.store), 1)
        self.store.delete_log(entry.id)
        self.assertEqual(len(self.store), 0)
        self.assertEqual(self.persisted(), [])

    def test_add_then_remove_tag_restores_tags(self) -> None:
        entry = self.store.add_log("Today I watered the lemon tree")
        before = self.store.log(entry.id).tag_ids

        self.store.add_tag("Mi Etiqueta", entry.id)
        self.assertEqual(self.store.log(entry.id).tag_ids, before + ("mi etiqueta",))

        self.store.remove_tag("Mi Etiqueta", entry.id)
        self.assertEqual(self.store.log(entry.id).tag_ids, before)

    def test_add_tag_edge_cases(self) -> None:
        entry = self.store.add_log("Watered the lettuce")
        before = self.store.log(entry.id).tag_ids

        self.store.add_tag("riego", entry.id)
        self.store.add_tag("  !! ", entry.id)
        self.store.add_tag("poda", "missing-id")
        self.assertEqual(self.store.log(entry.id).tag_ids, before)

    def test_remove_tag_unknown_log_is_noop(self) -> None:
        self.store.remove_tag("riego", "missing-id")
        self.assertIsNone(self.kv.get(STORAGE_KEY))

    def test_update_log_date_unknown_log_is_noop(self) -> None:
        entry = self.store.add_log("Watered the lettuce")
        self.store.update_log_date("missing-id", T0 + timedelta(days=3))
        self.assertEqual(self.store.log(entry.id).created_at, T0)

    def test_reload_recomputes_tags_from_text(self) -> None:
        entry = self.store.add_log("Today I watered the lemon tree")
        self.store.add_tag("favorito", entry.id)
        self.store.remove_tag("riego", entry.id)
        self.assertEqual(self.store.log(entry.id).tag_ids, ("arbol", "limon", "favorito"))

        reloaded = LogStore(self.kv)
        self.assertEqual(reloaded.log(entry.id).tag_ids, ("riego", "arbol", "limon"))
        self.assertEqual(self.persisted()[0]["tagIDs"], ["riego", "arbol", "limon"])

    def test_reload_without_reconcile_keeps_custom_tags(self) -> None:
        entry = self.store.add_log("Today I watered the lemon tree")
        self.store.add_tag("favorito", entry.id)

        reloaded = LogStore(self.kv, reconcile_on_load=False)
        self.assertIn("favorito", reloaded.log(entry.id).tag_ids)

    def test_reconcile_tags_from_text(self) -> None:
        entry = self.store.add_log("Compré limones")
        self.store.add_tag("mercado", entry.id)
        reconciled = reconcile_tags_from_text(self.store.logs, Tagger())
        self.assertEqual(reconciled[0].tag_ids, ("limon",))
        self.assertEqual(reconciled[0].id, entry.id)

    def test_malformed_payload_resets_to_empty(self) -> None:
        for payload in (b"not json", b'{"id": "x"}', b'[{"id": 1}]', b'[{"id": "a", "text": "t", "createdAt": "soon", "tagIDs": []}]'):
            kv = MemoryKeyValueStore({STORAGE_KEY: payload})
            with self.assertLogs("log_store", level="WARNING"):
                store = LogStore(kv)
            self.assertEqual(store.logs, [])
            self.assertEqual(kv.get(STORAGE_KEY), b"[]")

    def test_reference_epoch_timestamps(self) -> None:
        payload = [{"id": "legacy", "text": "Regué el árbol", "createdAt": 0, "tagIDs": []}]
        kv = MemoryKeyValueStore({STORAGE_KEY: json.dumps(payload).encode("utf-8")})
        store = LogStore(kv)
        entry = store.log("legacy")
        self.assertEqual(entry.created_at, datetime(2001, 1, 1, tzinfo=timezone.utc))
        self.assertEqual(entry.tag_ids, ("arbol",))

    def test_available_tag_ids_sorted_by_name(self) -> None:
        entry = self.store.add_log("Today I watered the lemon tree")
        self.store.add_tag("zeta", entry.id)
        self.assertEqual(self.store.available_tag_ids("en"), ["riego", "limon", "arbol", "zeta"])
        self.assertEqual(self.store.available_tag_ids("es"), ["arbol", "limon", "riego", "zeta"])

    def test_all_suggested_tag_ids(self) -> None:
        suggested = self.store.all_suggested_tag_ids("en")
        self.assertEqual(len(suggested), len(self.store.tagger.catalog))
        self.assertEqual(suggested[:3], ["manzana", "frijol", "zanahoria"])

    def test_suggested_tag_ids_for_excludes_current(self) -> None:
        entry = self.store.add_log("Watered the lettuce")
        suggested = self.store.suggested_tag_ids_for(entry.id, "en")
        self.assertNotIn("riego", suggested)
        self.assertNotIn("lechuga", suggested)
        self.assertIn("poda", suggested)

    def test_localized_tags_drop_unknown_ids(self) -> None:
        entry = self.store.add_log("Watered the lettuce")
        self.store.add_tag("zeta", entry.id)
        self.assertEqual(self.store.localized_tags(self.store.log(entry.id), "es"), ["Riego", "Lechuga"])

    def test_logs_with_tag(self) -> None:
        first = self.store.add_log("Watered the lettuce")
        self.store.add_log("Pruned the apple tree")
        third = self.store.add_log("Watered the garden")
        self.assertEqual([e.id for e in self.store.logs_with_tag("riego")], [third.id, first.id])


if __name__ == "__main__":
    unittest.main()
