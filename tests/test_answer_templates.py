import sys
import unittest
from datetime import datetime, timezone
from pathlib import Path


ROOT = Path(__file__).resolve().parents[1]
ENGINE_DIR = ROOT / "apps/engine"
if str(ENGINE_DIR) not in sys.path:
    sys.path.insert(0, str(ENGINE_DIR))

import answer_templates  # noqa: E402
from answer_templates import Plural, check_templates, format_date, missing_templates, render  # noqa: E402


class AnswerTemplatesTest(unittest.TestCase):
    def test_every_scenario_has_both_languages(self) -> None:
        self.assertEqual(missing_templates(), [])
        check_templates()

    def test_check_reports_missing_locale(self) -> None:
        saved = answer_templates.TEMPLATES.pop(("no_match", "es"))
        try:
            with self.assertRaises(ValueError) as ctx:
                check_templates()
            self.assertIn("no_match/es", str(ctx.exception))
        finally:
            answer_templates.TEMPLATES[("no_match", "es")] = saved

    def test_no_unknown_scenarios(self) -> None:
        scenarios = {scenario for scenario, _ in answer_templates.TEMPLATES}
        self.assertEqual(scenarios, set(answer_templates.SCENARIOS))

    def test_plural_selection(self) -> None:
        self.assertEqual(render("tree_count", "en", count=1), "Your logs mention 1 tree.")
        self.assertEqual(render("tree_count", "en", count=3), "Your logs mention 3 trees.")
        self.assertEqual(render("occurrence_count", "es", count=1), "Ocurrió 1 vez.")
        self.assertEqual(render("occurrence_count", "es", count=4), "Ocurrió 4 veces.")
        self.assertEqual(Plural("a", "b").pick(0), "b")

    def test_fields_are_not_reformatted(self) -> None:
        text = render("most_recent", "en", date="Oct 1, 2026", text="{weird} text", tags="")
        self.assertEqual(text, 'Most recent log, Oct 1, 2026: "{weird} text"')

    def test_format_date(self) -> None:
        value = datetime(2026, 10, 19, 8, 30, tzinfo=timezone.utc)
        self.assertEqual(format_date(value, "en"), "Oct 19, 2026")
        self.assertEqual(format_date(value, "es"), "19 oct 2026")


if __name__ == "__main__":
    unittest.main()
