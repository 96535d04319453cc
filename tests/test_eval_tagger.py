import json
import os
import subprocess
import sys
import unittest
from pathlib import Path


ROOT = Path(__file__).resolve().parents[1]
EVAL_SCRIPT = ROOT / "scripts/eval/eval_tagger.py"


class EvalTaggerTest(unittest.TestCase):
    def test_gold_fixtures_meet_thresholds(self) -> None:
        env = dict(os.environ)
        env["GARDEN_LOGBOOK_DISABLE_SPACY"] = "1"
        result = subprocess.run(
            [sys.executable, str(EVAL_SCRIPT), "--enforce"],
            cwd=ROOT,
            capture_output=True,
            text=True,
            env=env,
        )
        self.assertEqual(result.returncode, 0, result.stdout + result.stderr)
        report = json.loads(result.stdout)
        self.assertEqual(report["tagging"]["samples"], 20)
        self.assertGreaterEqual(report["tagging"]["micro_f1"], 0.95)
        self.assertEqual(report["answers"]["samples"], 11)
        self.assertEqual(report["answers"]["accuracy"], 1.0)


if __name__ == "__main__":
    unittest.main()
