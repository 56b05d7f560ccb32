"""
Unit tests for the rule file writer.
"""
import json
import tempfile
import unittest
from datetime import date
from pathlib import Path

import pandas as pd

from rule_harvester.models import Rule
from rule_harvester.output_generation import (
    RuleFileWriter, build_export_data, export_filename, serialize_export_data
)

EXPECTED_JSON = (
    '[\n'
    '  {\n'
    '    "title": "T1",\n'
    '    "description": "D1"\n'
    '  },\n'
    '  {\n'
    '    "title": "T2",\n'
    '    "description": "D2"\n'
    '  }\n'
    ']'
)


class TestSerialization(unittest.TestCase):

    def setUp(self):
        self.rules = [
            Rule(title="T1", description="D1"),
            Rule(title="T2", description="D2"),
        ]

    def test_export_data_strips_ids(self):
        serialized = serialize_export_data(build_export_data(self.rules))

        self.assertEqual(json.loads(serialized), [
            {"title": "T1", "description": "D1"},
            {"title": "T2", "description": "D2"},
        ])
        self.assertNotIn('"id"', serialized)

    def test_serialize_uses_two_space_indent(self):
        self.assertEqual(serialize_export_data(build_export_data(self.rules)), EXPECTED_JSON)

    def test_export_filename(self):
        self.assertEqual(export_filename(today=date(2025, 1, 31)), "rules-export-2025-01-31.json")
        self.assertEqual(export_filename("csv", date(2025, 1, 31)), "rules-export-2025-01-31.csv")


class TestRuleFileWriter(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)
        self.outputs_dir = Path(self.temp_dir.name) / "outputs"
        self.writer = RuleFileWriter(self.outputs_dir)
        self.export_data = build_export_data([
            Rule(title="Access reviews", description="Review access quarterly."),
            Rule(title="Encryption", description="Encrypt data at rest, always."),
        ])

    def test_write_json_creates_directory(self):
        path = self.writer.write_json(self.export_data, "rules.json")

        self.assertEqual(path, self.outputs_dir / "rules.json")
        self.assertEqual(json.loads(path.read_text(encoding='utf-8')), self.export_data)

    def test_write_json_matches_serialized_text(self):
        export_data = build_export_data([
            Rule(title="T1", description="D1"),
            Rule(title="T2", description="D2"),
        ])

        path = self.writer.write(export_data, "rules.json")

        self.assertEqual(path.read_text(encoding='utf-8'), EXPECTED_JSON)

    def test_write_csv(self):
        path = self.writer.write(self.export_data, "rules.csv")

        df = pd.read_csv(path)
        self.assertEqual(list(df.columns), ["title", "description"])
        self.assertEqual(df["description"].tolist()[1], "Encrypt data at rest, always.")


if __name__ == '__main__':
    unittest.main()
