"""
Tests for the command-line interface.
"""

import os
import sys
import tempfile
import unittest
from unittest import mock

from click.testing import CliRunner

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))
sys.path.insert(0, os.path.dirname(__file__))

from node_checker import cli
from node_checker.checks import CheckResult
from node_checker.detect import NodeDetectionError
from node_checker.main import NodeReport

from update_builder import build_update, encode_response, flip_bit, with_state_root


def report(url, suitable):
    return NodeReport(
        url=url,
        type="execution",
        results=[
            CheckResult("web3_clientVersion", "Geth/v1.14" if suitable else "timeout", suitable, True),
            CheckResult("colibri suitable", "ok" if suitable else "required checks failed: web3_clientVersion", suitable),
        ],
    )


class TestParseUrls(unittest.TestCase):

    def test_separators(self):
        self.assertEqual(
            cli.parse_urls(["https://a.example,https://b.example", "https://c.example  https://d.example,"]),
            ["https://a.example", "https://b.example", "https://c.example", "https://d.example"],
        )

    def test_symbols(self):
        self.assertEqual(cli.result_symbol(CheckResult("a", "ok", True, True)), "✅")
        self.assertEqual(cli.result_symbol(CheckResult("a", "x", False, True)), "❌")
        self.assertEqual(cli.result_symbol(CheckResult("a", "x", False, False)), "⚠️")


class TestCheckCommand(unittest.TestCase):

    def setUp(self):
        self.runner = CliRunner()

    def test_suitable_node(self):
        with mock.patch.object(cli, "check_node", side_effect=lambda url, **kw: report(url, True)):
            result = self.runner.invoke(cli.cli, ["check", "https://a.example,https://b.example"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("2 of 2 nodes suitable", result.output)

    def test_no_suitable_node(self):
        with mock.patch.object(cli, "check_node", side_effect=lambda url, **kw: report(url, False)):
            result = self.runner.invoke(cli.cli, ["check", "https://a.example"])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("No suitable nodes found", result.output)

    def test_undetected_node(self):
        error = NodeDetectionError("Unable to detect node type")
        with mock.patch.object(cli, "check_node", side_effect=error):
            result = self.runner.invoke(cli.cli, ["check", "https://a.example"])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Unable to detect node type", result.output)


class TestVerifyFileCommand(unittest.TestCase):

    def setUp(self):
        self.runner = CliRunner()
        self.tmpdir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmpdir.cleanup()

    def write(self, content):
        path = os.path.join(self.tmpdir.name, "update.ssz")
        with open(path, "wb") as f:
            f.write(content)
        return path

    def test_valid_file(self):
        path = self.write(encode_response(build_update(seed=21)))
        result = self.runner.invoke(cli.cli, ["verify-file", path])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("ok", result.output)

    def test_tampered_file(self):
        vector = build_update(seed=21)
        path = self.write(encode_response(with_state_root(vector, flip_bit(vector.state_root))))
        result = self.runner.invoke(cli.cli, ["verify-file", path])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("State root mismatch", result.output)


if __name__ == '__main__':
    unittest.main()
