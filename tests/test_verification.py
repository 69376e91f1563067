"""
Tests for light client update verification, single update and history.
"""

import os
import sys
import threading
import unittest
from unittest import mock

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))
sys.path.insert(0, os.path.dirname(__file__))

from node_checker import config
from node_checker.api import NodeTimeoutError, StaticTransport
from node_checker.constants import FORKS
from node_checker.ssz import BranchLengthError, SSZDecodeError, decode_light_client_update
from node_checker.verification import (
    HistoricalPeriodError,
    StateRootMismatchError,
    VerificationCancelled,
    verify_from_binary,
    verify_from_json,
    verify_update,
)

from update_builder import (
    build_history,
    build_update,
    encode_response,
    encode_update,
    flip_bit,
    to_json,
    with_state_root,
)

CURRENT_PERIOD = 1500


class TestVerifyFromBinary(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.vector = build_update(seed=3, period=CURRENT_PERIOD)

    def test_valid_update(self):
        self.assertEqual(verify_from_binary(encode_response(self.vector)), "ok")

    def test_valid_unwrapped_update(self):
        self.assertEqual(verify_from_binary(encode_update(self.vector), wrapped=False), "ok")

    def test_mutated_state_root(self):
        tampered = with_state_root(self.vector, flip_bit(self.vector.state_root, 31))
        with self.assertRaises(StateRootMismatchError) as ctx:
            verify_from_binary(encode_response(tampered))
        self.assertEqual(ctx.exception.expected, tampered.state_root)
        self.assertEqual(ctx.exception.calculated, self.vector.state_root)
        self.assertIn("0x" + self.vector.state_root.hex(), str(ctx.exception))

    def test_mutated_pubkey(self):
        pubkeys = list(self.vector.pubkeys)
        pubkeys[200] = flip_bit(pubkeys[200], 5)
        tampered = build_update(seed=3, period=CURRENT_PERIOD)
        tampered.pubkeys = pubkeys
        with self.assertRaises(StateRootMismatchError):
            verify_from_binary(encode_response(tampered))

    def test_wrong_fork_layout(self):
        with self.assertRaises(StateRootMismatchError):
            verify_from_binary(encode_response(self.vector), fork=FORKS["altair"])

    def test_truncated(self):
        with self.assertRaises(SSZDecodeError):
            verify_from_binary(encode_response(self.vector)[:5000])

    def test_branch_length_must_match_gindex(self):
        update = decode_light_client_update(encode_update(self.vector), fork=FORKS["altair"])
        with self.assertRaises(BranchLengthError):
            verify_update(update, FORKS["electra"])

    def test_altair_update(self):
        vector = build_update(seed=4, period=10, gindex=55)
        self.assertEqual(verify_from_binary(encode_response(vector), fork=FORKS["altair"]), "ok")


class TestVerifyFromJson(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.history = build_history(CURRENT_PERIOD, 21)

    def test_full_history(self):
        transport = StaticTransport(json_updates=self.history)
        self.assertEqual(verify_from_json(transport, CURRENT_PERIOD), "ok (21 periods)")
        self.assertEqual(transport.requested, [CURRENT_PERIOD - i for i in range(21)])

    def test_tampered_period_reports_offset(self):
        history = dict(self.history)
        tampered = to_json(build_update(seed=5, period=CURRENT_PERIOD - 5))
        tampered["attested_header"]["beacon"]["state_root"] = "0x" + "11" * 32
        history[CURRENT_PERIOD - 5] = tampered
        transport = StaticTransport(json_updates=history)

        with self.assertRaises(HistoricalPeriodError) as ctx:
            verify_from_json(transport, CURRENT_PERIOD)

        self.assertEqual(ctx.exception.offset, 5)
        self.assertEqual(ctx.exception.period, CURRENT_PERIOD - 5)
        self.assertIsInstance(ctx.exception.cause, StateRootMismatchError)
        self.assertIn("period offset 5", str(ctx.exception))
        self.assertTrue(str(ctx.exception).startswith("Invalid Merkle Proof"))
        # stops at the first failure
        self.assertEqual(len(transport.requested), 6)

    def test_tampered_branch_entry_reports_offset(self):
        history = dict(self.history)
        tampered = to_json(build_update(seed=5, period=CURRENT_PERIOD - 5))
        branch = tampered["next_sync_committee_branch"]
        branch[3] = "0x" + flip_bit(bytes.fromhex(branch[3][2:]), 17).hex()
        history[CURRENT_PERIOD - 5] = tampered
        transport = StaticTransport(json_updates=history)

        with self.assertRaises(HistoricalPeriodError) as ctx:
            verify_from_json(transport, CURRENT_PERIOD)

        self.assertEqual(ctx.exception.offset, 5)
        self.assertIsInstance(ctx.exception.cause, StateRootMismatchError)
        self.assertTrue(str(ctx.exception).startswith("Invalid Merkle Proof at period offset 5"))
        self.assertEqual(transport.requested, [CURRENT_PERIOD - i for i in range(6)])

    def test_missing_period(self):
        history = dict(self.history)
        del history[CURRENT_PERIOD - 2]
        with self.assertRaises(HistoricalPeriodError) as ctx:
            verify_from_json(StaticTransport(json_updates=history), CURRENT_PERIOD)
        self.assertEqual(ctx.exception.offset, 2)
        self.assertTrue(str(ctx.exception).startswith("Failed to fetch update at period offset 2"))

    def test_malformed_period(self):
        history = dict(self.history)
        history[CURRENT_PERIOD - 1] = {"attested_header": {}}
        with self.assertRaises(HistoricalPeriodError) as ctx:
            verify_from_json(StaticTransport(json_updates=history), CURRENT_PERIOD)
        self.assertIsInstance(ctx.exception.cause, SSZDecodeError)
        self.assertTrue(str(ctx.exception).startswith("Invalid update at period offset 1"))

    def test_custom_depth(self):
        transport = StaticTransport(json_updates=self.history)
        self.assertEqual(verify_from_json(transport, CURRENT_PERIOD, depth=3), "ok (3 periods)")
        self.assertEqual(len(transport.requested), 3)

    def test_depth_from_config(self):
        transport = StaticTransport(json_updates=self.history)
        with mock.patch.object(config, "HISTORY_DEPTH", 2):
            self.assertEqual(verify_from_json(transport, CURRENT_PERIOD), "ok (2 periods)")

    def test_invalid_depth(self):
        with self.assertRaises(ValueError):
            verify_from_json(StaticTransport(json_updates=self.history), CURRENT_PERIOD, depth=0)

    def test_periods_before_genesis_skipped(self):
        history = build_history(3, 4)
        transport = StaticTransport(json_updates=history)
        self.assertEqual(verify_from_json(transport, 3), "ok (4 periods)")
        self.assertEqual(transport.requested, [3, 2, 1, 0])

    def test_cancelled_before_start(self):
        event = threading.Event()
        event.set()
        transport = StaticTransport(json_updates=self.history)
        with self.assertRaises(VerificationCancelled):
            verify_from_json(transport, CURRENT_PERIOD, cancel_event=event)
        self.assertEqual(transport.requested, [])

    def test_cancelled_between_periods(self):
        event = threading.Event()

        class CancellingTransport(StaticTransport):
            def fetch_json_update(self, period):
                data = super().fetch_json_update(period)
                if len(self.requested) == 3:
                    event.set()
                return data

        transport = CancellingTransport(json_updates=self.history)
        with self.assertRaises(VerificationCancelled):
            verify_from_json(transport, CURRENT_PERIOD, cancel_event=event)
        self.assertEqual(len(transport.requested), 3)

    def test_transport_timeout(self):
        transport = mock.Mock()
        transport.fetch_json_update.side_effect = NodeTimeoutError("Request timed out after 7 seconds")
        with self.assertRaises(HistoricalPeriodError) as ctx:
            verify_from_json(transport, CURRENT_PERIOD)
        self.assertEqual(ctx.exception.offset, 0)
        self.assertIn("Request timed out after 7 seconds", str(ctx.exception))
        self.assertTrue(str(ctx.exception).startswith("Timed out fetching update at period offset 0"))
        self.assertNotIn("Merkle", str(ctx.exception))
        transport.fetch_json_update.assert_called_once_with(CURRENT_PERIOD)


if __name__ == '__main__':
    unittest.main()
