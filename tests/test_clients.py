"""
Tests for the node HTTP clients with a mocked requests session.
"""

import os
import sys
import unittest
from unittest import mock

import requests

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from node_checker.api import (
    BeaconLightClientTransport,
    BeaconNodeClient,
    ExecutionNodeClient,
    NodeAPIError,
    NodeHTTPClient,
    NodeTimeoutError,
    ProverNodeClient,
    format_error_message,
    normalize_url,
)


def make_response(status_code=200, json_data=None, text="", content=b"", headers=None):
    response = mock.Mock()
    response.status_code = status_code
    response.text = text
    response.content = content
    response.headers = headers or {}
    if json_data is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = json_data
    return response


def make_session(*responses):
    session = mock.Mock(spec=requests.Session)
    session.request.side_effect = list(responses)
    return session


class TestHelpers(unittest.TestCase):

    def test_format_json_error(self):
        body = '{"jsonrpc":"2.0","error":{"code":-32601,"message":"method not found"}}'
        self.assertEqual(format_error_message(body), "method not found (code: -32601)")

    def test_format_beacon_error(self):
        self.assertEqual(format_error_message('{"code":404,"message":"not found"}'), "not found (code: 404)")

    def test_format_html_error(self):
        body = "<html><head><title>x</title></head><body><h1>502 Bad Gateway</h1>\n<p>nginx</p></body></html>"
        self.assertEqual(format_error_message(body), "502 Bad Gateway nginx")

    def test_format_plain(self):
        self.assertEqual(format_error_message("plain"), "plain")

    def test_normalize_url(self):
        self.assertEqual(normalize_url(" https://node.example/ "), "https://node.example")
        with self.assertRaises(ValueError):
            normalize_url("   ")


class TestNodeHTTPClient(unittest.TestCase):

    def test_timeout(self):
        session = mock.Mock(spec=requests.Session)
        session.request.side_effect = requests.Timeout()
        client = NodeHTTPClient("https://node.example", timeout=7, session=session)
        with self.assertRaises(NodeTimeoutError) as ctx:
            client.request("GET", "/x")
        self.assertEqual(str(ctx.exception), "Request timed out after 7 seconds")

    def test_connection_error(self):
        session = mock.Mock(spec=requests.Session)
        session.request.side_effect = requests.ConnectionError("refused")
        client = NodeHTTPClient("https://node.example", session=session)
        with self.assertRaisesRegex(NodeAPIError, "Failed to connect"):
            client.request("GET")

    def test_avg_time(self):
        client = NodeHTTPClient("https://node.example", session=make_session())
        self.assertEqual(client.avg_time, "0.00 ms")
        client.req_count, client.req_time = 4, 50.0
        self.assertEqual(client.avg_time, "12.50 ms")

    def test_counts_requests(self):
        session = make_session(make_response(), make_response())
        client = NodeHTTPClient("https://node.example/", timeout=3, session=session)
        client.request("GET", "/a")
        client.request("GET", "/b")
        self.assertEqual(client.req_count, 2)
        session.request.assert_called_with("GET", "https://node.example/b", timeout=3)


class TestBeaconNodeClient(unittest.TestCase):

    def test_get_version(self):
        session = make_session(make_response(json_data={"data": {"version": "Lodestar/v1.20.0"}}))
        client = BeaconNodeClient("https://beacon.example", session=session)
        self.assertEqual(client.get_version(), "Lodestar/v1.20.0")

    def test_missing_data(self):
        session = make_session(make_response(json_data={"oops": 1}))
        with self.assertRaisesRegex(NodeAPIError, "missing 'data'"):
            BeaconNodeClient("https://beacon.example", session=session).get_head_header()

    def test_http_error(self):
        session = make_session(make_response(status_code=404, text='{"code":404,"message":"Not found"}'))
        with self.assertRaises(NodeAPIError) as ctx:
            BeaconNodeClient("https://beacon.example", session=session).get_version()
        self.assertEqual(ctx.exception.status_code, 404)
        self.assertEqual(str(ctx.exception), "Not found (code: 404)")

    def test_ssz(self):
        session = make_session(make_response(content=b"\x01\x02", headers={"Content-Type": "application/octet-stream"}))
        client = BeaconNodeClient("https://beacon.example", session=session)
        self.assertEqual(client.get_light_client_updates_ssz(5), b"\x01\x02")
        _, kwargs = session.request.call_args
        self.assertEqual(kwargs["params"], {"start_period": 5, "count": 1})
        self.assertEqual(kwargs["headers"]["Accept"], "application/octet-stream")

    def test_ssz_json_delivered(self):
        session = make_session(make_response(json_data=[{"data": {}}], headers={"Content-Type": "application/json"}))
        with self.assertRaisesRegex(NodeAPIError, "SSZ requested, but json delivered"):
            BeaconNodeClient("https://beacon.example", session=session).get_block_ssz()

    def test_ssz_not_supported(self):
        session = make_session(make_response(headers={"Content-Type": "text/plain"}))
        with self.assertRaisesRegex(NodeAPIError, "SSZ not supported"):
            BeaconNodeClient("https://beacon.example", session=session).get_block_ssz()

    def test_transport_returns_data(self):
        data = {"attested_header": {}}
        session = make_session(make_response(json_data=[{"version": "electra", "data": data}]))
        transport = BeaconLightClientTransport(BeaconNodeClient("https://beacon.example", session=session))
        self.assertEqual(transport.fetch_json_update(9), data)

    def test_transport_empty_response(self):
        session = make_session(make_response(json_data=[]))
        transport = BeaconLightClientTransport(BeaconNodeClient("https://beacon.example", session=session))
        with self.assertRaises(NodeAPIError):
            transport.fetch_json_update(9)


class TestExecutionNodeClient(unittest.TestCase):

    def test_rpc_ids_increment(self):
        session = make_session(
            make_response(json_data={"jsonrpc": "2.0", "id": 1, "result": "Geth/v1.14"}),
            make_response(json_data={"jsonrpc": "2.0", "id": 2, "result": "0x10"}),
        )
        client = ExecutionNodeClient("https://rpc.example", session=session)
        self.assertEqual(client.get_client_version(), "Geth/v1.14")
        self.assertEqual(client.get_block_number(), 16)
        ids = [c.kwargs["json"]["id"] for c in session.request.call_args_list]
        self.assertEqual(ids, [1, 2])

    def test_rpc_error(self):
        session = make_session(make_response(json_data={"error": {"code": -32601, "message": "method not found"}}))
        with self.assertRaises(NodeAPIError) as ctx:
            ExecutionNodeClient("https://rpc.example", session=session).rpc("debug_traceCall")
        self.assertEqual(str(ctx.exception), "RPC Error: method not found (code: -32601)")

    def test_http_error(self):
        session = make_session(make_response(status_code=403, text="forbidden"))
        with self.assertRaisesRegex(NodeAPIError, "HTTP Error 403: forbidden"):
            ExecutionNodeClient("https://rpc.example", session=session).rpc("eth_blockNumber")


class TestProverNodeClient(unittest.TestCase):

    def test_version(self):
        session = make_session(make_response(json_data={"vendor": "colibri", "version": "1.0"}))
        self.assertEqual(ProverNodeClient("https://prover.example", session=session).get_version()["vendor"], "colibri")

    def test_proof(self):
        session = make_session(make_response(content=b"\x00" * 668, headers={"Content-Type": "application/octet-stream"}))
        client = ProverNodeClient("https://prover.example", session=session)
        self.assertEqual(len(client.proof(False)), 668)
        _, kwargs = session.request.call_args
        self.assertEqual(kwargs["json"], {"method": "eth_blockNumber", "params": [], "zk_proof": False})

    def test_proof_wrong_content_type(self):
        session = make_session(make_response(text="hello", headers={"Content-Type": "text/html"}))
        with self.assertRaisesRegex(NodeAPIError, "Unexpected content-type"):
            ProverNodeClient("https://prover.example", session=session).proof(True)

    def test_http_error_prefix(self):
        session = make_session(make_response(status_code=500, text="internal"))
        with self.assertRaisesRegex(NodeAPIError, "HTTP 500: internal"):
            ProverNodeClient("https://prover.example", session=session).get_version()


if __name__ == '__main__':
    unittest.main()
