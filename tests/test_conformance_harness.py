"""Conformance harness tests with stubbed Omni Core clients."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "conformance" / "harness"))

from comparator import ResultComparator, first_difference  # noqa: E402
from config import HarnessConfig  # noqa: E402
from runner import ConformanceHarness, find_vector_files  # noqa: E402

from tools.yaml_dump import write_yaml  # noqa: E402

_EXPECTED = "0000004600000003"


class _StubClient:
    def __init__(self, answer):
        self.answer = answer
        self.calls = []

    async def create_payload(self, method, params):
        self.calls.append((method, params))
        return self.answer

    async def close(self) -> None:
        pass


def _vector(name: str = "change_issuer") -> dict:
    return {
        "name": name,
        "rpc": {"method": "omni_createpayload_changeissuer", "params": [3]},
        "expected_hex": _EXPECTED,
    }


def _harness(tmp_path: Path, **clients) -> ConformanceHarness:
    harness = ConformanceHarness(HarnessConfig(result_dir=str(tmp_path / "results")))
    harness.clients = clients
    return harness


def test_first_difference() -> None:
    assert first_difference("0011", "0011") is None
    assert first_difference("0011", "0012") == 1
    assert first_difference("0011", "00") == 1
    assert first_difference("0011", "zz") == 0


def test_comparator_flags_mismatch_and_errors() -> None:
    result = ResultComparator().compare_payloads(
        _EXPECTED,
        {
            "a": {"success": True, "payload_hex": _EXPECTED.upper()},
            "b": {"success": True, "payload_hex": "0000004600000004"},
            "c": {"success": False, "error": "Property identifier does not exist"},
        },
        "change_issuer",
    )
    assert not result.success
    assert [(d.client, d.field) for d in result.divergences] == [("b", "payload_hex"), ("c", "success")]
    assert result.divergences[0].details == "First differing byte at offset 7"
    assert result.clients_compared == ["omni-spec", "a", "b", "c"]


def test_run_vector_passes_on_identical_payload(tmp_path: Path) -> None:
    node = _StubClient({"success": True, "payload_hex": _EXPECTED})
    harness = _harness(tmp_path, omnicore=node)

    result = asyncio.run(harness.run_vector(_vector()))

    assert result.passed
    assert node.calls == [("omni_createpayload_changeissuer", [3])]


def test_run_vector_rejects_incomplete_vector(tmp_path: Path) -> None:
    harness = _harness(tmp_path, omnicore=_StubClient({"success": True, "payload_hex": ""}))
    result = asyncio.run(harness.run_vector({"name": "broken"}))
    assert not result.passed
    assert result.error


def test_run_all_writes_reports(tmp_path: Path) -> None:
    suite = tmp_path / "vectors" / "payloads" / "createpayload.yaml"
    write_yaml(
        suite,
        {"test_vectors": [_vector(), _vector("skipped") | {"runnable": False}, _vector("second")]},
    )
    harness = _harness(tmp_path, omnicore=_StubClient({"success": True, "payload_hex": "00"}))

    files = find_vector_files(str(tmp_path / "vectors"))
    assert files == [str(suite)]

    report = asyncio.run(harness.run_all(files))
    assert report.total_tests == 2
    assert report.total_failed == 2
    assert report.suite_results[0].skipped_tests == 1

    path = harness.reporter.write_json_report(report)
    data = json.loads(Path(path).read_text())
    assert data["total_failed"] == 2
    assert data["divergences"][0]["field"] == "payload_hex"
    summary = Path(harness.reporter.write_summary(report)).read_text()
    assert "Overall: FAILED" in summary


def test_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OMNICORE_ENDPOINT", "http://node:8332")
    monkeypatch.setenv("OMNICORE_RPC_USER", "alice")
    monkeypatch.setenv("OMNICORE_RPC_PASSWORD", "secret")
    monkeypatch.setenv("STOP_ON_FIRST_FAILURE", "yes")
    monkeypatch.delenv("OMNICORE_ALT_ENDPOINT", raising=False)

    config = HarnessConfig.from_env()

    assert list(config.get_enabled_clients()) == ["omnicore"]
    node = config.clients["omnicore"]
    assert (node.endpoint, node.rpc_user, node.rpc_password) == ("http://node:8332", "alice", "secret")
    assert config.stop_on_first_failure


def test_config_alt_node(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OMNICORE_ALT_ENDPOINT", "http://alt:8332")
    config = HarnessConfig.from_env()
    assert set(config.clients) == {"omnicore", "omnicore-alt"}
