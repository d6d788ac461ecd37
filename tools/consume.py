"""Consume fixtures and replay them through the payload builders."""

from __future__ import annotations

import json
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT / "src"))
sys.path.insert(0, str(ROOT))

from omni_spec.encoding import decode_payload, payload_from_hex  # noqa: E402
from omni_spec.errors import SpecError  # noqa: E402
from omni_spec.payloads import create_payload  # noqa: E402
from tools.fixtures_io import vector_from_json  # noqa: E402


def _check_wire_vectors(path: Path) -> list[str]:
    failures: list[str] = []
    data = json.loads(path.read_text())
    for vec in data.get("vectors", []):
        name, kind, call, expected_hex = vector_from_json(vec)
        try:
            encoded = create_payload(kind, **call)
        except SpecError as exc:
            failures.append(f"{name}: {exc}")
            continue
        if encoded != expected_hex:
            failures.append(f"{name}: wire_mismatch")
            continue
        if decode_payload(payload_from_hex(encoded)).kind != kind:
            failures.append(f"{name}: decode_kind_mismatch")
    return failures


def _check_decode_vectors(path: Path) -> list[str]:
    failures: list[str] = []
    data = json.loads(path.read_text())
    for vec in data.get("test_vectors", []):
        name = vec["name"]
        expected_error = vec["expected"]["error"]
        try:
            decode_payload(payload_from_hex(vec["input"]["payload_hex"]))
        except SpecError as exc:
            if exc.code.name != expected_error:
                failures.append(f"{name}: error_mismatch")
            continue
        failures.append(f"{name}: expected_failure")
    return failures


def main() -> None:
    fixtures = ROOT / "fixtures"

    failures: list[str] = []

    wire = fixtures / "wire_format.json"
    if wire.exists():
        failures.extend(_check_wire_vectors(wire))

    negative = fixtures / "payloads" / "decode_negative.json"
    if negative.exists():
        failures.extend(_check_decode_vectors(negative))

    if failures:
        for f in failures:
            print("FAIL", f)
        raise SystemExit(1)

    print("All fixtures passed")


if __name__ == "__main__":
    main()
