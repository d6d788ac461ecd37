#!/usr/bin/env python3
"""Convert payload fixtures into client-consumable YAML vectors.

Payload fixtures become createpayload vectors carrying the Omni Core RPC
method and params that must produce the recorded hex. Decode-negative
fixtures are mirrored for decoder implementations and marked non-runnable,
since Omni Core exposes no payload-decoding RPC.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT / "src"))
sys.path.insert(0, str(ROOT))

from omni_spec.rpc_adapter import to_rpc_request  # noqa: E402
from tools.fixtures_io import vector_from_json  # noqa: E402
from tools.yaml_dump import write_yaml  # noqa: E402


def payload_vectors(data: dict[str, Any]) -> list[dict[str, Any]]:
    out = []
    for vec in data.get("vectors", []):
        name, kind, call, expected_hex = vector_from_json(vec)
        method, params = to_rpc_request(kind, call)
        out.append(
            {
                "name": name,
                "kind": kind.value,
                "call": vec.get("call", {}),
                "rpc": {"method": method, "params": params},
                "expected_hex": expected_hex,
            }
        )
    return out


def decode_vectors(data: dict[str, Any]) -> list[dict[str, Any]]:
    return [dict(vec, runnable=False) for vec in data.get("test_vectors", [])]


def main() -> None:
    parser = argparse.ArgumentParser(description="Convert fixtures to vectors")
    parser.add_argument("--fixtures", default=str(ROOT / "fixtures"))
    parser.add_argument("--vectors", default=str(ROOT / "vectors"))
    args = parser.parse_args()

    fixtures = Path(args.fixtures).resolve()
    vectors = Path(args.vectors).resolve()

    if not fixtures.exists():
        raise SystemExit(f"fixtures dir not found: {fixtures}")

    count = 0

    wire = fixtures / "wire_format.json"
    if wire.exists():
        out = payload_vectors(json.loads(wire.read_text()))
        write_yaml(vectors / "payloads" / "createpayload.yaml", {"test_vectors": out})
        count += 1

    negative = fixtures / "payloads" / "decode_negative.json"
    if negative.exists():
        out = decode_vectors(json.loads(negative.read_text()))
        write_yaml(vectors / "payloads" / "decode_negative.yaml", {"test_vectors": out})
        count += 1

    print(f"Written {count} vector files into {vectors}")


if __name__ == "__main__":
    main()
