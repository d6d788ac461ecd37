#!/usr/bin/env python3
"""
Omni Payload Conformance Runner

Replays payload vectors against Omni Core nodes through the
omni_createpayload_* RPCs and compares the returned hex byte for byte.
"""

import asyncio
import glob
import logging
import os
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import aiohttp
import click
import yaml

from comparator import ResultComparator
from config import ClientConfig, HarnessConfig
from reporter import ConformanceReport, ReportGenerator, SuiteResult, TestResult

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


class OmniCoreClient:
    """JSON-RPC client for a single Omni Core node."""

    def __init__(self, config: ClientConfig):
        self.config = config
        self.session: Optional[aiohttp.ClientSession] = None
        self._request_id = 0

    async def connect(self) -> None:
        """Initialize HTTP session."""
        timeout = aiohttp.ClientTimeout(total=self.config.timeout)
        auth = None
        if self.config.rpc_user is not None:
            auth = aiohttp.BasicAuth(self.config.rpc_user, self.config.rpc_password or "")
        self.session = aiohttp.ClientSession(timeout=timeout, auth=auth)

    async def close(self) -> None:
        """Close HTTP session."""
        if self.session:
            await self.session.close()

    async def call(self, method: str, params: List[Any]) -> Dict[str, Any]:
        """Issue one JSON-RPC 1.0 call and return the decoded envelope."""
        self._request_id += 1
        body = {"jsonrpc": "1.0", "id": self._request_id, "method": method, "params": params}
        async with self.session.post(self.config.endpoint, json=body) as resp:
            # bitcoind answers RPC errors with HTTP 500 and a JSON body.
            return await resp.json(content_type=None)

    async def create_payload(self, method: str, params: List[Any]) -> Dict[str, Any]:
        """Ask the node for a payload; never raises."""
        try:
            data = await self.call(method, params)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"[{self.config.name}] {method} failed: {e}")
            return {"success": False, "error": str(e)}

        if not isinstance(data, dict):
            return {"success": False, "error": f"unexpected response: {data!r}"}
        error = data.get("error")
        if error:
            return {
                "success": False,
                "error": error.get("message", str(error)) if isinstance(error, dict) else str(error),
            }
        return {"success": True, "payload_hex": data.get("result", "")}


class ConformanceHarness:
    """Main test harness for payload conformance."""

    def __init__(self, config: HarnessConfig):
        self.config = config
        self.clients: Dict[str, OmniCoreClient] = {}
        self.comparator = ResultComparator()
        self.reporter = ReportGenerator(config.result_dir)

    async def setup(self) -> None:
        """Initialize all clients."""
        for name, client_config in self.config.get_enabled_clients().items():
            client = OmniCoreClient(client_config)
            await client.connect()
            self.clients[name] = client
            logger.info(f"Using {client_config.name} at {client_config.endpoint}")

    async def teardown(self) -> None:
        """Close all client connections."""
        for client in self.clients.values():
            await client.close()

    async def create_payload_all(self, method: str, params: List[Any]) -> Dict[str, Dict[str, Any]]:
        names = list(self.clients)
        answers = await asyncio.gather(*[
            self.clients[name].create_payload(method, params)
            for name in names
        ])
        return dict(zip(names, answers))

    async def run_vector(self, vector: Dict[str, Any]) -> TestResult:
        """Run a single test vector."""
        vector_name = vector.get("name", "unknown")
        start_time = time.time()

        rpc = vector.get("rpc") or {}
        method = rpc.get("method")
        expected_hex = vector.get("expected_hex")
        if not method or expected_hex is None:
            return TestResult(
                vector_name=vector_name,
                suite_name="",
                passed=False,
                execution_time_ms=(time.time() - start_time) * 1000,
                error="Vector lacks rpc.method or expected_hex",
            )

        results = await self.create_payload_all(method, rpc.get("params", []))
        logger.debug(f"{vector_name}: {method} -> {results}")
        comparison = self.comparator.compare_payloads(expected_hex, results, vector_name)

        return TestResult(
            vector_name=vector_name,
            suite_name="",
            passed=not comparison.has_divergences,
            execution_time_ms=(time.time() - start_time) * 1000,
            comparison=comparison,
        )

    async def run_suite(self, suite_path: str) -> SuiteResult:
        """Run a test suite from a YAML file."""
        suite_name = Path(suite_path).stem
        logger.info(f"Running suite: {suite_name}")

        start_time = time.time()

        with open(suite_path) as f:
            suite = yaml.safe_load(f) or {}

        vectors = [v for v in suite.get("test_vectors", []) if v.get("runnable", True)]
        skipped = len(suite.get("test_vectors", [])) - len(vectors)
        test_results = []

        for vector in vectors:
            result = await self.run_vector(vector)
            result.suite_name = suite_name
            test_results.append(result)

            status = "PASS" if result.passed else "FAIL"
            logger.info(f"  [{status}] {result.vector_name}")

            if not result.passed and self.config.stop_on_first_failure:
                break

        return SuiteResult(
            suite_name=suite_name,
            execution_time_ms=(time.time() - start_time) * 1000,
            test_results=test_results,
            skipped_tests=skipped + len(vectors) - len(test_results),
        )

    async def run_all(self, vector_paths: List[str]) -> ConformanceReport:
        """Run all test suites."""
        start_time = time.time()

        suite_results = []
        for path in vector_paths:
            result = await self.run_suite(path)
            suite_results.append(result)
            if result.failed_tests and self.config.stop_on_first_failure:
                break

        return self.reporter.generate_report(
            suite_results=suite_results,
            clients=list(self.clients.keys()),
            reference_client=self.comparator.reference_client,
            execution_time_ms=(time.time() - start_time) * 1000,
        )


def find_vector_files(vector_dir: str) -> List[str]:
    """Find all vector YAML files in directory."""
    files = []
    for pattern in ("*.yaml", "*.yml"):
        files.extend(glob.glob(os.path.join(vector_dir, "**", pattern), recursive=True))
    return sorted(files)


@click.command()
@click.option(
    "--vectors",
    default=None,
    help="Path to vectors directory or specific YAML file",
)
@click.option(
    "--endpoint",
    default=None,
    help="Omni Core JSON-RPC URL",
)
@click.option(
    "--rpc-user",
    default=None,
    help="JSON-RPC user name",
)
@click.option(
    "--rpc-password",
    default=None,
    help="JSON-RPC password",
)
@click.option(
    "--result-dir",
    default=None,
    help="Directory to write results",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Enable verbose output",
)
@click.option(
    "--stop-on-failure",
    is_flag=True,
    help="Stop on first test failure",
)
def main(
    vectors: Optional[str],
    endpoint: Optional[str],
    rpc_user: Optional[str],
    rpc_password: Optional[str],
    result_dir: Optional[str],
    verbose: bool,
    stop_on_failure: bool,
) -> None:
    """Run Omni payload conformance tests."""

    config = HarnessConfig.from_env()

    node = config.clients["omnicore"]
    if endpoint:
        node.endpoint = endpoint
    if rpc_user:
        node.rpc_user = rpc_user
    if rpc_password:
        node.rpc_password = rpc_password
    if result_dir:
        config.result_dir = result_dir
    if verbose:
        config.verbose = True
    if config.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    if stop_on_failure:
        config.stop_on_first_failure = True

    vector_dir = vectors or config.vector_dir
    if os.path.isfile(vector_dir):
        vector_files = [vector_dir]
    else:
        vector_files = find_vector_files(vector_dir)

    if not vector_files:
        logger.error(f"No vector files found in {vector_dir}")
        sys.exit(1)

    logger.info(f"Found {len(vector_files)} vector files")

    async def run() -> int:
        harness = ConformanceHarness(config)

        try:
            await harness.setup()
            report = await harness.run_all(vector_files)

            harness.reporter.write_json_report(report)
            harness.reporter.write_summary(report)
            harness.reporter.print_summary(report)

            return 0 if report.total_failed == 0 else 1

        finally:
            await harness.teardown()

    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
