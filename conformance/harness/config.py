"""
Configuration management for the payload conformance harness.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Optional


def _flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("true", "1", "yes")


@dataclass
class ClientConfig:
    """Connection settings for one Omni Core JSON-RPC endpoint."""
    name: str
    endpoint: str
    rpc_user: Optional[str] = None
    rpc_password: Optional[str] = None
    enabled: bool = True
    timeout: float = 30.0


@dataclass
class HarnessConfig:
    """Main configuration for the test harness."""
    clients: Dict[str, ClientConfig] = field(default_factory=dict)

    # Paths
    vector_dir: str = "/vectors"
    result_dir: str = "/results"

    # Execution settings
    stop_on_first_failure: bool = False
    verbose: bool = False
    request_timeout: float = 30.0

    @classmethod
    def from_env(cls) -> "HarnessConfig":
        """Load configuration from environment variables."""
        config = cls()

        timeout = float(os.environ.get("REQUEST_TIMEOUT", config.request_timeout))
        config.request_timeout = timeout

        config.clients = {
            "omnicore": ClientConfig(
                name="Omni Core",
                endpoint=os.environ.get("OMNICORE_ENDPOINT", "http://localhost:18332"),
                rpc_user=os.environ.get("OMNICORE_RPC_USER"),
                rpc_password=os.environ.get("OMNICORE_RPC_PASSWORD"),
                timeout=timeout,
            ),
        }

        # A second node (e.g. another Omni Core release) is compared only when configured.
        alt_endpoint = os.environ.get("OMNICORE_ALT_ENDPOINT")
        if alt_endpoint:
            config.clients["omnicore-alt"] = ClientConfig(
                name="Omni Core (alt)",
                endpoint=alt_endpoint,
                rpc_user=os.environ.get("OMNICORE_ALT_RPC_USER", os.environ.get("OMNICORE_RPC_USER")),
                rpc_password=os.environ.get(
                    "OMNICORE_ALT_RPC_PASSWORD", os.environ.get("OMNICORE_RPC_PASSWORD")
                ),
                timeout=timeout,
            )

        config.vector_dir = os.environ.get("VECTOR_DIR", "/vectors")
        config.result_dir = os.environ.get("RESULT_DIR", "/results")

        config.verbose = _flag("VERBOSE")
        config.stop_on_first_failure = _flag("STOP_ON_FIRST_FAILURE")

        return config

    def get_enabled_clients(self) -> Dict[str, ClientConfig]:
        """Get only enabled client configurations."""
        return {
            name: client
            for name, client in self.clients.items()
            if client.enabled
        }
