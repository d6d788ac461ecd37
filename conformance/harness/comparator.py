"""
Payload comparison logic for conformance testing.

The reference is the payload hex recorded in the vector (produced by the
omni_spec encoder); every node is compared against it.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass
class Divergence:
    """A node answer that differs from the reference payload."""
    field: str
    expected: Any
    actual: Any
    client: str
    reference_client: str
    vector_name: str
    details: Optional[str] = None


@dataclass
class ComparisonResult:
    """Result of comparing every node against the reference."""
    success: bool
    divergences: List[Divergence]
    clients_compared: List[str]

    @property
    def has_divergences(self) -> bool:
        return len(self.divergences) > 0


def first_difference(expected: str, actual: str) -> Optional[int]:
    """Byte offset of the first mismatch between two hex payloads, or None."""
    a = bytes.fromhex(expected)
    try:
        b = bytes.fromhex(actual)
    except ValueError:
        return 0
    for offset, (x, y) in enumerate(zip(a, b)):
        if x != y:
            return offset
    if len(a) != len(b):
        return min(len(a), len(b))
    return None


class ResultComparator:
    """Compares node payloads against the reference hex."""

    def __init__(self, reference_client: str = "omni-spec"):
        """
        Initialize comparator.

        Args:
            reference_client: Label used for the reference payload in reports
        """
        self.reference_client = reference_client

    def compare_payloads(
        self,
        expected_hex: str,
        results: Dict[str, Dict[str, Any]],
        vector_name: str,
    ) -> ComparisonResult:
        """
        Compare each node's createpayload answer with the expected hex.

        Args:
            expected_hex: Reference payload from the vector
            results: Dict mapping client name to {"success", "payload_hex", "error"}
            vector_name: Name of the test vector

        Returns:
            ComparisonResult with any divergences found
        """
        divergences = []
        expected = expected_hex.lower()

        for client, result in results.items():
            if not result.get("success", False):
                divergences.append(Divergence(
                    field="success",
                    expected=True,
                    actual=False,
                    client=client,
                    reference_client=self.reference_client,
                    vector_name=vector_name,
                    details=result.get("error"),
                ))
                continue

            actual = str(result.get("payload_hex", "")).lower()
            if actual != expected:
                offset = first_difference(expected, actual)
                divergences.append(Divergence(
                    field="payload_hex",
                    expected=expected,
                    actual=actual,
                    client=client,
                    reference_client=self.reference_client,
                    vector_name=vector_name,
                    details=f"First differing byte at offset {offset}",
                ))

        return ComparisonResult(
            success=len(divergences) == 0,
            divergences=divergences,
            clients_compared=[self.reference_client] + list(results.keys()),
        )
