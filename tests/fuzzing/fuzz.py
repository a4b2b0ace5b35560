"""Seeded random testing for the HQL reader.

A Fuzzer generates one document per step and checks the reader against it.
FuzzRunner drives a fuzzer from a single seed; when a step fails it keeps
the generated document together with the seed, example and step numbers, so
the failure can be replayed with ``--seed``.
"""

import abc
import random
import time
from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class FuzzFailure:
    seed: int
    example: int
    step: int
    source: str
    error: Exception

    def report(self) -> str:
        return (
            f"FAILED at example {self.example}, step {self.step} (seed {self.seed})\n"
            f"  {type(self.error).__name__}: {self.error}\n"
            f"  document: {self.source!r}"
        )


class Fuzzer(abc.ABC):
    """A generator of documents plus the checks run on each of them.

    ``step`` must leave the document it generated in ``self.source`` before
    running any check on it.
    """

    name: str = "unnamed"

    def __init__(self):
        self.source = ""
        self.op_counts: dict[str, int] = {}

    @property
    def operations(self) -> int:
        return sum(self.op_counts.values())

    def record_op(self, name: str):
        self.op_counts[name] = self.op_counts.get(name, 0) + 1

    @abc.abstractmethod
    def step(self):
        """Generate one document and check it; raise on a violation."""

    def get_stats(self) -> dict[str, Any]:
        return {}


class FuzzRunner:
    """Runs ``examples * steps`` fuzz steps from one seed."""

    def __init__(
        self,
        examples: int = 200,
        steps: int = 20,
        seed: Optional[int] = None,
        verbose: bool = True,
    ):
        self.examples = examples
        self.steps = steps
        self.seed = seed if seed is not None else random.randrange(2**32)
        self.verbose = verbose
        self.failure: Optional[FuzzFailure] = None

    def _print(self, *args):
        if self.verbose:
            print(*args)

    def run(self, fuzzer: Fuzzer) -> bool:
        """Run ``fuzzer``; returns False and sets ``failure`` on the first error."""
        random.seed(self.seed)
        self.failure = None
        self._print(f"Fuzz: {fuzzer.name} (seed {self.seed})")
        started = time.time()

        for example in range(1, self.examples + 1):
            for step in range(1, self.steps + 1):
                try:
                    fuzzer.step()
                except Exception as e:
                    self.failure = FuzzFailure(
                        self.seed, example, step, fuzzer.source, e
                    )
                    self._print(self.failure.report())
                    return False

        self._print(
            f"  {fuzzer.operations:,} documents in {time.time() - started:.1f}s"
        )
        self._print(f"  Operations: {fuzzer.op_counts}")
        for key, value in fuzzer.get_stats().items():
            self._print(f"  {key}: {value}")
        self._print("  PASSED")
        return True
