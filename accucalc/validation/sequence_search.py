"""Counterexample search over random key sequences.

This module runs independently of the test suite.  It drives seeded
random key sequences through a fresh engine and searches for:

1. Invariant violations: a state after some key that breaks one of the
   ``StateInvariant`` predicates in ``spec.CONTRACT``.
2. Unexpected errors: a key that makes the engine raise.
3. Behavioural violations: ``clear()`` not restoring the initial state,
   a second "=" or a second "." changing anything.

Run directly::

    python -m accucalc.validation.sequence_search
"""
from __future__ import annotations

import random
import sys
from dataclasses import dataclass, field

from accucalc.display import RecordingDisplay
from accucalc.engine import AccumulatorEngine, CalculatorState
from accucalc.keymap import KEYMAP, dispatch_key
from accucalc.spec import CONTRACT, EngineContract

# Digits are weighted up so sequences build real operands.
_KEYS = sorted(KEYMAP)
_WEIGHTS = [6 if k.isdigit() else 1 for k in _KEYS]


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class Counterexample:
    category: str
    keys: tuple[str, ...]
    expected: str
    actual: str
    description: str


@dataclass
class SearchReport:
    counterexamples: list[Counterexample] = field(default_factory=list)
    checks_run: int = 0

    @property
    def passed(self) -> bool:
        return len(self.counterexamples) == 0

    def summary(self) -> str:
        lines = [
            "Sequence Search Report",
            "=" * 40,
            f"Total checks: {self.checks_run}",
            f"Counterexamples found: {len(self.counterexamples)}",
        ]
        if self.counterexamples:
            lines.append("")
            for i, cx in enumerate(self.counterexamples, 1):
                lines.append(f"  [{i}] {cx.category}")
                lines.append(f"      Keys:     {' '.join(cx.keys)}")
                lines.append(f"      Expected: {cx.expected}")
                lines.append(f"      Actual:   {cx.actual}")
                lines.append(f"      {cx.description}")
        else:
            lines.append("\nNo counterexamples found: all checks passed.")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Search functions
# ---------------------------------------------------------------------------

def random_keys(rng: random.Random, length: int) -> list[str]:
    return rng.choices(_KEYS, weights=_WEIGHTS, k=length)


def search_invariant_violations(
    keys: list[str],
    contract: EngineContract,
) -> tuple[list[Counterexample], int]:
    """Replay ``keys`` and check every invariant after every key."""
    cxs: list[Counterexample] = []
    checks = 0
    engine = AccumulatorEngine(RecordingDisplay())

    for i, key in enumerate(keys):
        prefix = tuple(keys[: i + 1])
        checks += 1
        try:
            dispatch_key(engine, key)
        except Exception as e:
            cxs.append(Counterexample(
                category="unexpected_error",
                keys=prefix,
                expected="no error",
                actual=f"{type(e).__name__}: {e}",
                description="Key raised instead of updating the display",
            ))
            break

        for inv in contract.violations(engine.state):
            cxs.append(Counterexample(
                category="invariant_violation",
                keys=prefix,
                expected=inv.description,
                actual=repr(engine.state),
                description=f"Invariant '{inv.id}' violated",
            ))
        if cxs:
            break

    return cxs, checks


def search_behaviour_violations(
    keys: list[str],
) -> tuple[list[Counterexample], int]:
    """Check idempotent keys and clear() at the end of ``keys``."""
    cxs: list[Counterexample] = []
    checks = 0

    for repeated in ("=", "."):
        engine = AccumulatorEngine(RecordingDisplay())
        for key in keys:
            dispatch_key(engine, key)
        dispatch_key(engine, repeated)
        once = engine.state.snapshot()
        dispatch_key(engine, repeated)
        checks += 1
        if engine.state != once:
            cxs.append(Counterexample(
                category="not_idempotent",
                keys=tuple(keys) + (repeated, repeated),
                expected=repr(once),
                actual=repr(engine.state),
                description=f"Pressing {repeated!r} twice differs from once",
            ))

    engine = AccumulatorEngine(RecordingDisplay())
    for key in keys:
        dispatch_key(engine, key)
    engine.clear()
    checks += 1
    if engine.state != CalculatorState() or engine.error is not None:
        cxs.append(Counterexample(
            category="clear_incomplete",
            keys=tuple(keys) + ("C",),
            expected=repr(CalculatorState()),
            actual=repr(engine.state),
            description="clear() did not restore the initial state",
        ))

    return cxs, checks


# ---------------------------------------------------------------------------
# Top-level runner
# ---------------------------------------------------------------------------

def run_search(seed: int, sequences: int = 500, length: int = 30) -> SearchReport:
    """Run the complete search for one seed."""
    rng = random.Random(seed)
    report = SearchReport()

    for _ in range(sequences):
        keys = random_keys(rng, length)
        for cxs, checks in (
            search_invariant_violations(keys, CONTRACT),
            search_behaviour_violations(keys),
        ):
            report.counterexamples.extend(cxs)
            report.checks_run += checks

    return report


def main() -> None:
    """Run the sequence search across several seeds."""
    all_passed = True
    for seed in (0, 1, 2, 3, 4):
        print(f"\n--- Seed: {seed} ---")
        report = run_search(seed)
        print(report.summary())
        if not report.passed:
            all_passed = False

    print("\n" + "=" * 40)
    if all_passed:
        print("ALL SEEDS PASSED")
    else:
        print("SOME SEEDS HAD COUNTEREXAMPLES")
        sys.exit(1)


if __name__ == "__main__":
    main()
