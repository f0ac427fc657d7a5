"""Self-check harness - fixed scenario sequence for a quick smoke test.

Each check raises ``CheckFailed`` on the first mismatch. ``run_checks``
runs them in order and reports which one failed.
"""

from __future__ import annotations

import logging
import struct
from typing import Callable

from .memory import INT32, Vector

logger = logging.getLogger(__name__)


class CheckFailed(AssertionError):
    """A self-check observed an unexpected vector state."""


def expect(condition: bool, message: str) -> None:
    if not condition:
        raise CheckFailed(message)


def expect_contents(vec: Vector[int], expected: list[int]) -> None:
    expect(len(vec) == len(expected), f"got length {len(vec)}; want {len(expected)}")
    for i, want in enumerate(expected):
        got = vec.at(i)
        expect(got == want, f"at {i}: got {got}; want {want}")


def check_mutation() -> None:
    with Vector.new(10, INT32) as vec:
        expect(vec.is_empty(), f"got length {len(vec)}")

        vec.push([1, 2, 3, 4, 5, 6, 7, 8, 9])
        expect(len(vec) == 9, f"got length {len(vec)}")

        vec.remove(4, 3)
        expect_contents(vec, [1, 2, 3, 4, 8, 9])

        vec.push([10])
        expect_contents(vec, [1, 2, 3, 4, 8, 9, 10])

        vec.insert(4, [5, 6, 7])
        expect_contents(vec, [1, 2, 3, 4, 5, 6, 7, 8, 9, 10])

        with Vector.new(0, INT32) as other:
            for i in range(11, 15):
                other.push([i])
            expect(len(other) == 4, f"got length {len(other)}")
            vec.extend(other)
        expect_contents(vec, list(range(1, 15)))


def check_slice() -> None:
    with Vector.new(8, INT32) as vec:
        expect(vec.is_empty(), f"got length {len(vec)}")
        vec.push([1, 2, 3, 4, 5, 6])

        got = vec.slice(0, 6)
        expect(got == [1, 2, 3, 4, 5, 6], f"got {got}")

        got = vec.slice(2, 3)
        expect(got == [3, 4, 5], f"got {got}")

        raw = bytearray(INT32.size)
        vec.slice_into(5, raw, 1)
        got = INT32.decode(raw)
        expect(got == 6, f"got {got}")


def check_iteration() -> None:
    with Vector.new(0, INT32) as vec:
        vec.push([1, 2, 3, 4, 5, 6, 7, 8, 9])
        live = [value for (value,) in struct.iter_unpack(INT32.format, vec.view())]

        with Vector.new(0, INT32) as outputs:
            for value in live:
                outputs.push([value])
            expect_contents(outputs, [1, 2, 3, 4, 5, 6, 7, 8, 9])

        with Vector.new(0, INT32) as outputs:
            for value in reversed(live):
                outputs.push([value])
            expect_contents(outputs, [9, 8, 7, 6, 5, 4, 3, 2, 1])


def check_nops() -> None:
    with Vector.new(0, INT32) as vec:
        expect(vec.is_empty(), f"got length {len(vec)}")
        vec.push([1, 2, 3])

        vec.slice_into(0, None, 0)
        vec.insert(1, None, 0)
        vec.push(None, 0)
        vec.remove(3, 0)
        expect_contents(vec, [1, 2, 3])


CHECKS: dict[str, Callable[[], None]] = {
    "mutation": check_mutation,
    "slice": check_slice,
    "iteration": check_iteration,
    "nops": check_nops,
}


def run_checks(names: list[str] | None = None) -> list[tuple[str, str | None]]:
    """Run the named checks (all by default).

    Returns:
        ``(name, failure message or None)`` for each check that ran; stops
        after the first failure.
    """
    results: list[tuple[str, str | None]] = []
    for name in names or list(CHECKS):
        try:
            CHECKS[name]()
        except CheckFailed as e:
            logger.error(f"Check '{name}' failed: {e}")
            results.append((name, str(e)))
            break
        logger.info(f"Check '{name}' passed")
        results.append((name, None))
    return results


PROBES: dict[str, Callable[[], None]] = {}


def probe(name: str) -> Callable[[Callable[[], None]], Callable[[], None]]:
    def register(func: Callable[[], None]) -> Callable[[], None]:
        PROBES[name] = func
        return func

    return register


@probe("remove-past-end")
def probe_remove_past_end() -> None:
    vec = Vector.new(4, INT32)
    vec.push([1, 2, 3])
    vec.remove(2, 2)


@probe("insert-past-end")
def probe_insert_past_end() -> None:
    vec = Vector.new(4, INT32)
    vec.push([1, 2, 3])
    vec.insert(4, [4])


@probe("extend-mismatch")
def probe_extend_mismatch() -> None:
    vec = Vector.new(0, INT32)
    other = Vector.new(1, 8)
    other.push_raw(bytes(8), 1)
    vec.extend(other)


__all__ = [
    "CheckFailed",
    "CHECKS",
    "PROBES",
    "run_checks",
]
