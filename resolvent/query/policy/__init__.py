"""
Execution policies.

Namespace: Q.policy.*

    run = Q.executor(schema).policy(Q.policy.timeout(2.0)).policy(Q.policy.parallel_max(8)).build()
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import timedelta

# ═══════════════════════════════════════════════════════════════════════════════
# Policies
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class SequentialPolicy:
    """Resolve sibling fields one after another."""
    pass

def sequential() -> SequentialPolicy:
    return SequentialPolicy()


@dataclass(frozen=True, slots=True)
class ParallelMaxPolicy:
    """Limit resolver invocations in flight."""
    max_concurrent: int

def parallel_max(n: int) -> ParallelMaxPolicy:
    if n < 1:
        raise ValueError(f"parallel_max needs at least 1, got {n}")
    return ParallelMaxPolicy(n)


@dataclass(frozen=True, slots=True)
class TimeoutPolicy:
    """Deadline for the whole execution."""
    duration: timedelta

def timeout(seconds: float) -> TimeoutPolicy:
    if seconds <= 0:
        raise ValueError(f"timeout must be positive, got {seconds}")
    return TimeoutPolicy(timedelta(seconds=seconds))


type Policy = SequentialPolicy | ParallelMaxPolicy | TimeoutPolicy

# ═══════════════════════════════════════════════════════════════════════════════
# Settings: policies folded into one value
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class Settings:
    """
    Effective execution settings.

    Default: siblings in parallel, unbounded, no deadline.
    """
    parallel: bool = True
    max_concurrent: int | None = None
    timeout: timedelta | None = None

    def apply(self, p: Policy) -> Settings:
        match p:
            case SequentialPolicy():
                return replace(self, parallel=False)
            case ParallelMaxPolicy(n):
                return replace(self, parallel=True, max_concurrent=n)
            case TimeoutPolicy(duration):
                return replace(self, timeout=duration)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "SequentialPolicy",
    "sequential",
    "ParallelMaxPolicy",
    "parallel_max",
    "TimeoutPolicy",
    "timeout",
    "Policy",
    "Settings",
)
