"""Global configuration and tunables for performance governance."""

from __future__ import annotations

import os
from typing import Final, Optional

ENV_VAR: Final = "PERFGOV_ENV"
DEFAULT_ENVIRONMENT: Final = "development"

# CPU micro-benchmark (timings are tunable, not contractual)
CPU_BENCHMARK_ITERATIONS: Final = int(os.environ.get("PERFGOV_CPU_BENCHMARK_ITERATIONS", "100000"))
CPU_BENCHMARK_SLOW_MS: Final = float(os.environ.get("PERFGOV_CPU_BENCHMARK_SLOW_MS", "50"))

# GPU tiering
GPU_HIGH_TEXTURE_SIZE: Final = 8192

# Network considered constrained below this downlink estimate
SLOW_DOWNLINK_MBPS: Final = 1.5
SLOW_EFFECTIVE_TYPES: Final = frozenset({"slow-2g", "2g"})


def resolve_environment(explicit: Optional[str] = None) -> str:
    """Return the budget environment name.

    An explicit value wins; otherwise ``PERFGOV_ENV`` is consulted and finally
    the development default is used.
    """
    if explicit is not None and explicit.strip():
        return explicit.strip().lower()
    value = os.environ.get(ENV_VAR, "").strip().lower()
    return value or DEFAULT_ENVIRONMENT
