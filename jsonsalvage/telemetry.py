"""
Scope timings and stage counters for the repair pipeline

``TelemetryContext(...)`` hands out the shared no-op context unless telemetry
is switched on and at least one reporter is listening.
"""

from collections import defaultdict, deque
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
import logging
import os
import time
from typing import Any, Dict, List, Optional, Protocol, TypeAlias, Union, runtime_checkable

log = logging.getLogger(__name__)

# Context-aware state so concurrent parses keep separate scope stacks
_scope_stack_var: ContextVar[Optional[List[str]]] = ContextVar(
    "scope_stack", default=None
)


def _telemetry_enabled_from_env() -> bool:
    return os.getenv("JSONSALVAGE_TELEMETRY") == "1" or os.getenv("DEBUG") == "1"


@runtime_checkable
class TelemetryReporter(Protocol):
    """Duck-typed protocol for telemetry reporters."""

    def record_timing(self, scope: str, duration: float, **metadata) -> None: ...
    def record_metric(self, scope: str, value: Any, **metadata) -> None: ...


@dataclass(frozen=True, slots=True)
class _NoOpTelemetryContext:
    """Stateless context used whenever telemetry is off."""

    def __call__(self, name: str, **metadata):
        return self

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        return None

    def count(self, name: str, increment: int = 1, **metadata):
        pass

    def gauge(self, name: str, value: float, **metadata):
        pass


class _EnabledTelemetryContext:
    """Forwards stage scopes, counters and gauges to reporters."""

    __slots__ = ("reporters",)

    def __init__(self, *reporters: TelemetryReporter):
        self.reporters = reporters

    @contextmanager
    def __call__(self, name: str, **metadata):
        if not name:
            raise ValueError("Scope name must be a non-empty string")

        parents = _scope_stack_var.get() or []
        token = _scope_stack_var.set(parents + [name])
        start = time.perf_counter()
        try:
            yield self
        finally:
            duration = time.perf_counter() - start
            _scope_stack_var.reset(token)
            self._emit("record_timing", name, duration, parents, metadata)

    def count(self, name: str, increment: int = 1, **metadata):
        self._emit("record_metric", name, increment, None, {"metric_type": "counter", **metadata})

    def gauge(self, name: str, value: float, **metadata):
        self._emit("record_metric", name, value, None, {"metric_type": "gauge", **metadata})

    def _emit(self, method: str, name: str, value: Any, parents, metadata):
        if parents is None:
            parents = _scope_stack_var.get() or []
        scope_path = ".".join(parents + [name])
        enhanced_metadata = {
            "depth": len(parents),
            "parent_scope": ".".join(parents) if parents else None,
            **metadata,
        }
        for reporter in self.reporters:
            try:
                getattr(reporter, method)(scope_path, value, **enhanced_metadata)
            except Exception as e:
                log.error(
                    "Telemetry reporter '%s' failed: %s",
                    type(reporter).__name__,
                    e,
                    exc_info=True,
                )


_NO_OP_SINGLETON = _NoOpTelemetryContext()

TelemetryContextProtocol: TypeAlias = Union[
    _EnabledTelemetryContext, _NoOpTelemetryContext
]


def TelemetryContext(  # noqa: N802
    *reporters: TelemetryReporter, enabled: Optional[bool] = None
) -> TelemetryContextProtocol:
    """
    Factory that returns a reporting context, or the shared no-op instance
    when telemetry is disabled or nobody is listening.

    ``enabled`` defaults to the JSONSALVAGE_TELEMETRY / DEBUG environment
    switches.
    """
    if enabled is None:
        enabled = _telemetry_enabled_from_env()
    if enabled and reporters:
        return _EnabledTelemetryContext(*reporters)
    return _NO_OP_SINGLETON


class StageCounter:
    """Reporter that counts scope invocations and keeps recent timings.

    Handy for checking which repair stages ran for a given input.
    """

    def __init__(self, max_entries_per_scope: int = 1000):
        self.max_entries = max_entries_per_scope
        self.calls: Dict[str, int] = defaultdict(int)
        self.timings: Dict[str, deque] = {}
        self.metrics: Dict[str, deque] = {}

    def record_timing(self, scope: str, duration: float, **metadata):
        self.calls[scope] += 1
        if scope not in self.timings:
            self.timings[scope] = deque(maxlen=self.max_entries)
        self.timings[scope].append((duration, metadata))

    def record_metric(self, scope: str, value: Any, **metadata):
        if scope not in self.metrics:
            self.metrics[scope] = deque(maxlen=self.max_entries)
        self.metrics[scope].append((value, metadata))

    def count_for(self, scope: str) -> int:
        return self.calls.get(scope, 0)

    def reset(self) -> None:
        self.calls.clear()
        self.timings.clear()
        self.metrics.clear()
