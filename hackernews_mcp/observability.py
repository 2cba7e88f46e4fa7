import json
import threading
from dataclasses import dataclass
from typing import Dict


@dataclass
class ToolMetrics:
    calls: int = 0
    errors: int = 0
    total_latency_ms: float = 0.0
    max_latency_ms: float = 0.0

    def observe(self, duration_ms: float, error: bool) -> None:
        self.calls += 1
        self.total_latency_ms += float(duration_ms)
        self.max_latency_ms = max(self.max_latency_ms, float(duration_ms))
        if error:
            self.errors += 1

    @property
    def avg_latency_ms(self) -> float:
        if self.calls == 0:
            return 0.0
        return self.total_latency_ms / self.calls


class InMemoryMetrics:
    """Per-tool call counters, kept for the lifetime of one server run."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tools: Dict[str, ToolMetrics] = {}

    def record(self, tool: str, duration_ms: float, error: bool) -> None:
        with self._lock:
            self._tools.setdefault(tool, ToolMetrics()).observe(duration_ms, error)

    def snapshot(self) -> Dict[str, Dict[str, float]]:
        with self._lock:
            return {
                name: {
                    "calls": float(m.calls),
                    "errors": float(m.errors),
                    "avg_latency_ms": round(m.avg_latency_ms, 3),
                    "max_latency_ms": round(m.max_latency_ms, 3),
                }
                for name, m in self._tools.items()
            }


def format_metrics(metrics: InMemoryMetrics) -> str:
    return json.dumps(metrics.snapshot(), sort_keys=True, separators=(",", ":"))
