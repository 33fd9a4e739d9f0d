"""
Prognoser Results

Dataclasses for the values a prognoser publishes after each step, and a
sliding-window history for inspection.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

import pandas as pd


@dataclass
class PrognosticsResults:
    """Results of one prognoser step.

    Attributes:
        time: Data time the results refer to
        state: State estimate, state name -> value
        event_state: Event name -> normalized event state
        predicted_outputs: Predicted output name -> value
        time_to_event: Event name -> time-to-event summary
        valid: False when the step produced nothing usable
        timestamp: When these results were recorded
    """
    time: Optional[float] = None
    state: dict[str, float] = field(default_factory=dict)
    event_state: dict[str, float] = field(default_factory=dict)
    predicted_outputs: dict[str, float] = field(default_factory=dict)
    time_to_event: dict[str, dict[str, Any]] = field(default_factory=dict)
    valid: bool = True
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        """Convert results to dictionary for serialization."""
        return {
            "time": self.time,
            "state": self.state.copy(),
            "event_state": self.event_state.copy(),
            "predicted_outputs": self.predicted_outputs.copy(),
            "time_to_event": {k: dict(v) for k, v in self.time_to_event.items()},
            "valid": self.valid,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PrognosticsResults":
        """Create results from dictionary."""
        return cls(
            time=data.get("time"),
            state=dict(data.get("state", {})),
            event_state=dict(data.get("event_state", {})),
            predicted_outputs=dict(data.get("predicted_outputs", {})),
            time_to_event={k: dict(v) for k, v in data.get("time_to_event", {}).items()},
            valid=data.get("valid", True),
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )


@dataclass
class ResultsHistory:
    """Track prognoser results for visualization.

    Maintains a sliding window of recent results.
    """
    max_length: int = 500
    _results: list[PrognosticsResults] = field(default_factory=list)

    def add(self, results: PrognosticsResults) -> None:
        """Add results to history."""
        self._results.append(results)
        # Trim if over max length
        if len(self._results) > self.max_length:
            self._results = self._results[-self.max_length:]

    def get_recent(self, n: Optional[int] = None) -> list[PrognosticsResults]:
        """Get n most recent results."""
        if n is None:
            return self._results.copy()
        if n <= 0:
            return []
        return self._results[-n:]

    def to_frame(self) -> pd.DataFrame:
        """Flatten history into one row per step.

        Columns are `time`, `valid`, then `state.<name>`,
        `event_state.<name>`, `predicted.<name>` and
        `time_to_event.<event>.<stat>` for every recorded value.
        """
        rows = []
        for r in self._results:
            row = {"time": r.time, "valid": r.valid}
            row.update({f"state.{k}": v for k, v in r.state.items()})
            row.update({f"event_state.{k}": v for k, v in r.event_state.items()})
            row.update({f"predicted.{k}": v for k, v in r.predicted_outputs.items()})
            for event, summary in r.time_to_event.items():
                row.update({
                    f"time_to_event.{event}.{stat}": value
                    for stat, value in summary.items()
                    if not isinstance(value, (list, tuple))
                })
            rows.append(row)
        return pd.DataFrame(rows)

    def __len__(self) -> int:
        return len(self._results)
