"""
Simulate-to-Threshold Prediction

Drives a prognostics model forward from a known state until its threshold
equation reports failure or the prediction horizon runs out. Future inputs
come from the model's input equation, so callers describe operating
conditions with the model's compact load parameters.

The simulation is deterministic. Uncertainty is represented by running one
simulation per caller-supplied load parameter sample (see
predict_time_to_event); how those samples are drawn is up to the caller.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import numpy as np
import pandas as pd
import yaml

from prognostics.config import ConfigMap
from prognostics.exceptions import ConstructionError, PreconditionError
from prognostics.models.prognostics_model import PrognosticsModel
from prognostics.models.vectors import StateVector

logger = logging.getLogger(__name__)


@dataclass
class PredictionConfig:
    """Configuration for threshold prediction."""

    # Maximum simulated time beyond the start time
    horizon: float = 10000.0

    # Step size; None uses the model's default time step
    time_step: Optional[float] = None

    # Whether to record the full trajectory as a DataFrame
    save_trajectory: bool = True

    def __post_init__(self):
        if not self.horizon > 0:
            raise ConstructionError(f"horizon must be positive, got {self.horizon}")
        if self.time_step is not None and not self.time_step > 0:
            raise ConstructionError(f"time_step must be positive, got {self.time_step}")

    @classmethod
    def from_config(cls, config: ConfigMap) -> "PredictionConfig":
        """Build from a `prediction` config section."""
        time_step = config.get("time_step")
        return cls(
            horizon=float(config.get("horizon", 10000.0)),
            time_step=None if time_step is None else float(time_step),
            save_trajectory=bool(config.get("save_trajectory", True)),
        )

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "PredictionConfig":
        """Load configuration from YAML file."""
        with open(config_path) as f:
            config = yaml.safe_load(f) or {}

        return cls.from_config(ConfigMap(config.get("prediction", {})))


@dataclass
class SimulationResult:
    """Result of a single simulate-to-threshold run.

    Attributes:
        start_time: Time the simulation started from
        time_of_event: Time at which the threshold was first reached,
                       None if the horizon ran out first
        final_state: State at time_of_event (or at the horizon)
        steps: Number of state transitions performed
        trajectory: Per-step record of states, inputs, outputs, predicted
                    outputs and event states (None if not saved)
    """
    start_time: float
    time_of_event: Optional[float]
    final_state: StateVector
    steps: int
    trajectory: Optional[pd.DataFrame] = None

    @property
    def threshold_reached(self) -> bool:
        return self.time_of_event is not None

    @property
    def time_to_event(self) -> float:
        """Time from start to the event; NaN if it was not reached."""
        if self.time_of_event is None:
            return float("nan")
        return self.time_of_event - self.start_time


def _record(model: PrognosticsModel, t: float, x, u) -> dict[str, float]:
    z = model.output_eqn(t, x, u)
    row = {"time": t}
    row.update(model.state_names.to_dict(x))
    row.update(model.inputs.to_dict(u))
    row.update(model.outputs.to_dict(z))
    row.update({
        f"predicted_{k}": v
        for k, v in model.predicted_outputs.to_dict(
            model.predicted_output_eqn(t, x, u, z)
        ).items()
    })
    row.update({
        f"event_state_{k}": v
        for k, v in model.events.to_dict(model.event_state_eqn(x)).items()
    })
    return row


def simulate_to_threshold(
    model: PrognosticsModel,
    x0: Sequence[float],
    params: Sequence[float],
    t0: float = 0.0,
    load_estimate: Sequence[float] = (),
    config: Optional[PredictionConfig] = None,
) -> SimulationResult:
    """Simulate the model forward until the threshold is reached.

    The threshold is checked before each transition, so a state that is
    already failed yields time_of_event == t0. Simulation stops at the
    first crossing; models whose threshold is not monotone are tolerated.

    Args:
        model: Prognostics model to simulate
        x0: Initial state
        params: Load parameters passed to model.input_eqn at every step
        t0: Start time
        load_estimate: Load estimate passed to model.input_eqn
        config: Prediction configuration. Uses defaults if None.

    Returns:
        SimulationResult with the event time and optional trajectory
    """
    config = config or PredictionConfig()
    dt = config.time_step or model.default_time_step
    t_end = t0 + config.horizon

    x = StateVector(x0)
    if len(x) != model.state_size:
        raise PreconditionError(
            f"x0 has {len(x)} values, model expects {model.state_size}"
        )

    rows = []
    t = float(t0)
    steps = 0
    time_of_event = None

    while True:
        u = model.input_eqn(t, params, load_estimate)
        if config.save_trajectory:
            rows.append(_record(model, t, x, u))
        if model.threshold_eqn(t, x, u):
            time_of_event = t
            logger.debug("Threshold reached at t=%.3f after %d steps", t, steps)
            break
        if t + dt > t_end:
            logger.debug("Horizon %.3f reached without threshold", config.horizon)
            break
        x = model.state_eqn(t, x, u, dt)
        t += dt
        steps += 1

    trajectory = pd.DataFrame(rows) if config.save_trajectory else None
    return SimulationResult(
        start_time=float(t0),
        time_of_event=time_of_event,
        final_state=x,
        steps=steps,
        trajectory=trajectory,
    )


@dataclass
class TimeToEventPrediction:
    """Distribution of time to event over load parameter samples.

    Attributes:
        event: Name of the predicted event
        samples: Time to event per sample (NaN where the horizon ran out)
    """
    event: str
    samples: np.ndarray

    @property
    def reached(self) -> np.ndarray:
        """Samples that reached the threshold within the horizon."""
        return self.samples[~np.isnan(self.samples)]

    @property
    def fraction_reached(self) -> float:
        return len(self.reached) / len(self.samples)

    @property
    def mean(self) -> float:
        return float(np.mean(self.reached)) if len(self.reached) else float("nan")

    @property
    def std(self) -> float:
        return float(np.std(self.reached)) if len(self.reached) else float("nan")

    @property
    def median(self) -> float:
        return self.quantile(0.5)

    def quantile(self, q: float) -> float:
        """Quantile of the time to event over samples that reached it."""
        if not 0.0 <= q <= 1.0:
            raise ValueError(f"Quantile must be in [0, 1], got {q}")
        if not len(self.reached):
            return float("nan")
        return float(np.quantile(self.reached, q))

    @property
    def lower(self) -> float:
        """Lower bound of 95% CI, NaN when no sample reached the threshold."""
        if not len(self.reached):
            return float("nan")
        return max(0.0, self.mean - 1.96 * self.std)

    @property
    def upper(self) -> float:
        """Upper bound of 95% CI."""
        return self.mean + 1.96 * self.std

    def to_dict(self) -> dict:
        """Convert prediction to dictionary for serialization."""
        return {
            "event": self.event,
            "mean": self.mean,
            "std": self.std,
            "median": self.median,
            "lower": self.lower,
            "upper": self.upper,
            "fraction_reached": self.fraction_reached,
            "samples": [None if np.isnan(s) else float(s) for s in self.samples],
        }


def predict_time_to_event(
    model: PrognosticsModel,
    x0: Sequence[float],
    param_samples: Sequence[Sequence[float]],
    t0: float = 0.0,
    load_estimate: Sequence[float] = (),
    config: Optional[PredictionConfig] = None,
) -> TimeToEventPrediction:
    """Predict time to event for each load parameter sample.

    Args:
        model: Prognostics model to simulate
        x0: Initial state shared by all samples
        param_samples: One input parameter sequence per sample
        t0: Start time
        load_estimate: Load estimate passed to model.input_eqn
        config: Prediction configuration; trajectories are never saved here

    Returns:
        TimeToEventPrediction for the model's first event
    """
    if len(param_samples) == 0:
        raise PreconditionError("At least one load parameter sample is required")

    config = config or PredictionConfig()
    run_config = PredictionConfig(
        horizon=config.horizon,
        time_step=config.time_step,
        save_trajectory=False,
    )

    times = np.array([
        simulate_to_threshold(model, x0, params, t0, load_estimate, run_config).time_to_event
        for params in param_samples
    ])

    logger.debug(
        "Predicted %s over %d samples (%d reached threshold)",
        model.events[0],
        len(times),
        int(np.sum(~np.isnan(times))),
    )
    return TimeToEventPrediction(event=model.events[0], samples=times)
