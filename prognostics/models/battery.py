"""
Simple Battery Discharge Model

Reference degradation model used to exercise the prognostics contract end
to end. The battery is described by two states:
- charge: remaining charge (Ah)
- resistance: internal resistance (ohm), growing with charge throughput

Terminal voltage follows a linear open-circuit curve in state of charge
minus the IR drop. End of discharge (EOD) is reached when the terminal
voltage falls below the cutoff or the charge is exhausted. Time is in
seconds.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import numpy as np
import yaml

from prognostics.config import ConfigMap
from prognostics.exceptions import ConstructionError
from prognostics.models.prognostics_model import PrognosticsModel
from prognostics.models.vectors import (
    EventStateVector,
    InputVector,
    OutputVector,
    PredictedOutputVector,
    StateVector,
)

SECONDS_PER_HOUR = 3600.0


@dataclass(frozen=True)
class BatteryParameters:
    """Physical parameters of the battery model."""

    # Nominal capacity (Ah)
    capacity: float = 2.2

    # Open-circuit voltage at full and empty charge (V)
    v_full: float = 4.2
    v_empty: float = 3.0

    # End-of-discharge terminal voltage (V)
    cutoff_voltage: float = 3.2

    # Internal resistance at start of life (ohm)
    initial_resistance: float = 0.05

    # Resistance increase per Ah of charge throughput (ohm/Ah)
    resistance_growth: float = 0.002

    def __post_init__(self):
        if self.capacity <= 0:
            raise ConstructionError(f"capacity must be positive, got {self.capacity}")
        if self.v_full <= self.v_empty:
            raise ConstructionError(
                f"v_full ({self.v_full}) must exceed v_empty ({self.v_empty})"
            )
        if not self.v_empty <= self.cutoff_voltage < self.v_full:
            raise ConstructionError(
                f"cutoff_voltage ({self.cutoff_voltage}) must lie in "
                f"[v_empty, v_full)"
            )
        if self.initial_resistance < 0 or self.resistance_growth < 0:
            raise ConstructionError("Resistance parameters must be non-negative")

    @classmethod
    def from_config(cls, config: ConfigMap) -> "BatteryParameters":
        """Build parameters from a `battery` config section."""
        defaults = cls()
        return cls(
            capacity=float(config.get("capacity", defaults.capacity)),
            v_full=float(config.get("v_full", defaults.v_full)),
            v_empty=float(config.get("v_empty", defaults.v_empty)),
            cutoff_voltage=float(config.get("cutoff_voltage", defaults.cutoff_voltage)),
            initial_resistance=float(
                config.get("initial_resistance", defaults.initial_resistance)
            ),
            resistance_growth=float(
                config.get("resistance_growth", defaults.resistance_growth)
            ),
        )

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "BatteryParameters":
        """Load parameters from the `battery` section of a YAML file."""
        with open(config_path) as f:
            config = yaml.safe_load(f) or {}

        return cls.from_config(ConfigMap(config.get("battery", {})))


class SimpleBatteryModel(PrognosticsModel):
    """Battery discharge model with resistance growth.

    Shape:
        states: charge, resistance
        inputs: load (discharge current, A)
        outputs: voltage
        predicted outputs: capacity (remaining Ah), resistance
        events: EOD
        input parameters: 1 (the discharge current)
    """

    def __init__(
        self,
        parameters: Optional[BatteryParameters] = None,
        default_time_step: float = 1.0,
    ):
        super().__init__(
            2,
            ["load"],
            ["voltage"],
            ["capacity", "resistance"],
            events=["EOD"],
            state_names=["charge", "resistance"],
            default_time_step=default_time_step,
        )
        self.parameters = parameters or BatteryParameters()

    @classmethod
    def from_config(cls, config: ConfigMap) -> "SimpleBatteryModel":
        """Build the model from a config map with an optional `battery` section."""
        return cls(
            parameters=BatteryParameters.from_config(config.section("battery")),
            default_time_step=float(config.get("time_step", 1.0)),
        )

    def _soc(self, charge: float) -> float:
        return charge / self.parameters.capacity

    def _open_circuit_voltage(self, charge: float) -> float:
        p = self.parameters
        return p.v_empty + (p.v_full - p.v_empty) * self._soc(charge)

    def _state_eqn(self, t, x, u, dt, noise) -> StateVector:
        charge, resistance = x
        throughput = u[0] * dt / SECONDS_PER_HOUR

        next_x = StateVector([
            charge - throughput,
            resistance + self.parameters.resistance_growth * abs(throughput),
        ])
        if noise is not None:
            next_x.assign(next_x.to_numpy() + noise.to_numpy())
        return next_x

    def _output_eqn(self, t, x, u, noise) -> OutputVector:
        charge, resistance = x
        voltage = self._open_circuit_voltage(charge) - u[0] * resistance
        if noise is not None:
            voltage += noise[0]
        return OutputVector([voltage])

    def _initialize(self, u, z) -> StateVector:
        p = self.parameters
        open_circuit = z[0] + u[0] * p.initial_resistance
        soc = np.clip((open_circuit - p.v_empty) / (p.v_full - p.v_empty), 0.0, 1.0)
        return StateVector([soc * p.capacity, p.initial_resistance])

    def _threshold_eqn(self, t, x, u) -> bool:
        charge = x[0]
        if charge <= 0.0:
            return True
        voltage = self._output_eqn(t, x, u, None)[0]
        return voltage < self.parameters.cutoff_voltage

    def _event_state_eqn(self, x) -> EventStateVector:
        # Open-circuit margin above cutoff, so EOD state is independent of load
        p = self.parameters
        margin = (self._open_circuit_voltage(x[0]) - p.cutoff_voltage) / (
            p.v_full - p.cutoff_voltage
        )
        return EventStateVector([np.clip(margin, 0.0, 1.0)])

    def _input_eqn(self, t, params, load_estimate) -> InputVector:
        # Load comes entirely from the parameter; the estimate is unused
        return InputVector([params[0]])

    def _predicted_output_eqn(self, t, x, u, z) -> PredictedOutputVector:
        charge, resistance = x
        return PredictedOutputVector([max(charge, 0.0), resistance])
