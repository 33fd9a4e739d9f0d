"""Shared fixtures: small concrete models with the example shape."""

import numpy as np
import pytest

from prognostics.models import (
    EventStateVector,
    InputVector,
    OutputVector,
    PredictedOutputVector,
    PrognosticsModel,
    StateVector,
)


class LinearWearModel(PrognosticsModel):
    """State [wear, rate]; wear grows by load * rate per unit time, fails at 1.0."""

    def __init__(
        self,
        state_size=2,
        inputs=("load",),
        outputs=("voltage",),
        predicted_outputs=("capacity", "resistance"),
        input_parameter_count=None,
        **kwargs,
    ):
        super().__init__(
            state_size,
            inputs,
            outputs,
            predicted_outputs,
            input_parameter_count,
            **kwargs,
        )

    def _state_eqn(self, t, x, u, dt, noise):
        wear, rate = x
        next_x = StateVector([wear + u[0] * rate * dt, rate])
        if noise is not None:
            next_x.assign(next_x.to_numpy() + noise.to_numpy())
        return next_x

    def _output_eqn(self, t, x, u, noise):
        return OutputVector([4.0 - x[0]])

    def _initialize(self, u, z):
        return StateVector([4.0 - z[0], 0.125])

    def _threshold_eqn(self, t, x, u):
        return x[0] >= 1.0

    def _event_state_eqn(self, x):
        return EventStateVector([1.0 - x[0]])

    def _input_eqn(self, t, params, load_estimate):
        return InputVector([params[0]])

    def _predicted_output_eqn(self, t, x, u, z):
        return PredictedOutputVector([1.0 - x[0], x[1]])


class WrongLengthModel(LinearWearModel):
    """Returns vectors of the wrong length from every hook."""

    def _state_eqn(self, t, x, u, dt, noise):
        return [0.0]

    def _event_state_eqn(self, x):
        return [1.0, 1.0]

    def _input_eqn(self, t, params, load_estimate):
        return np.zeros(3)

    def _predicted_output_eqn(self, t, x, u, z):
        return PredictedOutputVector([0.5])


@pytest.fixture
def model():
    return LinearWearModel()


@pytest.fixture
def wrong_length_model():
    return WrongLengthModel()
