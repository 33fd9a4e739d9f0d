"""
Prognostics Model Contract

Extends the base dynamical-system model with the equations needed for
prognostics: when the component has failed (threshold), how far it has
degraded (event state), how future operating conditions turn into inputs
(input derivation) and which unmeasured quantities are worth predicting
(predicted outputs).

Estimators call threshold_eqn/event_state_eqn on their state estimates,
predictors call input_eqn with sampled load parameters and advance the
state with state_eqn until threshold_eqn returns True.
"""

from abc import abstractmethod
from collections.abc import Sequence
from typing import Optional

import numpy as np

from prognostics.exceptions import (
    PostconditionError,
    PreconditionError,
)
from prognostics.models.base import Model, _check_count
from prognostics.models.vectors import (
    EventStateVector,
    InputVector,
    OutputVector,
    PredictedOutputVector,
    StateVector,
    VariableNames,
    coerce_vector,
)


def _as_sequence(values, name: str) -> np.ndarray:
    """Convert a parameter sequence into a flat float array."""
    try:
        array = np.array(values, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise PreconditionError(f"{name} must be numeric: {e}") from e
    if array.ndim != 1:
        raise PreconditionError(
            f"{name} must be one-dimensional, got shape {array.shape}"
        )
    return array


class PrognosticsModel(Model):
    """Abstract base class for prognostics models.

    Concrete degradation models implement four hooks:
    - _threshold_eqn(): Has the component reached its failure condition?
    - _event_state_eqn(): Normalized degradation per event (1 healthy, 0 failed)
    - _input_eqn(): Turn compact load parameters into a full input vector
    - _predicted_output_eqn(): Auxiliary diagnostic quantities

    The public *_eqn methods validate argument lengths, call the hook and
    check the length of what it returns. Nothing is padded or truncated.

    Example:
        model = SimpleBatteryModel()
        t = 0.0
        u = model.input_eqn(t, [2.0])
        x = model.initialize(u, model.outputs.from_mapping(OutputVector, {"voltage": 4.1}))
        while not model.threshold_eqn(t, x, u):
            x = model.state_eqn(t, x, u)
            t += model.default_time_step
    """

    def __init__(
        self,
        state_size: int,
        inputs: Sequence[str],
        outputs: Sequence[str],
        predicted_outputs: Sequence[str] = (),
        input_parameter_count: Optional[int] = None,
        *,
        events: Sequence[str] = ("EOL",),
        state_names: Optional[Sequence[str]] = None,
        default_time_step: float = 1.0,
    ):
        """Initialize the model.

        Args:
            state_size: Number of values in the state vector
            inputs: Names of the model inputs; fixes the input vector length
            outputs: Names of the model outputs; fixes the output vector length
            predicted_outputs: Names of the predicted outputs (may be empty)
            input_parameter_count: Number of parameters input_eqn requires.
                                   Defaults to the number of inputs.
            events: Names of the events tracked by event_state_eqn
            state_names: Optional state variable names
            default_time_step: Time step used when state_eqn gets no dt

        Raises:
            ConstructionError: On invalid sizes, counts or names
        """
        super().__init__(
            state_size,
            inputs,
            outputs,
            state_names=state_names,
            default_time_step=default_time_step,
        )
        self._predicted_outputs = VariableNames(
            predicted_outputs, role="predicted output"
        )
        self._events = VariableNames(events, role="event", allow_empty=False)

        if input_parameter_count is None:
            input_parameter_count = self.input_size
        self._input_parameter_count = _check_count(
            input_parameter_count, "input_parameter_count", 0
        )

    @property
    def input_parameter_count(self) -> int:
        """Number of input parameters required by input_eqn."""
        return self._input_parameter_count

    @property
    def predicted_outputs(self) -> VariableNames:
        """Names of the predicted outputs produced by the model."""
        return self._predicted_outputs

    @property
    def events(self) -> VariableNames:
        """Names of the events whose state event_state_eqn reports."""
        return self._events

    def get_predicted_output_vector(self) -> PredictedOutputVector:
        """Create a zero predicted-output vector sized for this model."""
        return PredictedOutputVector(len(self._predicted_outputs))

    def get_event_state_vector(self) -> EventStateVector:
        """Create a zero event-state vector sized for this model."""
        return EventStateVector(len(self._events))

    def threshold_eqn(self, t: float, x: StateVector, u: InputVector) -> bool:
        """Calculate whether the model threshold is reached.

        Args:
            t: Time
            x: State vector at the current time step
            u: Input vector at the current time step

        Returns:
            True if the threshold is reached; otherwise False
        """
        x = self._state_arg(x, "threshold_eqn")
        u = self._input_arg(u, "threshold_eqn")
        return bool(self._threshold_eqn(t, x, u))

    def event_state_eqn(self, x: Sequence[float]) -> EventStateVector:
        """Calculate the event state for each event.

        Args:
            x: State values, as a state vector or any numeric sequence

        Returns:
            One value per event; conventionally in [0, 1] with 1 healthy
            and 0 failed. Values are not clipped.
        """
        x = self._state_arg(x, "event_state_eqn")
        result = self._event_state_eqn(x)
        return coerce_vector(
            EventStateVector,
            result,
            len(self._events),
            PostconditionError,
            "event_state_eqn",
        )

    def input_eqn(
        self,
        t: float,
        params: Sequence[float],
        load_estimate: Sequence[float] = (),
    ) -> InputVector:
        """Derive the input vector from the given input parameters.

        Args:
            t: Time at the current time step
            params: Model-specific parameters describing future operating
                    conditions; exactly input_parameter_count values
            load_estimate: Optional load estimate sequence

        Returns:
            Input vector usable by state_eqn

        Raises:
            PreconditionError: If len(params) != input_parameter_count
        """
        params = _as_sequence(params, "params")
        if params.size != self._input_parameter_count:
            raise PreconditionError(
                f"input_eqn: expected {self._input_parameter_count} input "
                f"parameters, got {params.size}"
            )
        load_estimate = _as_sequence(load_estimate, "load_estimate")

        result = self._input_eqn(t, params, load_estimate)
        return coerce_vector(
            InputVector, result, self.input_size, PostconditionError, "input_eqn"
        )

    def predicted_output_eqn(
        self,
        t: float,
        x: StateVector,
        u: InputVector,
        z: OutputVector,
    ) -> PredictedOutputVector:
        """Calculate predicted outputs of the model.

        Predicted outputs are not measured but are of interest for
        prognostics (e.g. remaining capacity).

        Args:
            t: Time
            x: State vector at the current time step
            u: Input vector at the current time step
            z: Output vector at the current time step

        Returns:
            Predicted output vector, one value per predicted output name
        """
        context = "predicted_output_eqn"
        x = self._state_arg(x, context)
        u = self._input_arg(u, context)
        z = self._output_arg(z, context)

        result = self._predicted_output_eqn(t, x, u, z)
        return coerce_vector(
            PredictedOutputVector,
            result,
            len(self._predicted_outputs),
            PostconditionError,
            context,
        )

    @abstractmethod
    def _threshold_eqn(self, t: float, x: StateVector, u: InputVector) -> bool:
        """Failure predicate; must be a pure function of its arguments."""

    @abstractmethod
    def _event_state_eqn(self, x: StateVector) -> Sequence[float]:
        """Event state per declared event."""

    @abstractmethod
    def _input_eqn(
        self,
        t: float,
        params: np.ndarray,
        load_estimate: np.ndarray,
    ) -> InputVector:
        """Input vector from a length-checked parameter array."""

    @abstractmethod
    def _predicted_output_eqn(
        self,
        t: float,
        x: StateVector,
        u: InputVector,
        z: OutputVector,
    ) -> PredictedOutputVector:
        """Predicted outputs from length-checked vectors."""

    def describe(self) -> dict:
        """Summarize the model's shape for logging and serialization."""
        return {
            "model": type(self).__name__,
            "state_names": list(self.state_names),
            "inputs": list(self.inputs),
            "outputs": list(self.outputs),
            "predicted_outputs": list(self._predicted_outputs),
            "events": list(self._events),
            "input_parameter_count": self._input_parameter_count,
            "default_time_step": self.default_time_step,
        }


