"""
Base Dynamical-System Model

Abstract base class that fixes the shape of a model: the number of state
variables and the ordered input and output names. Concrete models provide
the state transition and output equations; the public methods here check
argument and result lengths so every model fails the same way.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Optional

from prognostics.exceptions import ConstructionError, PostconditionError
from prognostics.models.vectors import (
    InputVector,
    OutputVector,
    StateVector,
    VariableNames,
    coerce_vector,
)


def _check_count(value, name: str, minimum: int) -> int:
    """Validate an integer count argument."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConstructionError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise ConstructionError(f"{name} must be >= {minimum}, got {value}")
    return value


class Model(ABC):
    """Abstract base class for dynamical-system models.

    All models must implement:
    - _state_eqn(): Advance the state by one time step
    - _output_eqn(): Compute the measurable outputs
    - _initialize(): Derive an initial state from the first input/output

    The base class provides:
    - Immutable shape configuration (state size, input/output names)
    - Zero vector factories for each role
    - Length checks on every equation's arguments and results

    Models hold no simulation history; every call receives the state it
    works on, so one instance can be shared by several estimators or
    predictors.
    """

    def __init__(
        self,
        state_size: int,
        inputs: Sequence[str],
        outputs: Sequence[str],
        *,
        state_names: Optional[Sequence[str]] = None,
        default_time_step: float = 1.0,
    ):
        """Initialize the base model.

        Args:
            state_size: Number of values in the state vector
            inputs: Names of the model inputs; also fixes the input vector length
            outputs: Names of the model outputs; also fixes the output vector length
            state_names: Optional state variable names (defaults to x1..xN)
            default_time_step: Time step used when state_eqn gets no dt

        Raises:
            ConstructionError: On invalid sizes or names
        """
        self._state_size = _check_count(state_size, "state_size", 1)

        if state_names is None:
            state_names = [f"x{i}" for i in range(1, state_size + 1)]
        self._state_names = VariableNames(state_names, role="state")
        if len(self._state_names) != state_size:
            raise ConstructionError(
                f"Got {len(self._state_names)} state names for state_size={state_size}"
            )

        self._inputs = VariableNames(inputs, role="input", allow_empty=False)
        self._outputs = VariableNames(outputs, role="output", allow_empty=False)

        if isinstance(default_time_step, bool) or not isinstance(default_time_step, (int, float)):
            raise ConstructionError(
                f"default_time_step must be a number, got {default_time_step!r}"
            )
        if not default_time_step > 0:
            raise ConstructionError(
                f"default_time_step must be positive, got {default_time_step}"
            )
        self._default_time_step = float(default_time_step)

    @property
    def state_size(self) -> int:
        """Number of values in the state vector."""
        return self._state_size

    @property
    def input_size(self) -> int:
        """Number of values in the input vector."""
        return len(self._inputs)

    @property
    def output_size(self) -> int:
        """Number of values in the output vector."""
        return len(self._outputs)

    @property
    def state_names(self) -> VariableNames:
        return self._state_names

    @property
    def inputs(self) -> VariableNames:
        return self._inputs

    @property
    def outputs(self) -> VariableNames:
        return self._outputs

    @property
    def default_time_step(self) -> float:
        return self._default_time_step

    def get_state_vector(self) -> StateVector:
        """Create a zero state vector sized for this model."""
        return StateVector(self._state_size)

    def get_input_vector(self) -> InputVector:
        """Create a zero input vector sized for this model."""
        return InputVector(self.input_size)

    def get_output_vector(self) -> OutputVector:
        """Create a zero output vector sized for this model."""
        return OutputVector(self.output_size)

    # Argument coercion shared with subclasses
    def _state_arg(self, x, context: str) -> StateVector:
        return coerce_vector(StateVector, x, self._state_size, context=context)

    def _input_arg(self, u, context: str) -> InputVector:
        return coerce_vector(InputVector, u, self.input_size, context=context)

    def _output_arg(self, z, context: str) -> OutputVector:
        return coerce_vector(OutputVector, z, self.output_size, context=context)

    def state_eqn(
        self,
        t: float,
        x: StateVector,
        u: InputVector,
        dt: Optional[float] = None,
        noise: Optional[Sequence[float]] = None,
    ) -> StateVector:
        """Calculate the model state at the next time step.

        Args:
            t: Time at the current time step
            x: State vector at the current time step
            u: Input vector at the current time step
            dt: Size of the time step (defaults to default_time_step)
            noise: Optional process noise, one value per state

        Returns:
            State vector at the next time step
        """
        context = "state_eqn"
        x = self._state_arg(x, context)
        u = self._input_arg(u, context)
        if noise is not None:
            noise = self._state_arg(noise, f"{context} noise")
        dt = self._default_time_step if dt is None else float(dt)

        result = self._state_eqn(t, x, u, dt, noise)
        return coerce_vector(
            StateVector, result, self._state_size, PostconditionError, context
        )

    def output_eqn(
        self,
        t: float,
        x: StateVector,
        u: InputVector,
        noise: Optional[Sequence[float]] = None,
    ) -> OutputVector:
        """Calculate the model outputs.

        Args:
            t: Time at the current time step
            x: State vector at the current time step
            u: Input vector at the current time step
            noise: Optional sensor noise, one value per output

        Returns:
            Output vector at the current time step
        """
        context = "output_eqn"
        x = self._state_arg(x, context)
        u = self._input_arg(u, context)
        if noise is not None:
            noise = self._output_arg(noise, f"{context} noise")

        result = self._output_eqn(t, x, u, noise)
        return coerce_vector(
            OutputVector, result, self.output_size, PostconditionError, context
        )

    def initialize(self, u: InputVector, z: OutputVector) -> StateVector:
        """Derive an initial state from the first input and output readings."""
        context = "initialize"
        u = self._input_arg(u, context)
        z = self._output_arg(z, context)

        result = self._initialize(u, z)
        return coerce_vector(
            StateVector, result, self._state_size, PostconditionError, context
        )

    @abstractmethod
    def _state_eqn(
        self,
        t: float,
        x: StateVector,
        u: InputVector,
        dt: float,
        noise: Optional[StateVector],
    ) -> StateVector:
        """State transition, called with length-checked arguments."""

    @abstractmethod
    def _output_eqn(
        self,
        t: float,
        x: StateVector,
        u: InputVector,
        noise: Optional[OutputVector],
    ) -> OutputVector:
        """Output equation, called with length-checked arguments."""

    @abstractmethod
    def _initialize(self, u: InputVector, z: OutputVector) -> StateVector:
        """Initial state from length-checked input/output vectors."""

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(states={list(self._state_names)}, "
            f"inputs={list(self._inputs)}, outputs={list(self._outputs)})"
        )
