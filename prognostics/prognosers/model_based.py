"""
Model-Based Prognoser

Tracks a component's state with a prognostics model and predicts time to
event by simulating the model forward under configured load parameters.

The monitor step propagates the state open-loop through the model's state
equation from one data point to the next; plugging in a filter that also
corrects the state from measured outputs is left to subclasses.
"""

import math
from collections.abc import Mapping, Sequence
from typing import Optional

from prognostics.config import ConfigMap
from prognostics.exceptions import ConfigurationError, PreconditionError
from prognostics.models.factory import ModelFactory
from prognostics.models.prognostics_model import PrognosticsModel
from prognostics.models.vectors import InputVector, OutputVector, StateVector
from prognostics.prediction import PredictionConfig, predict_time_to_event
from prognostics.prognosers.common import CommonPrognoser


def parse_load_parameters(samples, expected: int) -> list[list[float]]:
    """Normalize configured load parameters into a list of samples.

    A flat list of numbers is a single sample.

    Raises:
        ConfigurationError: If samples are empty, not numeric or have the
            wrong number of values
    """
    if not isinstance(samples, Sequence) or isinstance(samples, str) or not samples:
        raise ConfigurationError("load_parameters must be a non-empty list of samples")

    if not isinstance(samples[0], Sequence) or isinstance(samples[0], str):
        samples = [samples]

    parsed = []
    for sample in samples:
        if not isinstance(sample, Sequence) or isinstance(sample, str):
            raise ConfigurationError(f"Load parameter sample {sample!r} is not a list")
        try:
            values = [float(v) for v in sample]
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Load parameter sample {sample!r} is not numeric") from e
        if len(values) != expected:
            raise ConfigurationError(
                f"Load parameter sample {values} has {len(values)} values, "
                f"model expects {expected}"
            )
        parsed.append(values)
    return parsed


class ModelBasedPrognoser(CommonPrognoser):
    """Prognoser built around a PrognosticsModel.

    Configuration keys:
        model: Name of the model in ModelFactory (required)
        load_parameters: List of input parameter samples (required), each
                         with model.input_parameter_count values
        load_estimate: Optional load estimate passed to input_eqn
        prediction: PredictionConfig section (horizon, time_step)
        plus any keys the model's from_config() reads

    Example:
        >>> prognoser = ModelBasedPrognoser(ConfigMap.from_yaml("config/battery_prognoser.yaml"))
        >>> prognoser.set_data(0.0, {"load": 2.0}, {"voltage": 4.1})
        >>> results = prognoser.run_step()
        >>> results.time_to_event["EOD"]["mean"]
    """

    def __init__(
        self,
        config: Optional[ConfigMap] = None,
        model: Optional[PrognosticsModel] = None,
    ):
        """Initialize prognoser.

        Args:
            config: Configuration map
            model: Optional model instance; overrides the `model` config key
        """
        super().__init__(config)
        self.log.debug("Configuring")

        if model is None:
            self.config.require("model")
            model = ModelFactory.create(self.config["model"], self.config)
        self.model = model

        self.config.require("load_parameters")
        self.load_parameters = parse_load_parameters(
            self.config["load_parameters"], self.model.input_parameter_count
        )
        self.load_estimate = [float(v) for v in self.config.get("load_estimate", [])]
        self.prediction_config = PredictionConfig.from_config(self.config.section("prediction"))

        self.state: Optional[StateVector] = None
        self.last_time: Optional[float] = None
        self.last_input: Optional[InputVector] = None
        self._data: Optional[tuple[float, InputVector, OutputVector]] = None
        self._raw_data: Optional[tuple[float, Mapping, Mapping]] = None

        self.log.info(
            "Configured %s with %d load parameter samples",
            type(self.model).__name__,
            len(self.load_parameters),
        )

    def set_data(
        self,
        t: float,
        inputs: Mapping[str, float],
        outputs: Mapping[str, float],
    ) -> None:
        """Provide the latest sensor readings.

        Args:
            t: Data time
            inputs: Input name -> measured value
            outputs: Output name -> measured value
        """
        self._raw_data = (float(t), inputs, outputs)

    def check_input_validity(self) -> None:
        """Convert the latest readings into model vectors.

        Raises:
            PreconditionError: On missing/unknown names or non-increasing time
        """
        if self._raw_data is None:
            return
        t, inputs, outputs = self._raw_data
        if self.last_time is not None and t <= self.last_time:
            raise PreconditionError(
                f"Data time {t} does not advance past last step at {self.last_time}"
            )
        u = self.model.inputs.from_mapping(InputVector, inputs)
        z = self.model.outputs.from_mapping(OutputVector, outputs)
        self._data = (t, u, z)

    def is_enough_data(self) -> bool:
        return self._data is not None

    def step(self) -> None:
        t, u, z = self._data
        self._data = None
        self._raw_data = None

        self.log.debug("Running Monitor Step")
        if self.state is None:
            x = self.model.initialize(u, z)
        else:
            x = self.model.state_eqn(self.last_time, self.state, self.last_input, t - self.last_time)

        self.results.time = t
        self.results.state = self.model.state_names.to_dict(x)
        self.results.event_state = self.model.events.to_dict(self.model.event_state_eqn(x))
        z_model = self.model.output_eqn(t, x, u)
        self.results.predicted_outputs = self.model.predicted_outputs.to_dict(
            self.model.predicted_output_eqn(t, x, u, z_model)
        )

        self.log.debug("Running Prediction Step")
        prediction = predict_time_to_event(
            self.model,
            x,
            self.load_parameters,
            t0=t,
            load_estimate=self.load_estimate,
            config=self.prediction_config,
        )
        self.results.time_to_event[prediction.event] = prediction.to_dict()

        # Only a completed step moves the tracked state forward
        self.state, self.last_time, self.last_input = x, t, u

    def check_result_validity(self) -> None:
        if not all(math.isfinite(v) for v in self.results.state.values()):
            self.log.warning("Non-finite state estimate at t=%s", self.results.time)
            self.results.valid = False
