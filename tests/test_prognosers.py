"""
Tests for the prognoser lifecycle.
"""

import logging
from datetime import datetime

import pytest

from prognostics.config import ConfigMap
from prognostics.exceptions import ConfigurationError, PreconditionError
from prognostics.prognosers import (
    CommonPrognoser,
    EmptyPrognoser,
    ModelBasedPrognoser,
    PrognosticsResults,
    ResultsHistory,
    create_prognoser,
)

from conftest import LinearWearModel


BATTERY_CONFIG = {
    "type": "model_based",
    "name": "Battery1",
    "model": "battery",
    "load_parameters": [[1.8], [2.0], [2.2]],
    "prediction": {"horizon": 20000, "time_step": 10.0},
}


class CountingPrognoser(CommonPrognoser):
    """Records which hooks ran."""

    def __init__(self, config=None, enough_data=True, fail=False):
        super().__init__(config)
        self.enough_data = enough_data
        self.fail = fail
        self.calls = []

    def check_input_validity(self):
        self.calls.append("check_input_validity")

    def is_enough_data(self):
        self.calls.append("is_enough_data")
        return self.enough_data

    def step(self):
        self.calls.append("step")
        if self.fail:
            raise RuntimeError("boom")
        self.results.state["x"] = float(self.step_count)

    def check_result_validity(self):
        self.calls.append("check_result_validity")


class TestCommonPrognoser:

    def test_hook_order(self):
        prognoser = CountingPrognoser()
        results = prognoser.run_step()
        assert prognoser.calls == [
            "check_input_validity",
            "is_enough_data",
            "step",
            "check_result_validity",
        ]
        assert results.state == {"x": 0.0}
        assert prognoser.step_count == 1
        assert len(prognoser.history) == 1

    def test_skips_without_enough_data(self):
        prognoser = CountingPrognoser(enough_data=False)
        assert prognoser.run_step() is None
        assert "step" not in prognoser.calls
        assert len(prognoser.history) == 0

    def test_errors_are_logged_and_raised(self, caplog):
        prognoser = CountingPrognoser(fail=True)
        with caplog.at_level(logging.ERROR):
            with pytest.raises(RuntimeError, match="boom"):
                prognoser.run_step()
        assert "Step 1 failed" in caplog.text
        assert prognoser.step_count == 0

    def test_module_name_from_config(self):
        prognoser = CountingPrognoser(ConfigMap({"name": "Pump3", "history_length": 2}))
        assert prognoser.module_name == "Pump3"
        assert prognoser.log.name.endswith(".Pump3")
        for _ in range(3):
            prognoser.run_step()
        assert len(prognoser.history) == 2

    def test_results_start_invalid(self):
        assert CountingPrognoser().results.valid is False


class TestEmptyPrognoser:

    def test_logs_lifecycle(self, caplog):
        with caplog.at_level(logging.DEBUG):
            prognoser = EmptyPrognoser()
            results = prognoser.run_step()
        assert "Configuring" in caplog.text
        assert "Running Monitor Step" in caplog.text
        assert "Running Prediction Step" in caplog.text
        assert results.state == {}
        assert results.time_to_event == {}


class TestModelBasedPrognoser:

    def test_first_step_initializes_state(self):
        prognoser = ModelBasedPrognoser(ConfigMap(BATTERY_CONFIG))
        prognoser.set_data(0.0, {"load": 2.0}, {"voltage": 4.1})
        results = prognoser.run_step()

        assert results.valid
        assert results.time == 0.0
        assert results.state == pytest.approx({"charge": 2.2, "resistance": 0.05})
        assert results.event_state == pytest.approx({"EOD": 1.0})
        assert set(results.predicted_outputs) == {"capacity", "resistance"}

        summary = results.time_to_event["EOD"]
        assert summary["fraction_reached"] == 1.0
        assert len(summary["samples"]) == 3
        # Higher current drains the cell sooner
        assert summary["samples"][0] > summary["samples"][1] > summary["samples"][2]
        assert 2800.0 < summary["samples"][1] < 3100.0

    def test_later_steps_propagate_state(self):
        prognoser = ModelBasedPrognoser(ConfigMap(BATTERY_CONFIG))
        prognoser.set_data(0.0, {"load": 2.0}, {"voltage": 4.1})
        prognoser.run_step()
        prognoser.set_data(1800.0, {"load": 2.0}, {"voltage": 3.6})
        results = prognoser.run_step()

        assert results.state["charge"] == pytest.approx(1.2)
        assert results.event_state["EOD"] < 1.0
        assert results.time_to_event["EOD"]["samples"][1] < 1500.0
        assert len(prognoser.history) == 2

    def test_no_step_until_new_data(self):
        prognoser = ModelBasedPrognoser(ConfigMap(BATTERY_CONFIG))
        assert prognoser.run_step() is None
        prognoser.set_data(0.0, {"load": 2.0}, {"voltage": 4.1})
        assert prognoser.run_step() is not None
        assert prognoser.run_step() is None

    def test_missing_sensor_names(self):
        prognoser = ModelBasedPrognoser(ConfigMap(BATTERY_CONFIG))
        prognoser.set_data(0.0, {"load": 2.0}, {"temperature": 25.0})
        with pytest.raises(PreconditionError):
            prognoser.run_step()

    def test_time_must_advance(self):
        prognoser = ModelBasedPrognoser(ConfigMap(BATTERY_CONFIG))
        prognoser.set_data(10.0, {"load": 2.0}, {"voltage": 4.1})
        prognoser.run_step()
        prognoser.set_data(10.0, {"load": 2.0}, {"voltage": 4.1})
        with pytest.raises(PreconditionError):
            prognoser.run_step()

    def test_explicit_model_instance(self):
        config = ConfigMap({"load_parameters": [1.0], "prediction": {"horizon": 100}})
        prognoser = ModelBasedPrognoser(config, model=LinearWearModel())
        assert prognoser.load_parameters == [[1.0]]
        prognoser.set_data(0.0, {"load": 1.0}, {"voltage": 4.0})
        results = prognoser.run_step()
        # initialize gives wear 0 and rate 0.125
        assert results.time_to_event["EOL"]["samples"] == [8.0]

    def test_requires_model_and_load_parameters(self):
        with pytest.raises(ConfigurationError, match="model"):
            ModelBasedPrognoser(ConfigMap({"load_parameters": [[1.0]]}))
        with pytest.raises(ConfigurationError, match="load_parameters"):
            ModelBasedPrognoser(ConfigMap({"model": "battery"}))

    def test_load_parameter_count_checked(self):
        config = dict(BATTERY_CONFIG, load_parameters=[[1.0, 2.0]])
        with pytest.raises(ConfigurationError, match="expects 1"):
            ModelBasedPrognoser(ConfigMap(config))

    def test_string_load_parameters(self):
        config = dict(BATTERY_CONFIG, load_parameters=["1.8"])
        assert ModelBasedPrognoser(ConfigMap(config)).load_parameters == [[1.8]]

        config = dict(BATTERY_CONFIG, load_parameters=["fast"])
        with pytest.raises(ConfigurationError, match="not numeric"):
            ModelBasedPrognoser(ConfigMap(config))

        config = dict(BATTERY_CONFIG, load_parameters=[[1.0], "2.0"])
        with pytest.raises(ConfigurationError, match="not a list"):
            ModelBasedPrognoser(ConfigMap(config))

    def test_failed_prediction_keeps_state(self, monkeypatch):
        prognoser = ModelBasedPrognoser(ConfigMap(BATTERY_CONFIG))
        prognoser.set_data(0.0, {"load": 2.0}, {"voltage": 4.1})
        prognoser.run_step()

        def fail(*args, **kwargs):
            raise RuntimeError("prediction failed")

        with monkeypatch.context() as m:
            m.setattr("prognostics.prognosers.model_based.predict_time_to_event", fail)
            prognoser.set_data(1800.0, {"load": 2.0}, {"voltage": 3.6})
            with pytest.raises(RuntimeError):
                prognoser.run_step()

        assert prognoser.last_time == 0.0
        assert prognoser.state[0] == pytest.approx(2.2)
        assert prognoser.step_count == 1
        assert len(prognoser.history) == 1

        # The same reading can be retried once prediction works again
        prognoser.set_data(1800.0, {"load": 2.0}, {"voltage": 3.6})
        results = prognoser.run_step()
        assert results.state["charge"] == pytest.approx(1.2)


class TestFactory:

    def test_create_by_type(self):
        assert isinstance(create_prognoser(ConfigMap({"type": "empty"})), EmptyPrognoser)
        assert isinstance(create_prognoser(ConfigMap(BATTERY_CONFIG)), ModelBasedPrognoser)

    def test_unknown_type(self):
        with pytest.raises(ConfigurationError, match="Unknown prognoser type"):
            create_prognoser(ConfigMap({"type": "magic"}))

    def test_missing_type(self):
        with pytest.raises(ConfigurationError):
            create_prognoser(ConfigMap({}))


class TestResults:

    def test_round_trip_dict(self):
        results = PrognosticsResults(
            time=5.0,
            state={"charge": 1.0},
            event_state={"EOD": 0.5},
            time_to_event={"EOD": {"mean": 100.0}},
            timestamp=datetime(2024, 1, 1, 12, 0, 0),
        )
        restored = PrognosticsResults.from_dict(results.to_dict())
        assert restored == results

    def test_history_window_and_frame(self):
        history = ResultsHistory(max_length=3)
        for i in range(5):
            history.add(PrognosticsResults(
                time=float(i),
                state={"charge": 2.0 - i * 0.1},
                time_to_event={"EOD": {"mean": 100.0 - i, "samples": [1.0]}},
            ))
        assert len(history) == 3
        assert [r.time for r in history.get_recent()] == [2.0, 3.0, 4.0]
        assert [r.time for r in history.get_recent(1)] == [4.0]

        df = history.to_frame()
        assert list(df["time"]) == [2.0, 3.0, 4.0]
        assert "state.charge" in df.columns
        assert "time_to_event.EOD.mean" in df.columns
        assert "time_to_event.EOD.samples" not in df.columns

    @pytest.mark.parametrize("n", [0, -1])
    def test_get_recent_non_positive_is_empty(self, n):
        history = ResultsHistory()
        for i in range(3):
            history.add(PrognosticsResults(time=float(i)))
        assert history.get_recent(n) == []
        assert len(history.get_recent(5)) == 3
