#!/usr/bin/env python
"""
Command-line entry point for running prognostics models from a config file.

Usage:
    prognostics --config config/battery_prognoser.yaml --action describe
    prognostics --config config/battery_prognoser.yaml --action simulate
    prognostics --config config/battery_prognoser.yaml --action step
"""

import argparse
import json
import logging
import math
import sys
from typing import Optional

from prognostics.config import ConfigMap
from prognostics.models.factory import ModelFactory
from prognostics.models.vectors import InputVector, OutputVector
from prognostics.prediction import PredictionConfig, simulate_to_threshold
from prognostics.prognosers import create_prognoser, parse_load_parameters

logger = logging.getLogger(__name__)


def _json_float(value: float) -> Optional[float]:
    return None if value is None or math.isnan(value) else float(value)


def describe(config: ConfigMap) -> dict:
    """Describe the configured model's shape."""
    config.require("model")
    model = ModelFactory.create(config["model"], config)
    return model.describe()


def simulate(config: ConfigMap) -> dict:
    """Simulate the configured model to its threshold under the first load sample."""
    config.require("model", "load_parameters", "initial_data")
    model = ModelFactory.create(config["model"], config)

    data = config.section("initial_data")
    t0 = float(data.get("time", 0.0))
    u = model.inputs.from_mapping(InputVector, data["inputs"])
    z = model.outputs.from_mapping(OutputVector, data["outputs"])
    x0 = model.initialize(u, z)

    params = parse_load_parameters(config["load_parameters"], model.input_parameter_count)[0]

    result = simulate_to_threshold(
        model,
        x0,
        params,
        t0=t0,
        load_estimate=config.get("load_estimate", []),
        config=PredictionConfig.from_config(config.section("prediction")),
    )
    return {
        "model": type(model).__name__,
        "threshold_reached": result.threshold_reached,
        "time_of_event": result.time_of_event,
        "time_to_event": _json_float(result.time_to_event),
        "steps": result.steps,
        "final_state": model.state_names.to_dict(result.final_state),
        "final_event_state": model.events.to_dict(model.event_state_eqn(result.final_state)),
    }


def _json_results(results) -> dict:
    payload = results.to_dict()
    for summary in payload["time_to_event"].values():
        for key, value in summary.items():
            if isinstance(value, float):
                summary[key] = _json_float(value)
    return payload


def step(config: ConfigMap) -> dict:
    """Run prognoser steps on the configured initial data and any later data.

    `initial_data` is one reading (time, inputs, outputs); the optional
    `data` list holds further readings, stepped in order.
    """
    config.require("initial_data")
    prognoser = create_prognoser(config)
    readings = [config.section("initial_data")]
    readings += [
        ConfigMap(reading, source=f"{config.source}:data[{i}]")
        for i, reading in enumerate(config.get("data", []))
    ]

    results = None
    for reading in readings:
        if hasattr(prognoser, "set_data"):
            prognoser.set_data(float(reading.get("time", 0.0)), reading["inputs"], reading["outputs"])
        results = prognoser.run_step()

    return {
        "results": None if results is None else _json_results(results),
        "history": [_json_results(r) for r in prognoser.history.get_recent(len(readings))],
    }


ACTIONS = {
    "describe": describe,
    "simulate": simulate,
    "step": step,
}


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Prognostics model CLI")
    parser.add_argument("--config", required=True, help="Path to YAML configuration")
    parser.add_argument("--action", default="simulate", choices=sorted(ACTIONS))
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = ConfigMap.from_yaml(args.config)
        result = ACTIONS[args.action](config)
        print(json.dumps(result))
    except Exception as e:
        logger.debug("Action %s failed", args.action, exc_info=True)
        print(json.dumps({"error": str(e)}))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
