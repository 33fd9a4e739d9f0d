"""Threshold prediction by simulating prognostics models forward."""

from prognostics.prediction.simulation import (
    PredictionConfig,
    SimulationResult,
    TimeToEventPrediction,
    predict_time_to_event,
    simulate_to_threshold,
)

__all__ = [
    "PredictionConfig",
    "SimulationResult",
    "TimeToEventPrediction",
    "predict_time_to_event",
    "simulate_to_threshold",
]
