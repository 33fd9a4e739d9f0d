"""Prognostics model contract, vectors and reference models."""

from prognostics.models.vectors import (
    EventStateVector,
    InputVector,
    NamedVector,
    OutputVector,
    PredictedOutputVector,
    StateVector,
    VariableNames,
)
from prognostics.models.base import Model
from prognostics.models.prognostics_model import PrognosticsModel
from prognostics.models.battery import BatteryParameters, SimpleBatteryModel
from prognostics.models.factory import ModelFactory

__all__ = [
    # Vectors
    "NamedVector",
    "StateVector",
    "InputVector",
    "OutputVector",
    "PredictedOutputVector",
    "EventStateVector",
    "VariableNames",
    # Contract
    "Model",
    "PrognosticsModel",
    # Reference models
    "BatteryParameters",
    "SimpleBatteryModel",
    "ModelFactory",
]
