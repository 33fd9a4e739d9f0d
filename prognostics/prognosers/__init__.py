"""
Prognosers

Lifecycle wrappers that turn sensor data into state estimates, event
states and time-to-event predictions on each step.
"""

from prognostics.prognosers.results import (
    PrognosticsResults,
    ResultsHistory,
)
from prognostics.prognosers.common import CommonPrognoser
from prognostics.prognosers.empty import EmptyPrognoser
from prognostics.prognosers.model_based import ModelBasedPrognoser, parse_load_parameters
from prognostics.prognosers.factory import PROGNOSER_CLASSES, create_prognoser

__all__ = [
    # Results
    "PrognosticsResults",
    "ResultsHistory",
    # Prognosers
    "CommonPrognoser",
    "EmptyPrognoser",
    "ModelBasedPrognoser",
    "parse_load_parameters",
    "PROGNOSER_CLASSES",
    "create_prognoser",
]
