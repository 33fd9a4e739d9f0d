"""
Common Prognoser Lifecycle

Base class for prognosers. The surrounding application calls run_step()
on its own cadence; each prognoser fills in step() to read its data,
update its estimate and predict time to event.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from prognostics.config import ConfigMap
from prognostics.prognosers.results import PrognosticsResults, ResultsHistory


class CommonPrognoser(ABC):
    """Abstract base class for prognosers.

    All prognosers must implement:
    - step(): One monitoring + prediction step, writing self.results

    Optional hooks, called by run_step() around step():
    - check_input_validity(): Raise if the latest data cannot be used
    - is_enough_data(): Skip the step while data is still missing
    - check_result_validity(): Mark or reject results after the step

    Configuration keys:
        name: Module name used in log records (defaults to the class name)
        history_length: Number of results kept in history (default 500)
    """

    def __init__(self, config: Optional[ConfigMap] = None):
        """Initialize prognoser.

        Args:
            config: Configuration map. Uses an empty map if None.
        """
        self.config = config or ConfigMap()
        self.module_name = str(self.config.get("name", type(self).__name__))
        self.log = logging.getLogger(f"{__name__}.{self.module_name}")

        self.results = PrognosticsResults(valid=False)
        self.history = ResultsHistory(max_length=int(self.config.get("history_length", 500)))
        self.step_count = 0

    @abstractmethod
    def step(self) -> None:
        """Run one monitoring and prediction step."""

    def check_input_validity(self) -> None:
        """Validate the latest inputs before a step."""

    def is_enough_data(self) -> bool:
        """Whether enough data has arrived to run a step."""
        return True

    def check_result_validity(self) -> None:
        """Validate results after a step."""

    def run_step(self) -> Optional[PrognosticsResults]:
        """Run the hooks and step() once.

        Returns:
            The step's results, or None when there was not enough data

        Raises:
            Any error raised by the hooks or step(); it is logged first and
            retry policy is left to the caller.
        """
        try:
            self.check_input_validity()
            if not self.is_enough_data():
                self.log.debug("Not enough data, skipping step")
                return None

            self.results = PrognosticsResults()
            self.step()
            self.check_result_validity()
        except Exception:
            self.log.exception("Step %d failed", self.step_count + 1)
            raise

        self.step_count += 1
        self.history.add(self.results)
        return self.results
