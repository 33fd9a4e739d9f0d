"""
Empty Prognoser

Template for creating new prognosers. Copy it, declare the events in the
constructor, and fill in step().
"""

from typing import Optional

from prognostics.config import ConfigMap
from prognostics.prognosers.common import CommonPrognoser


class EmptyPrognoser(CommonPrognoser):
    """Prognoser that logs its lifecycle and produces no values."""

    def __init__(self, config: Optional[ConfigMap] = None):
        super().__init__(config)
        # Define events for this specific prognoser, e.g.
        # self.results.event_state["EOL"] = 1.0

        self.log.debug("Configuring")
        # example_param = self.config["ExampleParam"]

    def step(self) -> None:
        self.log.debug("Running Monitor Step")
        # self.results.state["STATE1"] = 1.1

        self.log.debug("Running Prediction Step")
        # self.results.time_to_event["EOL"] = {"mean": 1.5}
