"""Create prognosers from configuration by their `type` key."""

from prognostics.config import ConfigMap
from prognostics.exceptions import ConfigurationError
from prognostics.prognosers.common import CommonPrognoser
from prognostics.prognosers.empty import EmptyPrognoser
from prognostics.prognosers.model_based import ModelBasedPrognoser

PROGNOSER_CLASSES: dict[str, type] = {
    "empty": EmptyPrognoser,
    "model_based": ModelBasedPrognoser,
}


def create_prognoser(config: ConfigMap) -> CommonPrognoser:
    """Instantiate the prognoser named by config["type"].

    Raises:
        ConfigurationError: If `type` is missing or unknown
    """
    config.require("type")
    prognoser_type = config["type"]
    if prognoser_type not in PROGNOSER_CLASSES:
        available = ", ".join(sorted(PROGNOSER_CLASSES))
        raise ConfigurationError(
            f"Unknown prognoser type: '{prognoser_type}'. Available: {available}"
        )
    return PROGNOSER_CLASSES[prognoser_type](config)
