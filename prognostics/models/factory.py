"""
Model Factory

Creates prognostics models by name so prognosers can be configured from a
file. Every registered class must provide a `from_config(config)`
classmethod.
"""

from typing import Optional

from prognostics.config import ConfigMap
from prognostics.exceptions import ConfigurationError
from prognostics.models.battery import SimpleBatteryModel
from prognostics.models.prognostics_model import PrognosticsModel


class ModelFactory:
    """Registry of prognostics model classes.

    Example:
        >>> model = ModelFactory.create("battery")
        >>> model.input_parameter_count
        1
    """

    # Model class mapping
    MODEL_CLASSES: dict[str, type] = {
        "battery": SimpleBatteryModel,
    }

    @classmethod
    def register(cls, name: str, model_class: type) -> None:
        """Register a model class under `name`.

        Raises:
            TypeError: If the class is not a PrognosticsModel with from_config
            ValueError: If the name is already taken by another class
        """
        if not (isinstance(model_class, type) and issubclass(model_class, PrognosticsModel)):
            raise TypeError(f"{model_class!r} is not a PrognosticsModel subclass")
        if not callable(getattr(model_class, "from_config", None)):
            raise TypeError(f"{model_class.__name__} must define from_config()")

        existing = cls.MODEL_CLASSES.get(name)
        if existing is not None and existing is not model_class:
            raise ValueError(
                f"Model name '{name}' already registered to {existing.__name__}"
            )
        cls.MODEL_CLASSES[name] = model_class

    @classmethod
    def available(cls) -> list[str]:
        """List registered model names."""
        return sorted(cls.MODEL_CLASSES)

    @classmethod
    def create(cls, name: str, config: Optional[ConfigMap] = None) -> PrognosticsModel:
        """Instantiate the model registered under `name`.

        Raises:
            ConfigurationError: If no model is registered under `name`
        """
        if name not in cls.MODEL_CLASSES:
            raise ConfigurationError(
                f"Unknown model: '{name}'. Available: {', '.join(cls.available())}"
            )
        return cls.MODEL_CLASSES[name].from_config(config or ConfigMap())
