"""
Configuration Map

String-keyed configuration consulted when models and prognosers are
constructed. Values are loaded from YAML; nested mappings are exposed as
sub-sections so each component only sees its own keys.
"""

from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any, Optional

import yaml

from prognostics.exceptions import ConfigurationError


class ConfigMap(Mapping):
    """Read-only mapping of configuration values.

    Example:
        >>> config = ConfigMap({"type": "model_based", "prediction": {"horizon": 5000}})
        >>> config.require("type")
        >>> config.section("prediction")["horizon"]
        5000
    """

    def __init__(self, values: Optional[Mapping[str, Any]] = None, source: str = "<memory>"):
        """Initialize configuration map.

        Args:
            values: Configuration values keyed by string
            source: Where the values came from, used in error messages
        """
        values = dict(values or {})
        bad_keys = [k for k in values if not isinstance(k, str)]
        if bad_keys:
            raise ConfigurationError(f"Configuration keys must be strings, got {bad_keys} in {source}")
        self._values = values
        self.source = source

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "ConfigMap":
        """Load configuration from YAML file."""
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ConfigurationError(
                f"Top level of {config_path} must be a mapping, got {type(data).__name__}"
            )
        return cls(data, source=str(config_path))

    def __getitem__(self, key: str) -> Any:
        try:
            return self._values[key]
        except KeyError:
            raise ConfigurationError(f"Missing configuration key '{key}' in {self.source}") from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ConfigMap({self._values!r})"

    def require(self, *keys: str) -> None:
        """Check that all `keys` are present.

        Raises:
            ConfigurationError: Naming every missing key
        """
        missing = [key for key in keys if key not in self._values]
        if missing:
            raise ConfigurationError(
                f"Missing required configuration keys {missing} in {self.source}"
            )

    def section(self, key: str) -> "ConfigMap":
        """Return the nested mapping under `key` (empty when absent)."""
        value = self._values.get(key)
        if value is None:
            return ConfigMap({}, source=f"{self.source}:{key}")
        if not isinstance(value, Mapping):
            raise ConfigurationError(
                f"Configuration key '{key}' in {self.source} must be a mapping"
            )
        return ConfigMap(value, source=f"{self.source}:{key}")

    def to_dict(self) -> dict[str, Any]:
        """Return a shallow copy of the raw values."""
        return dict(self._values)
