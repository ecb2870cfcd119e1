# config.py

import logging
import threading
from typing import Optional, Tuple

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, model_validator

from errors import ConfigError

logger = logging.getLogger(__name__)


def _lowercase_keys(data):
    # Keys are matched case-insensitively ("Repositories" == "repositories").
    if isinstance(data, dict):
        return {str(key).lower(): value for key, value in data.items()}
    return data


class RepositoryRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(validation_alias=AliasChoices("name", "matchkey"))
    commands: Tuple[str, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def normalize_keys(cls, data):
        return _lowercase_keys(data)


class Configuration(BaseModel):
    """
    Immutable snapshot of the service configuration.
    """
    model_config = ConfigDict(frozen=True)

    logfile: str = Field("-", validation_alias=AliasChoices("logfile", "logdestination"))
    address: str = Field("0.0.0.0", validation_alias=AliasChoices("address", "listenaddress"))
    port: int = Field(validation_alias=AliasChoices("port", "listenport"), ge=0, le=65535)
    secret: str = Field(validation_alias=AliasChoices("secret", "sharedsecret"))
    repositories: Tuple[RepositoryRule, ...] = ()
    command_timeout: Optional[float] = Field(None, gt=0)

    @model_validator(mode="before")
    @classmethod
    def normalize_keys(cls, data):
        return _lowercase_keys(data)


def parse_config(data) -> Configuration:
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration must be a mapping, got {type(data).__name__}.")
    try:
        return Configuration.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


class ConfigStore:
    """
    Holds the active configuration and swaps it as a whole on (re)load.

    Readers take `current` once and keep that snapshot; a reload only
    rebinds the reference, so a snapshot is never modified after the fact.
    """

    def __init__(self):
        self._config: Optional[Configuration] = None
        self._source: Optional[str] = None
        self._lock = threading.Lock()

    @property
    def source(self) -> Optional[str]:
        return self._source

    @property
    def current(self) -> Configuration:
        config = self._config
        if config is None:
            raise ConfigError("No configuration has been loaded.")
        return config

    def load(self, source: str) -> Configuration:
        """
        Read and validate the YAML/JSON file at `source`, then make it the active configuration.

        Raises:
            ConfigError: the file cannot be read, parsed or validated. The active configuration is left untouched.
        """
        with self._lock:
            try:
                with open(source, 'r') as f:
                    data = yaml.safe_load(f)
            except OSError as e:
                logger.error(f"Cannot read configuration file '{source}': {e}")
                raise ConfigError(f"Cannot read configuration file '{source}': {e}") from e
            except yaml.YAMLError as e:
                logger.error(f"Error parsing configuration file '{source}': {e}")
                raise ConfigError(f"Error parsing configuration file '{source}': {e}") from e

            config = parse_config(data)
            self._config = config
            self._source = source

        logger.info(
            f"Configuration loaded from '{source}' ({len(config.repositories)} repositories)."
        )
        return config

    def reload(self) -> Configuration:
        if self._source is None:
            raise ConfigError("Cannot reload: no configuration source has been loaded yet.")
        return self.load(self._source)
