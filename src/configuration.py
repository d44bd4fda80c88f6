"""Configuration loader."""

import logging
from typing import Any, Optional

# Environment variables are referenced in the configuration file the same way
# as in Llama Stack run.yaml, so their replacement function is used directly
from llama_stack.core.stack import replace_env_vars

import yaml
from models.config import (
    Configuration,
    DatabaseConfiguration,
    InferenceConfiguration,
    LlamaStackConfiguration,
    PricingConfiguration,
    ServiceConfiguration,
)


logger = logging.getLogger(__name__)


class LogicError(Exception):
    """Error in application logic."""


class AppConfig:
    """Process-wide holder of the service configuration.

    Every construction returns the same instance and forgets the loaded
    configuration, which tests use to start from a clean state.
    """

    _instance = None

    def __new__(cls, *args: Any, **kwargs: Any) -> "AppConfig":
        """Return the shared instance, creating it on first use."""
        if not isinstance(cls._instance, cls):
            cls._instance = super().__new__(cls, *args, **kwargs)
        return cls._instance

    def __init__(self) -> None:
        """Start without configuration."""
        self._configuration: Optional[Configuration] = None

    def load_configuration(self, filename: str) -> None:
        """Load configuration from YAML file, resolving ${env.NAME} references."""
        with open(filename, encoding="utf-8") as fin:
            config_dict = yaml.safe_load(fin)
        self.init_from_dict(replace_env_vars(config_dict))
        logger.info("Loaded configuration from %s", filename)

    def init_from_dict(self, config_dict: dict[Any, Any]) -> None:
        """Validate configuration given as a dictionary and make it current."""
        self._configuration = Configuration(**config_dict)

    def is_loaded(self) -> bool:
        """Check whether the configuration has been loaded."""
        return self._configuration is not None

    def _loaded(self) -> Configuration:
        if self._configuration is None:
            raise LogicError("logic error: configuration is not loaded")
        return self._configuration

    @property
    def configuration(self) -> Configuration:
        """Return the whole configuration."""
        return self._loaded()

    @property
    def service_configuration(self) -> ServiceConfiguration:
        """Return service configuration."""
        return self._loaded().service

    @property
    def llama_stack_configuration(self) -> LlamaStackConfiguration:
        """Return Llama stack configuration."""
        return self._loaded().llama_stack

    @property
    def database_configuration(self) -> DatabaseConfiguration:
        """Return account database configuration."""
        return self._loaded().database

    @property
    def inference(self) -> InferenceConfiguration:
        """Return configuration of the invoked model."""
        return self._loaded().inference

    @property
    def pricing(self) -> PricingConfiguration:
        """Return per-unit pricing configuration."""
        return self._loaded().pricing


configuration: AppConfig = AppConfig()
