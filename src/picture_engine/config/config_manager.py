"""Hydra-backed loading of the picture-engine configuration."""

import logging
from typing import List, Optional, Union
from pathlib import Path
from omegaconf import DictConfig, OmegaConf
from hydra import compose, initialize_config_dir
from hydra.core.global_hydra import GlobalHydra

from .validators import validate_config

logger = logging.getLogger(__name__)

# conf/ directory shipped next to the package modules
DEFAULT_CONFIG_DIR = Path(__file__).resolve().parent.parent / "conf"


class ConfigManager:
    """Composes config.yaml plus command line overrides into a DictConfig."""

    def __init__(self, config_dir: Optional[Union[str, Path]] = None):
        """Initialize configuration manager.

        Args:
            config_dir: Directory holding config.yaml. Defaults to the packaged one.
        """
        self.config_dir = Path(config_dir or DEFAULT_CONFIG_DIR).resolve()
        self.config: Optional[DictConfig] = None

        if not self.config_dir.is_dir():
            raise FileNotFoundError(f"Configuration directory not found: {self.config_dir}")

    def load_config(self,
                    config_name: str = "config",
                    overrides: Optional[List[str]] = None,
                    validate: bool = True) -> DictConfig:
        """Compose the configuration.

        Args:
            config_name: Name of the main config file (without .yaml)
            overrides: Hydra overrides such as "engine.max_execution_time=2"
            validate: Whether to run the section validators

        Returns:
            The composed configuration

        Raises:
            ConfigValidationError: If validation is requested and fails
        """
        overrides = list(overrides or [])

        # compose() needs a fresh global Hydra; never leave one behind
        GlobalHydra.instance().clear()
        try:
            with initialize_config_dir(config_dir=str(self.config_dir), version_base=None):
                config = compose(config_name=config_name, overrides=overrides)
        except Exception as e:
            logger.error(f"Could not compose '{config_name}' from {self.config_dir}: {e}")
            raise
        finally:
            GlobalHydra.instance().clear()

        if validate:
            validate_config(config)

        self.config = config
        logger.debug(f"Composed '{config_name}' with overrides {overrides}")
        return config

    def save_config(self, output_path: Union[str, Path]) -> Path:
        """Write the loaded configuration as YAML.

        Returns:
            The path written to

        Raises:
            RuntimeError: If nothing has been loaded yet
        """
        if self.config is None:
            raise RuntimeError("No configuration loaded. Call load_config() first.")

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        OmegaConf.save(self.config, output_path, resolve=True)

        logger.info(f"Configuration written to {output_path}")
        return output_path


def load_config(config_name: str = "config",
                overrides: Optional[List[str]] = None,
                config_dir: Optional[Union[str, Path]] = None,
                validate: bool = True) -> DictConfig:
    """Compose a configuration with a throwaway ConfigManager."""
    return ConfigManager(config_dir).load_config(config_name, overrides, validate)
