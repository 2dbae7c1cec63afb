"""
Utility Functions

Helper functions for configuration, logging, and I/O.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from ..config import PredictorConfig
from ..exceptions import ConfigurationError


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def load_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to YAML config file

    Returns:
        Configuration dictionary
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        try:
            config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigurationError(f"{config_path} must contain a mapping")
    return config


def save_config(config: Dict[str, Any],
                config_path: Union[str, Path]) -> None:
    """Save configuration to YAML file."""
    config_path = Path(config_path)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w') as f:
        yaml.dump(config, f, default_flow_style=False)


def load_predictor_config(config_path: Union[str, Path]) -> PredictorConfig:
    """Load and validate a single predictor configuration from YAML."""
    return PredictorConfig.from_dict(load_config(config_path)).validate()


def load_sweep_configs(config_path: Union[str, Path]) -> List[PredictorConfig]:
    """
    Load a list of predictor configurations from YAML.

    The file holds a 'configs' list of mappings. A mapping whose width
    values are lists is expanded into every combination, e.g.

        configs:
          - scheme: gshare
            m1: [8, 10, 12]
            n: 4
    """
    data = load_config(config_path)
    entries = data.get('configs')
    if not isinstance(entries, list) or not entries:
        raise ConfigurationError(f"{config_path} must define a non-empty 'configs' list")

    configs = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise ConfigurationError(f"Sweep entry must be a mapping, got {entry!r}")
        for expanded in _expand_grid(entry):
            configs.append(PredictorConfig.from_dict(expanded).validate())
    return configs


def _expand_grid(entry: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Cartesian product over list-valued keys."""
    combos = [{}]
    for key, value in entry.items():
        values = value if isinstance(value, list) else [value]
        combos = [dict(combo, **{key: v}) for combo in combos for v in values]
    return combos


def save_results(results: Dict[str, Any],
                 output_dir: Union[str, Path],
                 name: str = "results",
                 formats: tuple = ('json',)) -> Dict[str, Path]:
    """
    Save results to multiple formats.

    Args:
        results: Results dictionary
        output_dir: Output directory
        name: Base filename
        formats: Output formats ('json', 'yaml')

    Returns:
        Dictionary of format -> output path
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    base_name = f"{name}_{timestamp}"

    output_paths = {}

    if 'json' in formats:
        json_path = output_dir / f"{base_name}.json"
        with open(json_path, 'w') as f:
            json.dump(results, f, indent=2, default=str)
        output_paths['json'] = json_path

    if 'yaml' in formats:
        yaml_path = output_dir / f"{base_name}.yaml"
        with open(yaml_path, 'w') as f:
            yaml.dump(results, f, default_flow_style=False)
        output_paths['yaml'] = yaml_path

    return output_paths


def setup_logging(level: str = "INFO",
                  log_file: Optional[Union[str, Path]] = None) -> logging.Logger:
    """
    Setup logging configuration.

    Args:
        level: Logging level
        log_file: Optional log file path

    Returns:
        Logger instance
    """
    logger = logging.getLogger("bpsim")
    logger.setLevel(getattr(logging, level.upper()))

    # Repeated calls (e.g. several CLI invocations in one process) replace handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console_handler)

    # File handler (if specified)
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(file_handler)

    return logger


def create_predictor(config: Union[PredictorConfig, Dict[str, Any]]):
    """
    Create predictor instance from configuration.

    Args:
        config: PredictorConfig, or a mapping accepted by PredictorConfig.from_dict

    Returns:
        Predictor instance
    """
    from ..predictors import PREDICTORS

    if isinstance(config, dict):
        config = PredictorConfig.from_dict(config)
    config.validate()

    return PREDICTORS[config.scheme](config)
