# Utils Package
from .helpers import (
    create_predictor,
    load_config,
    load_predictor_config,
    load_sweep_configs,
    save_results,
    setup_logging,
)

__all__ = [
    'create_predictor',
    'load_config',
    'load_predictor_config',
    'load_sweep_configs',
    'save_results',
    'setup_logging',
]
