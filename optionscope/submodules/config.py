"""
Engine Configuration
====================
Module-level constants plus an optional JSON settings file for callers that
want to override the defaults (risk-free rate, default IV, logging).
"""

from typing import Optional, Tuple
from dataclasses import dataclass, field
from pathlib import Path
import json
import os
import re


# =============================================================================
# CONSTANTS
# =============================================================================

RISK_FREE_RATE = 0.05
DAYS_PER_YEAR = 365
CONTRACT_MULTIPLIER = 100
DEFAULT_IV = 0.30

# Greeks for near-expiry legs are floored at this many years
MIN_GREEKS_T = 0.001

METRICS_STEP = 0.5
METRICS_RANGE = 0.5
PAYOFF_RANGE = 0.3
GRID_RANGE = 0.25

SETTINGS_ENV_VAR = "OPTIONSCOPE_SETTINGS"

_ENV_PATTERN = re.compile(r'\$\{([^}]+)\}')


# =============================================================================
# SETTINGS MODELS
# =============================================================================

@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    file_path: Optional[str] = None

    def validate(self) -> Tuple[bool, Optional[str]]:
        """
        Validate logging configuration.

        Returns
        -------
        tuple
            (is_valid, error_message)
        """
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if not isinstance(self.level, str) or self.level.upper() not in valid_levels:
            return False, f"Log level must be one of {valid_levels}"
        if self.file_path is not None and not str(self.file_path).strip():
            return False, "Log file path cannot be blank"
        return True, None


@dataclass
class Settings:
    """Defaults applied when a caller does not pass explicit values."""
    risk_free_rate: float = RISK_FREE_RATE
    default_iv: float = DEFAULT_IV
    metrics_range: float = METRICS_RANGE
    metrics_step: float = METRICS_STEP
    payoff_range: float = PAYOFF_RANGE
    logging_config: LoggingConfig = field(default_factory=LoggingConfig)

    def validate(self) -> Tuple[bool, Optional[str]]:
        """
        Validate the settings.

        Returns
        -------
        tuple
            (is_valid, error_message)
        """
        if not -1.0 < self.risk_free_rate < 1.0:
            return False, "Risk-free rate must be a fraction between -1 and 1"
        if self.default_iv < 0:
            return False, "Default implied volatility cannot be negative"
        if not 0 < self.metrics_range < 1:
            return False, "Metrics search range must be between 0 and 1"
        if self.metrics_step <= 0:
            return False, "Metrics step must be positive"
        if not 0 < self.payoff_range < 1:
            return False, "Payoff range must be between 0 and 1"

        is_valid, error = self.logging_config.validate()
        if not is_valid:
            return False, f"Logging config error: {error}"

        return True, None


# =============================================================================
# LOADING
# =============================================================================

def _substitute_env_vars(data):
    """Recursively replace ${VAR_NAME} references with environment values."""
    if isinstance(data, dict):
        return {key: _substitute_env_vars(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [_substitute_env_vars(item) for item in data]
    elif isinstance(data, str):
        result = data
        for var_name in _ENV_PATTERN.findall(data):
            result = result.replace(f'${{{var_name}}}', os.environ.get(var_name, ''))
        return result
    return data


def load_settings(path: Optional[str] = None) -> Settings:
    """
    Load engine settings from a JSON file.

    Parameters
    ----------
    path : str, optional
        Settings file. Falls back to the ``OPTIONSCOPE_SETTINGS`` environment
        variable, then to built-in defaults when neither is set.

    Returns
    -------
    Settings

    Raises
    ------
    FileNotFoundError
        If an explicit settings path does not exist
    ValueError
        If the file is not valid JSON or a value fails validation

    Examples
    --------
    >>> settings = load_settings('settings.json')
    >>> settings.risk_free_rate
    0.045
    """
    path = path or os.environ.get(SETTINGS_ENV_VAR)
    if not path:
        return Settings()

    settings_path = Path(path)
    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    try:
        with open(settings_path, 'r') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in settings file {settings_path}: {e.msg}") from e

    data = _substitute_env_vars(data)
    logging_data = data.get('logging', {})

    try:
        settings = Settings(
            risk_free_rate=float(data.get('risk_free_rate', RISK_FREE_RATE)),
            default_iv=float(data.get('default_iv', DEFAULT_IV)),
            metrics_range=float(data.get('metrics_range', METRICS_RANGE)),
            metrics_step=float(data.get('metrics_step', METRICS_STEP)),
            payoff_range=float(data.get('payoff_range', PAYOFF_RANGE)),
            logging_config=LoggingConfig(
                level=logging_data.get('level', 'INFO'),
                file_path=logging_data.get('file_path') or None,
            ),
        )
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid settings value type: {e}") from e

    is_valid, error = settings.validate()
    if not is_valid:
        raise ValueError(f"Settings validation error: {error}")

    return settings
