"""
Configuration management using Dynaconf for the simulation constants.

This module loads sampling grids, channel model coefficients, performance
limits and logging settings from a TOML file and provides validation and
default value management. The built-in defaults reproduce the documented
profile constants, so the generators also work without any file on disk.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from dynaconf import Dynaconf

from .channel import ChannelModel
from .models import CountryProfile
from .sampling import SamplingPlan

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_CONFIG = """# Broadcast Waveform Simulator Configuration
# Simulation constants are illustrative, not physically derived.

[fm]
# Mexico FM broadcast profile
sample_rate = 100000.0  # Hz
visual_window = 0.01  # seconds
attenuation_coefficient = 80.0  # 1/s
fading_frequency = 20.0  # Hz

[ofdm]
# Singapore 5G sub-6 GHz profile
sample_rate = 20000000000.0  # Hz
visual_window = 4e-6  # seconds, with received trace
single_trace_window = 1e-6  # seconds, transmitted trace only
attenuation_coefficient = 3000000.0  # 1/s
fading_frequency = 2000000.0  # Hz

[channel]
# Fading envelope: floor + depth * cos(2*pi*f*t)
fading_floor = 0.7
fading_depth = 0.3

[performance]
subcarrier_chunk_size = 32
max_samples = 1000000

[logging]
level = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
log_generation_metrics = true
"""


class ConfigurationError(Exception):
    """Exception raised for configuration-related errors."""

    pass


class ConfigurationManager:
    """Centralized configuration manager using Dynaconf."""

    def __init__(self, config_file: Optional[str] = None, create_default: bool = True):
        """Initialize configuration manager.

        Args:
            config_file: Path to configuration file (defaults to waveform_config.toml)
            create_default: Whether to create default config if file doesn't exist
        """
        self.config_file = str(config_file or "waveform_config.toml")
        self.config_path = Path(self.config_file)

        if not self.config_path.exists() and create_default:
            self._create_default_config()

        try:
            self.settings = Dynaconf(
                settings_files=[self.config_file],
                load_dotenv=True,
                envvar_prefix="WAVEFORM",
            )
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {e}") from e

        self._validate_configuration()

        logger.info(f"Configuration loaded from {self.config_file}")

    def _create_default_config(self) -> None:
        """Create a default configuration file."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "w", encoding="utf-8") as f:
            f.write(DEFAULT_CONFIG)

        logger.info(f"Created default configuration file: {self.config_file}")

    def _validate_configuration(self) -> None:
        """Validate configuration parameters."""
        errors = []

        for section in ("fm", "ofdm"):
            try:
                profile_config = self._get_profile_section(section)

                if profile_config["sample_rate"] <= 0:
                    errors.append(f"{section}.sample_rate must be positive")

                if profile_config["visual_window"] <= 0:
                    errors.append(f"{section}.visual_window must be positive")

                if profile_config["attenuation_coefficient"] < 0:
                    errors.append(f"{section}.attenuation_coefficient must be non-negative")

                if profile_config["fading_frequency"] < 0:
                    errors.append(f"{section}.fading_frequency must be non-negative")

            except (TypeError, ValueError) as e:
                errors.append(f"Error validating {section} configuration: {e}")

        try:
            ofdm = self.get_ofdm_config()
            if ofdm["single_trace_window"] <= 0:
                errors.append("ofdm.single_trace_window must be positive")

            channel = self.get_channel_config()
            if channel["fading_depth"] < 0:
                errors.append("channel.fading_depth must be non-negative")
            if channel["fading_floor"] < channel["fading_depth"]:
                errors.append("channel.fading_floor must be >= channel.fading_depth")

            performance = self.get_performance_config()
            if performance["subcarrier_chunk_size"] < 1:
                errors.append("performance.subcarrier_chunk_size must be >= 1")
            if performance["max_samples"] < 1:
                errors.append("performance.max_samples must be >= 1")

            if self.get_logging_config()["level"] not in VALID_LOG_LEVELS:
                errors.append(f"logging.level must be one of {', '.join(VALID_LOG_LEVELS)}")

        except (TypeError, ValueError) as e:
            errors.append(f"Error validating configuration: {e}")

        if errors:
            error_msg = "Configuration validation failed:\n" + "\n".join(
                f"  - {error}" for error in errors
            )
            raise ConfigurationError(error_msg)

    def _get_profile_section(self, section: str) -> Dict[str, float]:
        if section == "fm":
            return self.get_fm_config()
        return self.get_ofdm_config()

    def get_fm_config(self) -> Dict[str, float]:
        """Get FM profile sampling and channel parameters.

        Returns:
            Dictionary with FM configuration
        """
        return {
            "sample_rate": float(self.settings.get("fm.sample_rate", 1e5)),
            "visual_window": float(self.settings.get("fm.visual_window", 0.01)),
            "attenuation_coefficient": float(
                self.settings.get("fm.attenuation_coefficient", 80.0)
            ),
            "fading_frequency": float(self.settings.get("fm.fading_frequency", 20.0)),
        }

    def get_ofdm_config(self) -> Dict[str, float]:
        """Get OFDM profile sampling and channel parameters.

        Returns:
            Dictionary with OFDM configuration
        """
        return {
            "sample_rate": float(self.settings.get("ofdm.sample_rate", 20e9)),
            "visual_window": float(self.settings.get("ofdm.visual_window", 4e-6)),
            "single_trace_window": float(self.settings.get("ofdm.single_trace_window", 1e-6)),
            "attenuation_coefficient": float(
                self.settings.get("ofdm.attenuation_coefficient", 3e6)
            ),
            "fading_frequency": float(self.settings.get("ofdm.fading_frequency", 2e6)),
        }

    def get_channel_config(self) -> Dict[str, float]:
        """Get fading envelope parameters shared by both profiles."""
        return {
            "fading_floor": float(self.settings.get("channel.fading_floor", 0.7)),
            "fading_depth": float(self.settings.get("channel.fading_depth", 0.3)),
        }

    def get_performance_config(self) -> Dict[str, int]:
        """Get generation limits."""
        return {
            "subcarrier_chunk_size": int(self.settings.get("performance.subcarrier_chunk_size", 32)),
            "max_samples": int(self.settings.get("performance.max_samples", 1000000)),
        }

    def get_logging_config(self) -> Dict[str, Any]:
        """Get logging configuration parameters.

        Returns:
            Dictionary with logging configuration
        """
        return {
            "level": str(self.settings.get("logging.level", "INFO")).upper(),
            "log_generation_metrics": bool(
                self.settings.get("logging.log_generation_metrics", True)
            ),
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by key.

        Args:
            key: Configuration key (supports dot notation, e.g., 'fm.sample_rate')
            default: Default value if key is not found

        Returns:
            Configuration value
        """
        return self.settings.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value.

        Args:
            key: Configuration key (supports dot notation)
            value: Value to set
        """
        self.settings.set(key, value)

    def reload(self) -> None:
        """Reload configuration from file."""
        try:
            self.settings.reload()
        except Exception as e:
            raise ConfigurationError(f"Failed to reload configuration: {e}") from e
        self._validate_configuration()
        logger.info("Configuration reloaded successfully")

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "fm": self.get_fm_config(),
            "ofdm": self.get_ofdm_config(),
            "channel": self.get_channel_config(),
            "performance": self.get_performance_config(),
            "logging": self.get_logging_config(),
        }

    def create_sampling_plan(
        self, profile: Union[CountryProfile, str], include_received: bool = True
    ) -> SamplingPlan:
        """Create the sampling grid configured for a profile.

        Args:
            profile: Country profile
            include_received: For the 5G profile, whether the received trace
                is shown (selects the longer window)

        Returns:
            SamplingPlan instance
        """
        profile = CountryProfile.parse(profile)
        if profile is CountryProfile.MEXICO_FM:
            fm = self.get_fm_config()
            return SamplingPlan(sample_rate=fm["sample_rate"], window=fm["visual_window"])

        ofdm = self.get_ofdm_config()
        window = ofdm["visual_window"] if include_received else ofdm["single_trace_window"]
        return SamplingPlan(sample_rate=ofdm["sample_rate"], window=window)

    def create_channel_model(self, profile: Union[CountryProfile, str]) -> ChannelModel:
        """Create the channel model configured for a profile."""
        profile = CountryProfile.parse(profile)
        section = (
            self.get_fm_config() if profile is CountryProfile.MEXICO_FM else self.get_ofdm_config()
        )
        channel = self.get_channel_config()
        return ChannelModel(
            attenuation_coefficient=section["attenuation_coefficient"],
            fading_frequency=section["fading_frequency"],
            fading_floor=channel["fading_floor"],
            fading_depth=channel["fading_depth"],
        )

    def __repr__(self) -> str:
        return f"ConfigurationManager(config_file='{self.config_file}')"


# Global configuration instance
_global_config: Optional[ConfigurationManager] = None


def get_config(
    config_file: Optional[str] = None, create_default: bool = True
) -> ConfigurationManager:
    """Get global configuration instance.

    Args:
        config_file: Path to configuration file
        create_default: Whether to create default config if file doesn't exist

    Returns:
        ConfigurationManager instance
    """
    global _global_config

    if _global_config is None or config_file is not None:
        _global_config = ConfigurationManager(config_file, create_default)

    return _global_config


def reload_config() -> None:
    """Reload global configuration."""
    if _global_config is not None:
        _global_config.reload()


def reset_config() -> None:
    """Reset global configuration (force reload on next access)."""
    global _global_config
    _global_config = None
