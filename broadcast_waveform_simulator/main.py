"""
Main interface and high-level API for the broadcast waveform simulator.

This module ties the form state, unit conversion, regulatory validation,
waveform generation and chart rendering together: a caller fills in the
form, asks for a signal, and receives the generated traces only when every
field of the selected profile is valid.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Union

from matplotlib.figure import Figure

from .config_manager import ConfigurationManager, get_config
from .error_handling import ErrorHandler, create_error_context, with_error_handling
from .fm_generator import FMWaveformGenerator
from .models import (
    CountryProfile,
    FMParameters,
    OFDMParameters,
    SignalForm,
    SignalParameters,
    WaveformSet,
)
from .ofdm_generator import OFDMWaveformGenerator
from .units import parse_count_text, parse_quantity_text
from .validation import ProfileValidator, ValidationError
from .visualization import SignalVisualizer

logger = logging.getLogger(__name__)

Generator = Union[FMWaveformGenerator, OFDMWaveformGenerator]


def configure_logging(level: Union[str, int] = "INFO") -> None:
    """Set the log level of the package loggers."""
    if isinstance(level, str):
        level = getattr(logging, level.upper())
    package_logger = logging.getLogger(__name__.rsplit(".", 1)[0])
    package_logger.setLevel(level)
    if not logging.getLogger().handlers and not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        package_logger.addHandler(handler)


def create_generator(
    params: SignalParameters,
    config_manager: Optional[ConfigurationManager] = None,
    include_received: bool = True,
) -> Generator:
    """Create the generator matching a parameter record.

    Args:
        params: Validated FM or OFDM parameters
        config_manager: Source of sampling/channel settings (built-in defaults if None)
        include_received: Whether the received trace will be generated, which
            selects the configured 5G window

    Returns:
        FMWaveformGenerator or OFDMWaveformGenerator
    """
    if isinstance(params, FMParameters):
        if config_manager is None:
            return FMWaveformGenerator(params)
        return FMWaveformGenerator(
            params,
            sampling=config_manager.create_sampling_plan(CountryProfile.MEXICO_FM),
            channel=config_manager.create_channel_model(CountryProfile.MEXICO_FM),
        )

    if isinstance(params, OFDMParameters):
        if config_manager is None:
            return OFDMWaveformGenerator(params)
        performance = config_manager.get_performance_config()
        return OFDMWaveformGenerator(
            params,
            sampling=config_manager.create_sampling_plan(
                CountryProfile.SINGAPORE_5G, include_received
            ),
            channel=config_manager.create_channel_model(CountryProfile.SINGAPORE_5G),
            chunk_size=performance["subcarrier_chunk_size"],
            max_samples=performance["max_samples"],
        )

    raise TypeError(f"Unsupported parameter record: {type(params).__name__}")


class WaveformSimulator:
    """Main interface for the broadcast waveform simulator.

    Holds the form state of one user session, validates it on request and
    keeps the most recently generated waveform until cleared.
    """

    def __init__(
        self,
        config_file: Optional[str] = None,
        create_default_config: bool = True,
        config_manager: Optional[ConfigurationManager] = None,
    ):
        """Initialize the simulator.

        Args:
            config_file: Path to configuration file (waveform_config.toml if None)
            create_default_config: Create default config file if it doesn't exist
            config_manager: Use this configuration instead of loading one
        """
        self._error_handler = ErrorHandler()
        self.config_manager = config_manager or get_config(config_file, create_default_config)

        logging_config = self.config_manager.get_logging_config()
        configure_logging(logging_config["level"])
        self._log_metrics = logging_config["log_generation_metrics"]

        self.form = SignalForm()
        self.errors: Dict[str, str] = {}
        self.parameters: Optional[SignalParameters] = None
        self.last_waveform: Optional[WaveformSet] = None
        self.visualizer = SignalVisualizer()

        logger.info(f"WaveformSimulator initialized with {self.config_manager}")

    @property
    def profile(self) -> Optional[CountryProfile]:
        return self.form.profile

    @property
    def show_graph(self) -> bool:
        """Whether a waveform is currently available for display."""
        return self.last_waveform is not None

    def select_profile(self, profile: Union[CountryProfile, str, None]) -> None:
        """Select the country profile whose fields are validated."""
        self.form.profile = CountryProfile.parse(profile)
        logger.debug(f"Selected profile: {self.form.profile}")

    def set_quantity(self, name: str, value: Optional[float], unit: Optional[str] = None) -> None:
        """Set a physical quantity of the form, e.g. ``("frequency", 98.5, "MHz")``."""
        self.form.set_quantity(name, value, unit)

    def set_quantity_text(self, name: str, text: str, unit: Optional[str] = None) -> None:
        """Set a physical quantity from raw input text; empty text clears it.

        ``subcarrier_count`` is unitless; its text is parsed as a plain number.

        Raises:
            KeyError: If ``name`` is not a form field
            UnitError: If the text is not numeric
        """
        if name == "subcarrier_count":
            self.set_subcarrier_count(parse_count_text(text))
            return
        if name not in SignalForm.QUANTITY_FIELDS:
            raise KeyError(
                f"Unknown quantity field '{name}'. Available: {SignalForm.QUANTITY_FIELDS}"
            )

        quantity = getattr(self.form, name)
        parsed = parse_quantity_text(text, unit or quantity.unit, quantity.category)
        self.form.set_quantity(name, parsed.value, parsed.unit)

    def set_subcarrier_count(self, count: Optional[float]) -> None:
        self.form.subcarrier_count = count

    def validate(self) -> Dict[str, str]:
        """Validate the current form for the selected profile.

        Returns:
            Per-field error messages; empty when the form is valid
        """
        self.errors = ProfileValidator.collect_errors(self.form.profile, self.form.base_values())
        return self.errors

    def generate(self, include_received: bool = True) -> WaveformSet:
        """Validate the form and generate the waveform for the selected profile.

        Args:
            include_received: Also produce the channel-impaired trace

        Returns:
            Generated WaveformSet

        Raises:
            ValidationError: If any field is missing or invalid; nothing is
                generated and ``errors`` holds the per-field messages
            GenerationError: If the validated grid cannot be generated; any
                previous waveform is dropped
        """
        try:
            params = ProfileValidator.validate_parameters(
                self.form.profile, self.form.base_values()
            )
        except ValidationError as e:
            self.errors = e.errors
            self._withhold(e, "validate_form")
            raise

        self.errors = {}
        try:
            waveform_set = self.generate_from_parameters(params, include_received)
        except Exception as e:
            self._withhold(e, "generate")
            raise

        self.parameters = params
        self.last_waveform = waveform_set
        return waveform_set

    def _withhold(self, error: Exception, operation: str) -> None:
        """Drop any previous waveform and record why nothing was generated."""
        self.parameters = None
        self.last_waveform = None
        context = create_error_context(
            operation, "WaveformSimulator", profile=str(self.form.profile)
        )
        self._error_handler.handle_error(error, context)

    def generate_from_parameters(
        self, params: SignalParameters, include_received: bool = True
    ) -> WaveformSet:
        """Generate a waveform from an already validated parameter record."""
        generator = create_generator(params, self.config_manager, include_received)
        waveform_set = generator.generate(include_received=include_received)

        if self._log_metrics:
            logger.info(
                f"Generated {waveform_set.profile.label} waveform: "
                f"{waveform_set.num_samples} samples, "
                f"peak={waveform_set.transmitted.peak_amplitude:.4g}"
            )
        return waveform_set

    def plot(
        self, save_path: Optional[Union[str, Path]] = None, title: Optional[str] = None
    ) -> Figure:
        """Plot the most recent waveform.

        Raises:
            RuntimeError: If no waveform has been generated
        """
        if self.last_waveform is None:
            raise RuntimeError("No waveform generated yet. Call generate() first.")
        return self.visualizer.plot_waveforms(self.last_waveform, title=title, save_path=save_path)

    def clear(self) -> None:
        """Discard the generated waveform, keeping the entered values."""
        self.parameters = None
        self.last_waveform = None
        logger.debug("Cleared generated waveform")

    def reset_form(self) -> None:
        """Clear all entered values and any generated waveform."""
        self.form.clear()
        self.errors = {}
        self.clear()

    def get_error_report(self) -> str:
        """Diagnostic report of the errors seen by this simulator."""
        return self._error_handler.generate_diagnostic_report()

    def __repr__(self) -> str:
        profile = self.form.profile.value if self.form.profile else None
        return f"WaveformSimulator(profile={profile}, show_graph={self.show_graph})"


def create_simulator(config_file: Optional[str] = None, **kwargs) -> WaveformSimulator:
    """Create a simulator with the given configuration file."""
    return WaveformSimulator(config_file=config_file, **kwargs)


@with_error_handling(operation="quick_generate_fm", component="main")
def quick_generate_fm(
    frequency: float,
    frequency_deviation: float,
    audio_frequency: float,
    power: float,
    include_received: bool = True,
) -> WaveformSet:
    """Validate base-SI FM values and generate with the default constants.

    Failures are recorded by the global error handler before propagating.

    Raises:
        ValidationError: If the values violate the FM profile
    """
    params = ProfileValidator.validate_parameters(
        CountryProfile.MEXICO_FM,
        {
            "frequency": frequency,
            "frequency_deviation": frequency_deviation,
            "audio_frequency": audio_frequency,
            "power": power,
        },
    )
    return FMWaveformGenerator(params).generate(include_received=include_received)


@with_error_handling(operation="quick_generate_ofdm", component="main")
def quick_generate_ofdm(
    frequency: float,
    subcarrier_spacing: float,
    subcarrier_count: int,
    power: float,
    include_received: bool = True,
) -> WaveformSet:
    """Validate base-SI 5G values and generate with the default constants.

    Failures are recorded by the global error handler before propagating.

    Raises:
        ValidationError: If the values violate the 5G profile
    """
    params = ProfileValidator.validate_parameters(
        CountryProfile.SINGAPORE_5G,
        {
            "frequency": frequency,
            "subcarrier_spacing": subcarrier_spacing,
            "subcarrier_count": subcarrier_count,
            "power": power,
        },
    )
    return OFDMWaveformGenerator(params).generate(include_received=include_received)
