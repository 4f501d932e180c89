"""
Broadcast Waveform Simulator Package

Validates user-entered transmitter parameters against country regulatory
profiles (Mexico FM broadcast, Singapore 5G sub-6 GHz) and synthesizes the
transmitted and channel-impaired time-domain waveforms for visualization.
"""

from .channel import FM_CHANNEL, OFDM_CHANNEL, ChannelModel
from .config_manager import ConfigurationError, ConfigurationManager, get_config
from .error_handling import ErrorHandler, GenerationError, WaveformError
from .fm_generator import FMWaveformGenerator
from .main import (
    WaveformSimulator,
    configure_logging,
    create_generator,
    create_simulator,
    quick_generate_fm,
    quick_generate_ofdm,
)
from .models import (
    CountryProfile,
    FMParameters,
    OFDMParameters,
    SignalForm,
    WaveformSample,
    WaveformSet,
    WaveformTrace,
)
from .ofdm_generator import OFDMWaveformGenerator, subcarrier_phases
from .sampling import FM_SAMPLING, OFDM_SAMPLING, OFDM_SINGLE_TRACE_SAMPLING, SamplingPlan
from .units import (
    PhysicalQuantity,
    UnitError,
    from_base_unit,
    parse_count_text,
    parse_quantity_text,
    to_base_unit,
)
from .validation import ProfileValidator, ValidationError, collect_errors, validate_parameters
from .visualization import SignalVisualizer

__version__ = "0.1.0"
__all__ = [
    # Units
    "PhysicalQuantity",
    "UnitError",
    "to_base_unit",
    "from_base_unit",
    "parse_quantity_text",
    "parse_count_text",
    # Core data models
    "CountryProfile",
    "FMParameters",
    "OFDMParameters",
    "SignalForm",
    "WaveformSample",
    "WaveformTrace",
    "WaveformSet",
    # Validation and configuration
    "ProfileValidator",
    "ValidationError",
    "collect_errors",
    "validate_parameters",
    "ConfigurationManager",
    "ConfigurationError",
    "get_config",
    # Error handling
    "ErrorHandler",
    "WaveformError",
    "GenerationError",
    # Signal generation components
    "SamplingPlan",
    "FM_SAMPLING",
    "OFDM_SAMPLING",
    "OFDM_SINGLE_TRACE_SAMPLING",
    "ChannelModel",
    "FM_CHANNEL",
    "OFDM_CHANNEL",
    "FMWaveformGenerator",
    "OFDMWaveformGenerator",
    "subcarrier_phases",
    # Visualization
    "SignalVisualizer",
    # Main interface (primary API)
    "WaveformSimulator",
    "configure_logging",
    "create_generator",
    "create_simulator",
    "quick_generate_fm",
    "quick_generate_ofdm",
]
