"""
Core data models for regulated waveform generation.

This module defines the country profiles, the validated signal parameter
records handed to the generators, the generated waveform containers and the
form state that collects raw user input before validation.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Iterator, List, NamedTuple, Optional, Union

import numpy as np

from .units import PhysicalQuantity


class CountryProfile(Enum):
    """Regulatory profile selected by the user."""

    MEXICO_FM = "mx"
    SINGAPORE_5G = "sg"

    @property
    def label(self) -> str:
        """Human-readable profile name shown in the profile selector."""
        return _PROFILE_LABELS[self]

    @classmethod
    def parse(cls, value: Union["CountryProfile", str, None]) -> Optional["CountryProfile"]:
        """Resolve a profile from an enum member, its code ("mx"/"sg") or None.

        Raises:
            ValueError: If the code is not a known profile
        """
        if value is None or value == "":
            return None
        if isinstance(value, cls):
            return value
        return cls(str(value).lower())


_PROFILE_LABELS = {
    CountryProfile.MEXICO_FM: "México - Radiodifusión FM",
    CountryProfile.SINGAPORE_5G: "Singapur - 5G Sub-6 GHz",
}


@dataclass(frozen=True)
class FMParameters:
    """Validated parameters for the Mexico FM broadcast profile.

    All values are in base SI units.

    Attributes:
        frequency: Carrier frequency in Hz
        frequency_deviation: Peak frequency deviation in Hz
        audio_frequency: Modulating (audio) frequency in Hz
        power: Transmit power in W
    """

    frequency: float
    frequency_deviation: float
    audio_frequency: float
    power: float

    def __post_init__(self):
        """Reject parameters that violate the FM profile constraints."""
        from .validation import ProfileValidator

        ProfileValidator.check_parameters(CountryProfile.MEXICO_FM, self.as_dict())

    @property
    def profile(self) -> CountryProfile:
        return CountryProfile.MEXICO_FM

    @property
    def modulation_index(self) -> float:
        """Modulation index β = Δf / fm."""
        return self.frequency_deviation / self.audio_frequency

    @property
    def carson_bandwidth(self) -> float:
        """Occupied bandwidth by Carson's rule, 2(Δf + fm), in Hz."""
        return carson_bandwidth(self.frequency_deviation, self.audio_frequency)

    def as_dict(self) -> Dict[str, float]:
        return {
            "frequency": self.frequency,
            "frequency_deviation": self.frequency_deviation,
            "audio_frequency": self.audio_frequency,
            "power": self.power,
        }


@dataclass(frozen=True)
class OFDMParameters:
    """Validated parameters for the Singapore 5G sub-6 GHz profile.

    Attributes:
        frequency: Carrier frequency of subcarrier 0 in Hz
        subcarrier_spacing: Spacing between adjacent subcarriers in Hz
        subcarrier_count: Number of subcarriers
        power: Total transmit power in W, shared equally by the subcarriers
    """

    frequency: float
    subcarrier_spacing: float
    subcarrier_count: int
    power: float

    def __post_init__(self):
        """Reject parameters that violate the 5G profile constraints."""
        from .validation import ProfileValidator

        ProfileValidator.check_parameters(CountryProfile.SINGAPORE_5G, self.as_dict())
        object.__setattr__(self, "subcarrier_count", int(self.subcarrier_count))

    @property
    def profile(self) -> CountryProfile:
        return CountryProfile.SINGAPORE_5G

    @property
    def occupied_bandwidth(self) -> float:
        """Span from the first to the last subcarrier plus one spacing, in Hz."""
        return self.subcarrier_count * self.subcarrier_spacing

    def subcarrier_frequencies(self) -> np.ndarray:
        """Frequencies fc + k·Δf for k = 0..N-1."""
        return self.frequency + np.arange(self.subcarrier_count) * self.subcarrier_spacing

    def as_dict(self) -> Dict[str, float]:
        return {
            "frequency": self.frequency,
            "subcarrier_spacing": self.subcarrier_spacing,
            "subcarrier_count": self.subcarrier_count,
            "power": self.power,
        }


SignalParameters = Union[FMParameters, OFDMParameters]


def carson_bandwidth(frequency_deviation: float, audio_frequency: float) -> float:
    """Carson's rule bandwidth estimate for an FM signal."""
    return 2.0 * (frequency_deviation + audio_frequency)


class WaveformSample(NamedTuple):
    """One point of a waveform: time in seconds and instantaneous amplitude."""

    time: float
    amplitude: float


@dataclass
class WaveformTrace:
    """A named, ordered sequence of waveform samples.

    Attributes:
        name: Trace name ("transmitted" or "received")
        time: Sample instants in seconds
        amplitude: Amplitude at each instant
    """

    name: str
    time: np.ndarray
    amplitude: np.ndarray

    def __post_init__(self):
        if self.time.shape != self.amplitude.shape:
            raise ValueError(
                f"Trace '{self.name}' has {self.time.shape} time points "
                f"but {self.amplitude.shape} amplitudes"
            )

    def __len__(self) -> int:
        return len(self.time)

    def __iter__(self) -> Iterator[WaveformSample]:
        for t, a in zip(self.time.tolist(), self.amplitude.tolist()):
            yield WaveformSample(t, a)

    def samples(self) -> List[WaveformSample]:
        """All samples as ``(time, amplitude)`` pairs in time order."""
        return list(self)

    @property
    def peak_amplitude(self) -> float:
        return float(np.max(np.abs(self.amplitude))) if len(self) else 0.0

    def to_points(self) -> List[Dict[str, float]]:
        """Samples as ``{"x": time, "y": amplitude}`` points for chart libraries."""
        return [{"x": t, "y": a} for t, a in zip(self.time.tolist(), self.amplitude.tolist())]


@dataclass
class WaveformSet:
    """Output of a waveform generator.

    Attributes:
        profile: Profile the waveform was generated for
        parameters: Validated parameters used for generation
        transmitted: Transmitted signal trace
        received: Channel-impaired trace, if requested
        generation_timestamp: When the waveform was generated
        metadata: Sampling and channel settings used
    """

    profile: CountryProfile
    parameters: SignalParameters
    transmitted: WaveformTrace
    received: Optional[WaveformTrace] = None
    generation_timestamp: datetime = field(default_factory=datetime.now)
    metadata: dict = field(default_factory=dict)

    def __post_init__(self):
        from .validation import ProfileValidator

        ProfileValidator.validate_waveform_set(self)

    @property
    def traces(self) -> Dict[str, WaveformTrace]:
        """Traces keyed by name, transmitted first."""
        traces = {self.transmitted.name: self.transmitted}
        if self.received is not None:
            traces[self.received.name] = self.received
        return traces

    @property
    def num_samples(self) -> int:
        return len(self.transmitted)

    def get_trace(self, name: str) -> WaveformTrace:
        """Get a trace by name.

        Raises:
            KeyError: If the trace was not generated
        """
        traces = self.traces
        if name not in traces:
            raise KeyError(f"Trace '{name}' not available. Available: {list(traces)}")
        return traces[name]

    def to_chart_data(self) -> Dict[str, List[Dict[str, float]]]:
        """All traces as chart-ready point lists keyed by trace name."""
        return {name: trace.to_points() for name, trace in self.traces.items()}


@dataclass
class SignalForm:
    """Raw form state: profile selection and the quantities entered so far.

    Quantities keep their unit selection across :meth:`clear`; only the
    entered values are reset.
    """

    profile: Optional[CountryProfile] = None
    frequency: PhysicalQuantity = field(
        default_factory=lambda: PhysicalQuantity.empty("frequency")
    )
    power: PhysicalQuantity = field(default_factory=lambda: PhysicalQuantity.empty("power"))
    frequency_deviation: PhysicalQuantity = field(
        default_factory=lambda: PhysicalQuantity.empty("frequency")
    )
    audio_frequency: PhysicalQuantity = field(
        default_factory=lambda: PhysicalQuantity.empty("frequency")
    )
    subcarrier_spacing: PhysicalQuantity = field(
        default_factory=lambda: PhysicalQuantity.empty("frequency")
    )
    subcarrier_count: Optional[float] = None

    QUANTITY_FIELDS = (
        "frequency",
        "power",
        "frequency_deviation",
        "audio_frequency",
        "subcarrier_spacing",
    )

    def set_quantity(self, name: str, value: Optional[float], unit: Optional[str] = None) -> None:
        """Update the value (and optionally the unit) of a quantity field.

        Raises:
            KeyError: If ``name`` is not a quantity field
        """
        if name not in self.QUANTITY_FIELDS:
            raise KeyError(f"Unknown quantity field '{name}'. Available: {self.QUANTITY_FIELDS}")
        quantity = getattr(self, name)
        if unit is not None:
            quantity = quantity.with_unit(unit)
        setattr(self, name, quantity.with_value(value))

    def base_values(self) -> Dict[str, Optional[float]]:
        """All fields converted to base SI units; None where not entered."""
        values: Dict[str, Optional[float]] = {
            name: getattr(self, name).to_base() for name in self.QUANTITY_FIELDS
        }
        values["subcarrier_count"] = self.subcarrier_count
        return values

    def clear(self) -> None:
        """Reset every entered value to "not entered", keeping units and profile."""
        for name in self.QUANTITY_FIELDS:
            setattr(self, name, getattr(self, name).with_value(None))
        self.subcarrier_count = None


def is_present(value: Optional[float]) -> bool:
    """Whether a form value counts as filled in.

    Absent and zero values are both treated as missing, matching the
    required-field checks of the form.
    """
    if value is None:
        return False
    if isinstance(value, float) and math.isnan(value):
        return False
    return value != 0
