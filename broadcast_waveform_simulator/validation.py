"""
Regulatory validation of signal parameters.

This module checks raw, unit-converted form values against the bounds of the
selected country profile and turns a clean set of values into a validated
parameter record. Only the active profile's fields are checked.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Dict, Mapping, Optional, Union

from .models import (
    CountryProfile,
    FMParameters,
    OFDMParameters,
    SignalParameters,
    carson_bandwidth,
    is_present,
)

if TYPE_CHECKING:
    from .models import WaveformSet

logger = logging.getLogger(__name__)


class IssueKind(Enum):
    """Kinds of validation failure."""

    INPUT_MISSING = "input_missing"
    OUT_OF_RANGE = "out_of_range"
    CONSTRAINT_VIOLATION = "constraint_violation"


@dataclass(frozen=True)
class ValidationIssue:
    """A single per-field validation failure."""

    field: str
    kind: IssueKind
    message: str


class ValidationError(Exception):
    """Raised when parameters fail validation.

    Attributes:
        issues: Failures keyed by field name
    """

    def __init__(self, issues: Mapping[str, ValidationIssue]):
        self.issues = dict(issues)
        summary = "; ".join(f"{name}: {issue.message}" for name, issue in self.issues.items())
        super().__init__(f"Parameter validation failed ({summary})")

    @property
    def errors(self) -> Dict[str, str]:
        """User-facing message for each failing field."""
        return {name: issue.message for name, issue in self.issues.items()}


class ProfileValidator:
    """Validator for the per-profile regulatory constraints."""

    # Mexico FM broadcast band
    FM_MIN_CARRIER = 88e6  # Hz
    FM_MAX_CARRIER = 108e6  # Hz
    FM_MAX_DEVIATION = 75e3  # Hz
    FM_MAX_AUDIO_FREQUENCY = 15e3  # Hz
    FM_MAX_CARSON_BANDWIDTH = 200e3  # Hz

    # Singapore 5G sub-6 GHz (n78)
    NR_MIN_CARRIER = 3.3e9  # Hz
    NR_MAX_CARRIER = 3.8e9  # Hz
    NR_MAX_SUBCARRIER_SPACING = 120e3  # Hz
    NR_MAX_SUBCARRIERS = 4096

    MESSAGES = {
        "country_missing": "Selección obligatoria",
        "frequency_missing": "Frecuencia obligatoria.",
        "fm_frequency_range": "Debe estar entre 88 y 108 MHz.",
        "nr_frequency_range": "Debe estar entre 3.3 y 3.8 GHz.",
        "deviation_missing": "Desviación obligatoria.",
        "deviation_range": "Máximo permitido: 75 kHz.",
        "audio_missing": "Frecuencia de audio obligatoria.",
        "audio_range": "Debe estar entre 0 y 15 kHz.",
        "power_missing": "Potencia obligatoria.",
        "power_range": "Debe ser mayor que 0.",
        "carson_exceeded": "El ancho de banda excede 200 kHz.",
        "spacing_missing": "Separación de subportadoras obligatoria.",
        "spacing_range": "Separación máxima: 120 kHz.",
        "count_missing": "Número de subportadoras obligatorio.",
        "count_range": "Número máximo: 4096 subportadoras.",
        "count_integer": "El número de subportadoras debe ser entero.",
    }

    @classmethod
    def collect_issues(
        cls,
        profile: Union[CountryProfile, str, None],
        values: Mapping[str, Optional[float]],
    ) -> Dict[str, ValidationIssue]:
        """Run every check for the selected profile.

        Args:
            profile: Selected profile (None when nothing is selected)
            values: Base-SI form values keyed by field name; missing keys
                count as not entered

        Returns:
            Issues keyed by field name; empty when everything passes
        """
        profile = CountryProfile.parse(profile)
        issues: Dict[str, ValidationIssue] = {}

        if profile is None:
            cls._add(issues, "country", IssueKind.INPUT_MISSING, "country_missing")
        elif profile is CountryProfile.MEXICO_FM:
            cls._check_fm(values, issues)
        else:
            cls._check_ofdm(values, issues)

        if issues:
            logger.debug(f"Validation for {profile} found issues in {sorted(issues)}")
        return issues

    @classmethod
    def collect_errors(
        cls,
        profile: Union[CountryProfile, str, None],
        values: Mapping[str, Optional[float]],
    ) -> Dict[str, str]:
        """Per-field error messages; an empty mapping signals success."""
        return {name: issue.message for name, issue in cls.collect_issues(profile, values).items()}

    @classmethod
    def check_parameters(
        cls, profile: CountryProfile, values: Mapping[str, Optional[float]]
    ) -> None:
        """Raise if ``values`` do not satisfy the profile.

        Raises:
            ValidationError: With every failing field
        """
        issues = cls.collect_issues(profile, values)
        if issues:
            raise ValidationError(issues)

    @classmethod
    def validate_parameters(
        cls,
        profile: Union[CountryProfile, str, None],
        values: Mapping[str, Optional[float]],
    ) -> SignalParameters:
        """Validate form values and build the matching parameter record.

        Args:
            profile: Selected profile
            values: Base-SI form values keyed by field name

        Returns:
            FMParameters or OFDMParameters, fully populated

        Raises:
            ValidationError: If any field is missing or invalid; no record
                is built in that case
        """
        profile = CountryProfile.parse(profile)
        issues = cls.collect_issues(profile, values)
        if issues:
            logger.info(f"Rejected {profile} parameters: {len(issues)} invalid field(s)")
            raise ValidationError(issues)

        if profile is CountryProfile.MEXICO_FM:
            params: SignalParameters = FMParameters(
                frequency=float(values["frequency"]),
                frequency_deviation=float(values["frequency_deviation"]),
                audio_frequency=float(values["audio_frequency"]),
                power=float(values["power"]),
            )
        else:
            params = OFDMParameters(
                frequency=float(values["frequency"]),
                subcarrier_spacing=float(values["subcarrier_spacing"]),
                subcarrier_count=int(values["subcarrier_count"]),
                power=float(values["power"]),
            )

        logger.info(f"Validated {profile.label} parameters")
        return params

    @classmethod
    def _check_fm(cls, values: Mapping[str, Optional[float]], issues: Dict) -> None:
        fc = values.get("frequency")
        deviation = values.get("frequency_deviation")
        fm = values.get("audio_frequency")

        if not is_present(fc):
            cls._add(issues, "frequency", IssueKind.INPUT_MISSING, "frequency_missing")
        elif not cls._within(fc, cls.FM_MIN_CARRIER, cls.FM_MAX_CARRIER):
            cls._add(issues, "frequency", IssueKind.OUT_OF_RANGE, "fm_frequency_range")

        if not is_present(deviation):
            cls._add(issues, "frequency_deviation", IssueKind.INPUT_MISSING, "deviation_missing")
        elif not cls._within(deviation, 0.0, cls.FM_MAX_DEVIATION, include_lower=False):
            cls._add(issues, "frequency_deviation", IssueKind.OUT_OF_RANGE, "deviation_range")

        if not is_present(fm):
            cls._add(issues, "audio_frequency", IssueKind.INPUT_MISSING, "audio_missing")
        elif not cls._within(fm, 0.0, cls.FM_MAX_AUDIO_FREQUENCY, include_lower=False):
            cls._add(issues, "audio_frequency", IssueKind.OUT_OF_RANGE, "audio_range")

        cls._check_power(values.get("power"), issues)

        # Carson's rule overrides any earlier deviation error
        if is_present(deviation) and is_present(fm):
            if carson_bandwidth(deviation, fm) > cls.FM_MAX_CARSON_BANDWIDTH:
                cls._add(
                    issues,
                    "frequency_deviation",
                    IssueKind.CONSTRAINT_VIOLATION,
                    "carson_exceeded",
                )

    @classmethod
    def _check_ofdm(cls, values: Mapping[str, Optional[float]], issues: Dict) -> None:
        fc = values.get("frequency")
        spacing = values.get("subcarrier_spacing")
        count = values.get("subcarrier_count")

        if not is_present(fc):
            cls._add(issues, "frequency", IssueKind.INPUT_MISSING, "frequency_missing")
        elif not cls._within(fc, cls.NR_MIN_CARRIER, cls.NR_MAX_CARRIER):
            cls._add(issues, "frequency", IssueKind.OUT_OF_RANGE, "nr_frequency_range")

        if not is_present(spacing):
            cls._add(issues, "subcarrier_spacing", IssueKind.INPUT_MISSING, "spacing_missing")
        elif not cls._within(spacing, 0.0, cls.NR_MAX_SUBCARRIER_SPACING, include_lower=False):
            cls._add(issues, "subcarrier_spacing", IssueKind.OUT_OF_RANGE, "spacing_range")

        if not is_present(count):
            cls._add(issues, "subcarrier_count", IssueKind.INPUT_MISSING, "count_missing")
        elif not cls._within(count, 0, cls.NR_MAX_SUBCARRIERS, include_lower=False):
            cls._add(issues, "subcarrier_count", IssueKind.OUT_OF_RANGE, "count_range")
        elif not float(count).is_integer():
            cls._add(issues, "subcarrier_count", IssueKind.OUT_OF_RANGE, "count_integer")

        cls._check_power(values.get("power"), issues)

    @classmethod
    def _check_power(cls, power: Optional[float], issues: Dict) -> None:
        if not is_present(power):
            cls._add(issues, "power", IssueKind.INPUT_MISSING, "power_missing")
        elif not (math.isfinite(power) and power > 0):
            cls._add(issues, "power", IssueKind.OUT_OF_RANGE, "power_range")

    @staticmethod
    def _within(value: float, lower: float, upper: float, include_lower: bool = True) -> bool:
        if not math.isfinite(value):
            return False
        above = value >= lower if include_lower else value > lower
        return above and value <= upper

    @classmethod
    def _add(cls, issues: Dict, name: str, kind: IssueKind, message_key: str) -> None:
        issues[name] = ValidationIssue(field=name, kind=kind, message=cls.MESSAGES[message_key])

    @classmethod
    def validate_waveform_set(cls, waveform_set: "WaveformSet") -> None:
        """Check that a generated waveform set is internally consistent.

        Raises:
            ValueError: If the traces are empty or disagree in length
        """
        if len(waveform_set.transmitted) == 0:
            raise ValueError("transmitted trace cannot be empty")

        if waveform_set.received is not None:
            if len(waveform_set.received) != len(waveform_set.transmitted):
                raise ValueError(
                    f"received trace has {len(waveform_set.received)} samples, "
                    f"expected {len(waveform_set.transmitted)}"
                )

        if waveform_set.parameters.profile is not waveform_set.profile:
            raise ValueError(
                f"parameters belong to {waveform_set.parameters.profile.value}, "
                f"not {waveform_set.profile.value}"
            )


def collect_errors(
    profile: Union[CountryProfile, str, None], values: Mapping[str, Optional[float]]
) -> Dict[str, str]:
    """Per-field error messages for the selected profile. Empty means valid."""
    return ProfileValidator.collect_errors(profile, values)


def validate_parameters(
    profile: Union[CountryProfile, str, None], values: Mapping[str, Optional[float]]
) -> SignalParameters:
    """Validate base-SI values and build the profile's parameter record.

    Raises:
        ValidationError: If any field is missing or invalid
    """
    return ProfileValidator.validate_parameters(profile, values)
