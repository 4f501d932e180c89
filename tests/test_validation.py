"""
Unit tests for validation module.

Tests the per-profile regulatory bounds, Carson's rule bandwidth check and
the construction of validated parameter records.
"""

import pytest

from broadcast_waveform_simulator.models import CountryProfile, FMParameters, OFDMParameters
from broadcast_waveform_simulator.validation import (
    IssueKind,
    ProfileValidator,
    ValidationError,
    collect_errors,
    validate_parameters,
)


@pytest.fixture
def fm_values():
    """Valid base-SI values for the FM profile."""
    return {
        "frequency": 98.5e6,
        "frequency_deviation": 50e3,
        "audio_frequency": 10e3,
        "power": 10.0,
    }


@pytest.fixture
def ofdm_values():
    """Valid base-SI values for the 5G profile."""
    return {
        "frequency": 3.5e9,
        "subcarrier_spacing": 30e3,
        "subcarrier_count": 64,
        "power": 5.0,
    }


class TestProfileSelection:
    """Test cases for the profile selector."""

    def test_missing_profile(self, fm_values):
        errors = collect_errors(None, fm_values)
        assert errors == {"country": "Selección obligatoria"}

    def test_profile_code_accepted(self, fm_values):
        assert collect_errors("mx", fm_values) == {}


class TestFMValidation:
    """Test cases for the Mexico FM profile."""

    def test_valid_values(self, fm_values):
        assert collect_errors(CountryProfile.MEXICO_FM, fm_values) == {}

    def test_all_missing(self):
        errors = collect_errors(CountryProfile.MEXICO_FM, {})

        assert errors == {
            "frequency": "Frecuencia obligatoria.",
            "frequency_deviation": "Desviación obligatoria.",
            "audio_frequency": "Frecuencia de audio obligatoria.",
            "power": "Potencia obligatoria.",
        }

    def test_missing_issue_kind(self):
        issues = ProfileValidator.collect_issues(CountryProfile.MEXICO_FM, {})
        assert all(issue.kind is IssueKind.INPUT_MISSING for issue in issues.values())

    @pytest.mark.parametrize("frequency", [88e6, 98.5e6, 108e6])
    def test_carrier_in_band(self, fm_values, frequency):
        fm_values["frequency"] = frequency
        assert "frequency" not in collect_errors(CountryProfile.MEXICO_FM, fm_values)

    @pytest.mark.parametrize("frequency", [87.9e6, 108.1e6, 3.5e9])
    def test_carrier_out_of_band(self, fm_values, frequency):
        fm_values["frequency"] = frequency
        issues = ProfileValidator.collect_issues(CountryProfile.MEXICO_FM, fm_values)

        assert issues["frequency"].kind is IssueKind.OUT_OF_RANGE
        assert issues["frequency"].message == "Debe estar entre 88 y 108 MHz."

    def test_deviation_bounds(self, fm_values):
        fm_values["frequency_deviation"] = 75e3
        assert collect_errors(CountryProfile.MEXICO_FM, fm_values) == {}

        fm_values["frequency_deviation"] = -1e3
        errors = collect_errors(CountryProfile.MEXICO_FM, fm_values)
        assert errors["frequency_deviation"] == "Máximo permitido: 75 kHz."

    def test_audio_frequency_bounds(self, fm_values):
        fm_values["audio_frequency"] = 15e3
        assert collect_errors(CountryProfile.MEXICO_FM, fm_values) == {}

        fm_values["audio_frequency"] = 15.5e3
        errors = collect_errors(CountryProfile.MEXICO_FM, fm_values)
        assert errors == {"audio_frequency": "Debe estar entre 0 y 15 kHz."}

    def test_zero_values_count_as_missing(self, fm_values):
        fm_values["audio_frequency"] = 0.0
        fm_values["power"] = 0.0
        errors = collect_errors(CountryProfile.MEXICO_FM, fm_values)

        assert errors["audio_frequency"] == "Frecuencia de audio obligatoria."
        assert errors["power"] == "Potencia obligatoria."

    def test_negative_power(self, fm_values):
        fm_values["power"] = -2.0
        errors = collect_errors(CountryProfile.MEXICO_FM, fm_values)
        assert errors == {"power": "Debe ser mayor que 0."}

    def test_infinite_carrier_rejected(self, fm_values):
        fm_values["frequency"] = float("inf")
        assert "frequency" in collect_errors(CountryProfile.MEXICO_FM, fm_values)

    def test_other_profile_fields_ignored(self, fm_values):
        fm_values["subcarrier_count"] = 100000
        fm_values["subcarrier_spacing"] = -1.0
        assert collect_errors(CountryProfile.MEXICO_FM, fm_values) == {}


class TestCarsonRule:
    """Test cases for the Carson bandwidth check."""

    @pytest.mark.parametrize("deviation,audio", [(70e3, 14e3), (75e3, 15e3)])
    def test_within_bandwidth(self, fm_values, deviation, audio):
        fm_values["frequency_deviation"] = deviation
        fm_values["audio_frequency"] = audio
        assert collect_errors(CountryProfile.MEXICO_FM, fm_values) == {}

    def test_exactly_200_khz_is_allowed(self, fm_values):
        """2(85 kHz + 15 kHz) = 200 kHz does not trip the bandwidth check."""
        fm_values["frequency_deviation"] = 85e3
        fm_values["audio_frequency"] = 15e3
        issues = ProfileValidator.collect_issues(CountryProfile.MEXICO_FM, fm_values)

        assert issues["frequency_deviation"].kind is IssueKind.OUT_OF_RANGE
        assert issues["frequency_deviation"].message == "Máximo permitido: 75 kHz."

    def test_above_200_khz_overrides_deviation_error(self, fm_values):
        """2(85.05 kHz + 15 kHz) = 200.1 kHz replaces the deviation range error."""
        fm_values["frequency_deviation"] = 85.05e3
        fm_values["audio_frequency"] = 15e3
        issues = ProfileValidator.collect_issues(CountryProfile.MEXICO_FM, fm_values)

        assert issues["frequency_deviation"].kind is IssueKind.CONSTRAINT_VIOLATION
        assert issues["frequency_deviation"].message == "El ancho de banda excede 200 kHz."

    def test_bandwidth_error_alongside_audio_error(self, fm_values):
        fm_values["frequency_deviation"] = 75e3
        fm_values["audio_frequency"] = 30e3
        errors = collect_errors(CountryProfile.MEXICO_FM, fm_values)

        assert errors["frequency_deviation"] == "El ancho de banda excede 200 kHz."
        assert errors["audio_frequency"] == "Debe estar entre 0 y 15 kHz."

    def test_skipped_when_a_term_is_missing(self, fm_values):
        fm_values["frequency_deviation"] = 500e3
        fm_values["audio_frequency"] = None
        errors = collect_errors(CountryProfile.MEXICO_FM, fm_values)

        assert errors["frequency_deviation"] == "Máximo permitido: 75 kHz."


class TestOFDMValidation:
    """Test cases for the Singapore 5G profile."""

    def test_valid_values(self, ofdm_values):
        assert collect_errors(CountryProfile.SINGAPORE_5G, ofdm_values) == {}

    def test_upper_bounds_pass(self, ofdm_values):
        ofdm_values["subcarrier_count"] = 4096
        ofdm_values["subcarrier_spacing"] = 120e3
        assert collect_errors(CountryProfile.SINGAPORE_5G, ofdm_values) == {}

    def test_too_many_subcarriers(self, ofdm_values):
        ofdm_values["subcarrier_count"] = 4097
        errors = collect_errors(CountryProfile.SINGAPORE_5G, ofdm_values)
        assert errors == {"subcarrier_count": "Número máximo: 4096 subportadoras."}

    def test_fractional_subcarrier_count(self, ofdm_values):
        ofdm_values["subcarrier_count"] = 10.5
        errors = collect_errors(CountryProfile.SINGAPORE_5G, ofdm_values)
        assert errors == {"subcarrier_count": "El número de subportadoras debe ser entero."}

    def test_spacing_too_wide(self, ofdm_values):
        ofdm_values["subcarrier_spacing"] = 120.001e3
        errors = collect_errors(CountryProfile.SINGAPORE_5G, ofdm_values)
        assert errors == {"subcarrier_spacing": "Separación máxima: 120 kHz."}

    @pytest.mark.parametrize("frequency", [3.3e9, 3.8e9])
    def test_carrier_band_edges(self, ofdm_values, frequency):
        ofdm_values["frequency"] = frequency
        assert collect_errors(CountryProfile.SINGAPORE_5G, ofdm_values) == {}

    @pytest.mark.parametrize("frequency", [3.29e9, 3.81e9, 98.5e6])
    def test_carrier_out_of_band(self, ofdm_values, frequency):
        ofdm_values["frequency"] = frequency
        errors = collect_errors(CountryProfile.SINGAPORE_5G, ofdm_values)
        assert errors == {"frequency": "Debe estar entre 3.3 y 3.8 GHz."}

    def test_all_missing(self):
        errors = collect_errors(CountryProfile.SINGAPORE_5G, {})

        assert errors == {
            "frequency": "Frecuencia obligatoria.",
            "subcarrier_spacing": "Separación de subportadoras obligatoria.",
            "subcarrier_count": "Número de subportadoras obligatorio.",
            "power": "Potencia obligatoria.",
        }

    def test_fm_fields_ignored(self, ofdm_values):
        ofdm_values["frequency_deviation"] = 1e9
        ofdm_values["audio_frequency"] = 1e9
        assert collect_errors(CountryProfile.SINGAPORE_5G, ofdm_values) == {}


class TestValidateParameters:
    """Test cases for building validated parameter records."""

    def test_builds_fm_parameters(self, fm_values):
        params = validate_parameters(CountryProfile.MEXICO_FM, fm_values)

        assert isinstance(params, FMParameters)
        assert params.frequency == 98.5e6
        assert params.audio_frequency == 10e3

    def test_builds_ofdm_parameters(self, ofdm_values):
        params = validate_parameters("sg", ofdm_values)

        assert isinstance(params, OFDMParameters)
        assert params.subcarrier_count == 64

    def test_failure_returns_no_record(self, fm_values):
        fm_values["frequency"] = 87.9e6
        fm_values["power"] = None

        with pytest.raises(ValidationError) as exc_info:
            validate_parameters(CountryProfile.MEXICO_FM, fm_values)

        error = exc_info.value
        assert error.errors == {
            "frequency": "Debe estar entre 88 y 108 MHz.",
            "power": "Potencia obligatoria.",
        }
        assert error.issues["power"].kind is IssueKind.INPUT_MISSING

    def test_missing_profile_raises(self, fm_values):
        with pytest.raises(ValidationError, match="country"):
            validate_parameters(None, fm_values)
