"""
Tests for the OFDM waveform generator.

Uses short sampling grids wherever the default 20 GHz grid is not the
subject of the test.
"""

import numpy as np
import pytest

from broadcast_waveform_simulator.error_handling import GenerationError
from broadcast_waveform_simulator.models import CountryProfile, FMParameters, OFDMParameters
from broadcast_waveform_simulator.ofdm_generator import OFDMWaveformGenerator, subcarrier_phases
from broadcast_waveform_simulator.sampling import SamplingPlan


def make_params(count=8, power=2.0, spacing=30e3, frequency=3.5e9):
    return OFDMParameters(
        frequency=frequency, subcarrier_spacing=spacing, subcarrier_count=count, power=power
    )


class TestSubcarrierPhases:
    """Test cases for the fixed phase rotation."""

    def test_pattern(self):
        phases = subcarrier_phases(6)
        expected = np.array([0.0, np.pi / 2, np.pi, 3 * np.pi / 2, 0.0, np.pi / 2])

        np.testing.assert_allclose(phases, expected)

    def test_not_random(self):
        assert np.array_equal(subcarrier_phases(100), subcarrier_phases(100))


class TestOFDMWaveformGenerator:
    """Test suite for OFDMWaveformGenerator."""

    @pytest.fixture
    def short_plan(self):
        return SamplingPlan(sample_rate=20e9, window=5e-8)

    def test_initialization(self):
        generator = OFDMWaveformGenerator(make_params(count=8, power=2.0))

        assert generator.amplitude == pytest.approx(0.5)
        assert len(generator.subcarrier_frequencies) == 8
        assert generator.subcarrier_frequencies[1] == pytest.approx(3.5e9 + 30e3)

    def test_rejects_fm_parameters(self):
        params = FMParameters(
            frequency=98.5e6, frequency_deviation=75e3, audio_frequency=15e3, power=1.0
        )
        with pytest.raises(TypeError, match="OFDMParameters"):
            OFDMWaveformGenerator(params)

    def test_invalid_chunk_size(self):
        with pytest.raises(ValueError, match="chunk_size"):
            OFDMWaveformGenerator(make_params(), chunk_size=0)

    def test_default_two_trace_grid(self):
        waveform_set = OFDMWaveformGenerator(make_params(count=4)).generate()

        assert waveform_set.profile is CountryProfile.SINGAPORE_5G
        assert len(waveform_set.transmitted) == 80000
        assert len(waveform_set.received) == 80000
        assert waveform_set.metadata["window"] == 4e-6

    def test_default_single_trace_grid(self):
        waveform_set = OFDMWaveformGenerator(make_params(count=4)).generate(
            include_received=False
        )

        assert len(waveform_set.transmitted) == 20000
        assert waveform_set.received is None

    def test_four_subcarriers_cancel_at_origin(self):
        """A·(cos 0 + cos π/2 + cos π + cos 3π/2) = 0."""
        generator = OFDMWaveformGenerator(
            make_params(count=4), sampling=SamplingPlan(sample_rate=20e9, window=1e-9)
        )
        waveform_set = generator.generate()

        assert waveform_set.transmitted.amplitude[0] == pytest.approx(0.0, abs=1e-12)

    @pytest.mark.parametrize("count", [1, 2, 3, 5, 7, 13])
    def test_value_at_origin(self, short_plan, count):
        generator = OFDMWaveformGenerator(make_params(count=count, power=3.0), sampling=short_plan)
        amplitude = np.sqrt(3.0 / count)
        expected = sum(amplitude * np.cos((k % 4) * np.pi / 2) for k in range(count))

        value = generator.generate().transmitted.amplitude[0]
        assert value == pytest.approx(expected, abs=1e-12)

    def test_matches_direct_sum(self, short_plan):
        params = make_params(count=6, power=1.5, spacing=120e3)
        waveform_set = OFDMWaveformGenerator(params, sampling=short_plan).generate()
        t = waveform_set.transmitted.time
        amplitude = np.sqrt(1.5 / 6)

        expected = np.zeros_like(t)
        for k in range(6):
            freq = 3.5e9 + k * 120e3
            expected += amplitude * np.cos(2 * np.pi * freq * t + (k % 4) * np.pi / 2)

        np.testing.assert_allclose(waveform_set.transmitted.amplitude, expected, atol=1e-9)

    @pytest.mark.parametrize("chunk_size", [1, 3, 32, 1000])
    def test_chunking_does_not_change_result(self, short_plan, chunk_size):
        params = make_params(count=50)
        reference = OFDMWaveformGenerator(params, sampling=short_plan, chunk_size=50).generate()
        chunked = OFDMWaveformGenerator(
            params, sampling=short_plan, chunk_size=chunk_size
        ).generate()

        np.testing.assert_allclose(
            chunked.transmitted.amplitude, reference.transmitted.amplitude, atol=1e-9
        )

    def test_received_is_impaired(self, short_plan):
        waveform_set = OFDMWaveformGenerator(make_params(), sampling=short_plan).generate()
        t = waveform_set.transmitted.time
        gain = np.exp(-3e6 * t) * (0.7 + 0.3 * np.cos(2 * np.pi * 2e6 * t))

        np.testing.assert_allclose(
            waveform_set.received.amplitude, waveform_set.transmitted.amplitude * gain
        )

    def test_idempotent(self, short_plan):
        params = make_params(count=64)
        first = OFDMWaveformGenerator(params, sampling=short_plan).generate()
        second = OFDMWaveformGenerator(params, sampling=short_plan).generate()

        assert np.array_equal(first.transmitted.amplitude, second.transmitted.amplitude)
        assert np.array_equal(first.received.amplitude, second.received.amplitude)

    def test_max_samples_limit(self):
        generator = OFDMWaveformGenerator(make_params(), max_samples=1000)

        with pytest.raises(GenerationError, match="exceeds limit"):
            generator.generate()

    def test_max_subcarrier_count(self):
        """The largest allowed configuration generates on a short grid."""
        params = make_params(count=4096, spacing=120e3, power=1.0)
        generator = OFDMWaveformGenerator(
            params, sampling=SamplingPlan(sample_rate=20e9, window=1e-9)
        )
        waveform_set = generator.generate()

        assert len(waveform_set.transmitted) == 20
        # 4096 is a multiple of 4, so the phases cancel at t=0
        assert waveform_set.transmitted.amplitude[0] == pytest.approx(0.0, abs=1e-9)
        assert waveform_set.metadata["occupied_bandwidth"] == pytest.approx(4096 * 120e3)
