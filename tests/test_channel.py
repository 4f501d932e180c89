"""
Unit tests for the channel model and sampling grids.
"""

import numpy as np
import pytest

from broadcast_waveform_simulator.channel import FM_CHANNEL, OFDM_CHANNEL, ChannelModel
from broadcast_waveform_simulator.sampling import (
    FM_SAMPLING,
    OFDM_SAMPLING,
    OFDM_SINGLE_TRACE_SAMPLING,
    SamplingPlan,
)


class TestChannelModel:
    """Test cases for ChannelModel."""

    def test_default_constants(self):
        assert FM_CHANNEL.attenuation_coefficient == 80.0
        assert FM_CHANNEL.fading_frequency == 20.0
        assert OFDM_CHANNEL.attenuation_coefficient == 3e6
        assert OFDM_CHANNEL.fading_frequency == 2e6
        assert FM_CHANNEL.fading_floor == 0.7
        assert FM_CHANNEL.fading_depth == 0.3

    def test_unit_gain_at_origin(self):
        """At t=0 attenuation is 1 and fading is floor + depth = 1."""
        gain = FM_CHANNEL.gain(np.array([0.0]))
        assert gain[0] == pytest.approx(1.0)

    def test_gain_formula(self):
        channel = ChannelModel(attenuation_coefficient=80.0, fading_frequency=20.0)
        t = np.array([0.001, 0.005, 0.0099])
        expected = np.exp(-80.0 * t) * (0.7 + 0.3 * np.cos(2 * np.pi * 20.0 * t))

        np.testing.assert_allclose(channel.gain(t), expected)

    def test_fading_minimum(self):
        """Half a fading period in, the envelope reaches floor - depth."""
        channel = ChannelModel(attenuation_coefficient=0.0, fading_frequency=20.0)
        assert channel.fading(np.array([0.025]))[0] == pytest.approx(0.4)

    def test_apply(self):
        t = np.array([0.0, 1e-6, 2e-6])
        signal = np.array([1.0, -2.0, 3.0])

        np.testing.assert_allclose(OFDM_CHANNEL.apply(signal, t), signal * OFDM_CHANNEL.gain(t))

    def test_invalid_parameters(self):
        with pytest.raises(ValueError, match="attenuation_coefficient"):
            ChannelModel(attenuation_coefficient=-1.0, fading_frequency=1.0)
        with pytest.raises(ValueError, match="fading envelope"):
            ChannelModel(attenuation_coefficient=1.0, fading_frequency=1.0, fading_floor=0.2)


class TestSamplingPlan:
    """Test cases for SamplingPlan."""

    def test_fm_grid(self):
        assert FM_SAMPLING.num_samples == 1000
        t = FM_SAMPLING.time_axis()
        assert t[0] == 0.0
        assert t[1] == pytest.approx(1e-5)
        assert t[-1] == pytest.approx(999 / 1e5)

    def test_ofdm_grids(self):
        assert OFDM_SAMPLING.num_samples == 80000
        assert OFDM_SINGLE_TRACE_SAMPLING.num_samples == 20000

    def test_floor(self):
        assert SamplingPlan(sample_rate=1000.0, window=0.0105).num_samples == 10

    def test_invalid(self):
        with pytest.raises(ValueError, match="sample_rate"):
            SamplingPlan(sample_rate=0.0, window=1.0)
        with pytest.raises(ValueError, match="window"):
            SamplingPlan(sample_rate=1.0, window=-1.0)
