"""
FM waveform generator for the Mexico broadcast profile.

This module synthesizes a frequency-modulated carrier with a single audio
tone, s(t) = A·cos(2π·fc·t + β·sin(2π·fm·t)), over a fixed sampling grid and
optionally the same signal after the synthetic channel.
"""

import logging
from datetime import datetime
from typing import Dict, Optional, Union

import numpy as np

from .channel import FM_CHANNEL, ChannelModel
from .models import CountryProfile, FMParameters, WaveformSet, WaveformTrace
from .sampling import FM_SAMPLING, SamplingPlan

logger = logging.getLogger(__name__)


def amplitude_from_power(power: float) -> float:
    """Peak amplitude sqrt(P), falling back to 1 for non-positive power."""
    return float(np.sqrt(power)) if power > 0 else 1.0


class FMWaveformGenerator:
    """Generates transmitted and received FM waveforms.

    Generation is pure: the same parameters always give identical samples,
    and every call recomputes the full waveform.
    """

    def __init__(
        self,
        params: FMParameters,
        sampling: Optional[SamplingPlan] = None,
        channel: Optional[ChannelModel] = None,
    ):
        """Initialize FM generator.

        Args:
            params: Validated FM parameters
            sampling: Sampling grid (100 kHz over 10 ms if None)
            channel: Channel model for the received trace (α=80, 20 Hz fade if None)
        """
        if not isinstance(params, FMParameters):
            raise TypeError(f"FMWaveformGenerator requires FMParameters, got {type(params).__name__}")

        self.params = params
        self.sampling = sampling or FM_SAMPLING
        self.channel = channel or FM_CHANNEL

        logger.info(
            f"FMWaveformGenerator initialized: fc={params.frequency}Hz, "
            f"beta={self.modulation_index:.3f}, {self.sampling.num_samples} samples"
        )

    @property
    def modulation_index(self) -> float:
        return self.params.modulation_index

    @property
    def amplitude(self) -> float:
        return amplitude_from_power(self.params.power)

    def transmitted_signal(self, t: np.ndarray) -> np.ndarray:
        """Evaluate the FM signal at instants ``t``."""
        fc = self.params.frequency
        fm = self.params.audio_frequency
        phase = 2 * np.pi * fc * t + self.modulation_index * np.sin(2 * np.pi * fm * t)
        return self.amplitude * np.cos(phase)

    def generate(self, include_received: bool = True) -> WaveformSet:
        """Generate the waveform over the sampling window.

        Args:
            include_received: Also produce the channel-impaired trace

        Returns:
            WaveformSet with a "transmitted" and optionally a "received" trace
        """
        t = self.sampling.time_axis()
        tx = self.transmitted_signal(t)

        received = None
        if include_received:
            received = WaveformTrace("received", t, self.channel.apply(tx, t))

        waveform_set = WaveformSet(
            profile=CountryProfile.MEXICO_FM,
            parameters=self.params,
            transmitted=WaveformTrace("transmitted", t, tx),
            received=received,
            generation_timestamp=datetime.now(),
            metadata=self._metadata(include_received),
        )

        logger.debug(
            f"Generated FM waveform: {len(t)} samples, "
            f"received trace {'included' if include_received else 'omitted'}"
        )
        return waveform_set

    def _metadata(self, include_received: bool) -> Dict[str, Union[float, int, bool]]:
        metadata = {
            "sample_rate": self.sampling.sample_rate,
            "window": self.sampling.window,
            "num_samples": self.sampling.num_samples,
            "amplitude": self.amplitude,
            "modulation_index": self.modulation_index,
            "carson_bandwidth": self.params.carson_bandwidth,
            "include_received": include_received,
        }
        if include_received:
            metadata["attenuation_coefficient"] = self.channel.attenuation_coefficient
            metadata["fading_frequency"] = self.channel.fading_frequency
        return metadata

    def __repr__(self) -> str:
        return (
            f"FMWaveformGenerator(fc={self.params.frequency}, "
            f"beta={self.modulation_index:.3f}, samples={self.sampling.num_samples})"
        )
