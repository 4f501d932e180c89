"""
OFDM waveform generator for the Singapore 5G sub-6 GHz profile.

This module synthesizes a multi-tone OFDM signal as the sum of N equally
powered subcarriers at fc + k·Δf, each rotated by a fixed QPSK-like phase
(k mod 4)·π/2, and optionally the same signal after the synthetic channel.
"""

import logging
from datetime import datetime
from typing import Dict, Optional, Union

import numpy as np

from .channel import OFDM_CHANNEL, ChannelModel
from .error_handling import GenerationError
from .fm_generator import amplitude_from_power
from .models import CountryProfile, OFDMParameters, WaveformSet, WaveformTrace
from .sampling import OFDM_SAMPLING, OFDM_SINGLE_TRACE_SAMPLING, SamplingPlan

logger = logging.getLogger(__name__)

DEFAULT_SUBCARRIER_CHUNK_SIZE = 32


def subcarrier_phases(num_subcarriers: int) -> np.ndarray:
    """Phase offsets φ_k = (k mod 4)·π/2 for k = 0..N-1."""
    return (np.arange(num_subcarriers) % 4) * (np.pi / 2)


class OFDMWaveformGenerator:
    """Generates transmitted and received OFDM waveforms.

    The subcarrier sum costs O(samples · N). It is evaluated in blocks of
    ``chunk_size`` subcarriers so peak memory stays at O(samples · chunk_size).
    """

    def __init__(
        self,
        params: OFDMParameters,
        sampling: Optional[SamplingPlan] = None,
        channel: Optional[ChannelModel] = None,
        chunk_size: int = DEFAULT_SUBCARRIER_CHUNK_SIZE,
        max_samples: Optional[int] = None,
    ):
        """Initialize OFDM generator.

        Args:
            params: Validated OFDM parameters
            sampling: Sampling grid. If None, 20 GHz over 4 µs when the received
                trace is generated and over 1 µs otherwise
            channel: Channel model for the received trace (α=3e6, 2 MHz fade if None)
            chunk_size: Subcarriers evaluated per block
            max_samples: Refuse to generate grids longer than this (no limit if None)
        """
        if not isinstance(params, OFDMParameters):
            raise TypeError(
                f"OFDMWaveformGenerator requires OFDMParameters, got {type(params).__name__}"
            )
        if chunk_size < 1:
            raise ValueError("chunk_size must be >= 1")

        self.params = params
        self.sampling = sampling
        self.channel = channel or OFDM_CHANNEL
        self.chunk_size = int(chunk_size)
        self.max_samples = max_samples

        self._phases = subcarrier_phases(params.subcarrier_count)
        self._frequencies = params.subcarrier_frequencies()

        logger.info(
            f"OFDMWaveformGenerator initialized: {params.subcarrier_count} subcarriers, "
            f"spacing={params.subcarrier_spacing}Hz, fc={params.frequency}Hz"
        )

    @property
    def amplitude(self) -> float:
        """Per-subcarrier amplitude sqrt(P / N)."""
        return amplitude_from_power(self.params.power / self.params.subcarrier_count)

    @property
    def phases(self) -> np.ndarray:
        return self._phases.copy()

    @property
    def subcarrier_frequencies(self) -> np.ndarray:
        return self._frequencies.copy()

    def sampling_for(self, include_received: bool) -> SamplingPlan:
        """Sampling grid used for a generation request."""
        if self.sampling is not None:
            return self.sampling
        return OFDM_SAMPLING if include_received else OFDM_SINGLE_TRACE_SAMPLING

    def transmitted_signal(self, t: np.ndarray) -> np.ndarray:
        """Evaluate the subcarrier sum at instants ``t``."""
        signal = np.zeros(len(t), dtype=np.float64)
        num_subcarriers = self.params.subcarrier_count

        for start in range(0, num_subcarriers, self.chunk_size):
            stop = min(start + self.chunk_size, num_subcarriers)
            block_phase = (
                2 * np.pi * np.outer(t, self._frequencies[start:stop]) + self._phases[start:stop]
            )
            signal += np.cos(block_phase).sum(axis=1)

        return self.amplitude * signal

    def generate(self, include_received: bool = True) -> WaveformSet:
        """Generate the waveform over the sampling window.

        Args:
            include_received: Also produce the channel-impaired trace

        Returns:
            WaveformSet with a "transmitted" and optionally a "received" trace

        Raises:
            GenerationError: If the sampling grid exceeds ``max_samples``
        """
        sampling = self.sampling_for(include_received)
        num_samples = sampling.num_samples
        if self.max_samples is not None and num_samples > self.max_samples:
            raise GenerationError(
                f"Sampling grid of {num_samples} samples exceeds limit of {self.max_samples}",
                operation="ofdm_generation",
            )

        t = sampling.time_axis()
        tx = self.transmitted_signal(t)

        received = None
        if include_received:
            received = WaveformTrace("received", t, self.channel.apply(tx, t))

        waveform_set = WaveformSet(
            profile=CountryProfile.SINGAPORE_5G,
            parameters=self.params,
            transmitted=WaveformTrace("transmitted", t, tx),
            received=received,
            generation_timestamp=datetime.now(),
            metadata=self._metadata(sampling, include_received),
        )

        logger.debug(
            f"Generated OFDM waveform: {num_samples} samples x "
            f"{self.params.subcarrier_count} subcarriers in blocks of {self.chunk_size}"
        )
        return waveform_set

    def _metadata(
        self, sampling: SamplingPlan, include_received: bool
    ) -> Dict[str, Union[float, int, bool]]:
        metadata = {
            "sample_rate": sampling.sample_rate,
            "window": sampling.window,
            "num_samples": sampling.num_samples,
            "amplitude_per_subcarrier": self.amplitude,
            "occupied_bandwidth": self.params.occupied_bandwidth,
            "include_received": include_received,
        }
        if include_received:
            metadata["attenuation_coefficient"] = self.channel.attenuation_coefficient
            metadata["fading_frequency"] = self.channel.fading_frequency
        return metadata

    def __repr__(self) -> str:
        return (
            f"OFDMWaveformGenerator(subcarriers={self.params.subcarrier_count}, "
            f"spacing={self.params.subcarrier_spacing}, fc={self.params.frequency})"
        )
