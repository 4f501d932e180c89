"""
Fixed sampling grids for waveform visualization.
"""

import math
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class SamplingPlan:
    """Sample rate and visualization window of a generated waveform.

    Attributes:
        sample_rate: Samples per second
        window: Length of the visualized interval in seconds
    """

    sample_rate: float
    window: float

    def __post_init__(self):
        if self.sample_rate <= 0:
            raise ValueError("sample_rate must be positive")
        if self.window <= 0:
            raise ValueError("window must be positive")

    @property
    def num_samples(self) -> int:
        """floor(sample_rate · window).

        The product is nudged by a relative epsilon so that e.g. 20e9 · 4e-6,
        which evaluates to 79999.99999999999, still yields 80000 samples.
        """
        product = self.sample_rate * self.window
        return int(math.floor(product * (1 + 1e-12)))

    def time_axis(self) -> np.ndarray:
        """Sample instants t_i = i / sample_rate."""
        return np.arange(self.num_samples) / self.sample_rate


FM_SAMPLING = SamplingPlan(sample_rate=1e5, window=0.01)

OFDM_SAMPLING = SamplingPlan(sample_rate=20e9, window=4e-6)

# Shorter window of the transmitted-only 5G view
OFDM_SINGLE_TRACE_SAMPLING = SamplingPlan(sample_rate=20e9, window=1e-6)
