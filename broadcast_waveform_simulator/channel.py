"""
Synthetic channel impairment model.

The received signal is the transmitted signal scaled by a time-varying gain:
an exponential attenuation exp(-α·t) multiplied by a slow fading envelope
floor + depth·cos(2π·f_fade·t). The constants are illustrative, chosen so the
impairment is visible within each profile's visualization window.
"""

import logging
from dataclasses import dataclass

import numpy as np

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChannelModel:
    """Attenuation and fading applied to produce the received trace.

    Attributes:
        attenuation_coefficient: α of exp(-α·t), in 1/s
        fading_frequency: Frequency of the fading envelope in Hz
        fading_floor: Constant part of the fading envelope
        fading_depth: Amplitude of the cosine part of the fading envelope
    """

    attenuation_coefficient: float
    fading_frequency: float
    fading_floor: float = 0.7
    fading_depth: float = 0.3

    def __post_init__(self):
        if self.attenuation_coefficient < 0:
            raise ValueError("attenuation_coefficient must be non-negative")
        if self.fading_frequency < 0:
            raise ValueError("fading_frequency must be non-negative")
        if self.fading_depth < 0 or self.fading_floor < self.fading_depth:
            raise ValueError("fading envelope must stay non-negative (floor >= depth >= 0)")

    def attenuation(self, t: np.ndarray) -> np.ndarray:
        return np.exp(-self.attenuation_coefficient * t)

    def fading(self, t: np.ndarray) -> np.ndarray:
        return self.fading_floor + self.fading_depth * np.cos(2 * np.pi * self.fading_frequency * t)

    def gain(self, t: np.ndarray) -> np.ndarray:
        """Total channel gain at each instant."""
        return self.attenuation(t) * self.fading(t)

    def apply(self, signal: np.ndarray, t: np.ndarray) -> np.ndarray:
        """Impair ``signal`` sampled at instants ``t``."""
        return signal * self.gain(t)


# Mexico FM: visible decay over the 10 ms window with a 20 Hz fade
FM_CHANNEL = ChannelModel(attenuation_coefficient=80.0, fading_frequency=20.0)

# Singapore 5G: visible decay over the 4 µs window with a 2 MHz fade
OFDM_CHANNEL = ChannelModel(attenuation_coefficient=3e6, fading_frequency=2e6)
