"""
Time-domain chart rendering for generated waveforms.

This module draws the transmitted trace and, when present, the
channel-impaired received trace on a shared time axis with matplotlib.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure
from matplotlib.ticker import FuncFormatter, MaxNLocator

from .models import CountryProfile, WaveformSet

logger = logging.getLogger(__name__)

TRACE_LABELS = {
    CountryProfile.MEXICO_FM: {
        "transmitted": "Señal FM Transmitida (TX)",
        "received": "Señal FM Recibida (RX - Con pérdida)",
    },
    CountryProfile.SINGAPORE_5G: {
        "transmitted": "Señal Transmitida (TX)",
        "received": "Señal Recibida (RX - Con pérdida)",
    },
}

RECEIVED_COLORS = {
    CountryProfile.MEXICO_FM: "tab:blue",
    CountryProfile.SINGAPORE_5G: (40 / 255, 167 / 255, 69 / 255, 0.9),
}


def _exponent_tick(value: float, _position) -> str:
    return "0" if value == 0 else f"{value:.2e}"


class SignalVisualizer:
    """Renders waveform sets as time-domain line charts."""

    def __init__(self, figsize: tuple = (12, 5)):
        """Initialize the visualizer.

        Args:
            figsize: Figure size in inches
        """
        self.figsize = figsize

    def plot_waveforms(
        self,
        waveform_set: WaveformSet,
        title: Optional[str] = None,
        save_path: Optional[Union[str, Path]] = None,
    ) -> Figure:
        """Plot the transmitted and received traces of a waveform set.

        Args:
            waveform_set: Generated waveform to plot
            title: Plot title (profile label if None)
            save_path: Optional path to save the plot

        Returns:
            Matplotlib Figure object
        """
        profile = waveform_set.profile
        labels = TRACE_LABELS[profile]

        fig, ax = plt.subplots(figsize=self.figsize)

        tx = waveform_set.transmitted
        ax.plot(
            tx.time,
            tx.amplitude,
            label=labels["transmitted"],
            linewidth=1,
            color=(0.47, 0.47, 0.47, 0.2),
        )

        rx = waveform_set.received
        if rx is not None:
            ax.plot(
                rx.time,
                rx.amplitude,
                label=labels["received"],
                linewidth=2,
                color=RECEIVED_COLORS[profile],
            )

        ax.set_xlabel("Tiempo (s)", fontweight="bold")
        ax.set_ylabel("Amplitud", fontweight="bold")
        ax.xaxis.set_major_formatter(FuncFormatter(_exponent_tick))
        ax.yaxis.set_major_formatter(FuncFormatter(_exponent_tick))
        ax.xaxis.set_major_locator(MaxNLocator(6))
        ax.grid(True, alpha=0.05, color="black")
        ax.legend(loc="upper center")
        ax.set_title(title or profile.label)
        if len(tx) > 1:
            ax.set_xlim(float(np.min(tx.time)), float(np.max(tx.time)))

        fig.tight_layout()

        if save_path:
            fig.savefig(save_path, dpi=150, bbox_inches="tight")
            logger.info(f"Saved waveform plot to {save_path}")

        return fig

    def close(self, fig: Figure) -> None:
        """Release a figure created by this visualizer."""
        plt.close(fig)
