#!/usr/bin/env python3
"""
Quick start demonstration of the Broadcast Waveform Simulator.

This example shows the simplest way to get started with the system:
validate a set of transmitter parameters and look at the generated traces.

Run with: python examples/quick_start_demo.py
"""

from broadcast_waveform_simulator import (
    ValidationError,
    quick_generate_fm,
    quick_generate_ofdm,
)


def quick_start_example():
    """Demonstrate the quickest way to use the system."""
    print("📻 Broadcast Waveform Simulator - Quick Start")
    print("=" * 50)

    print("\n1️⃣ Mexico FM broadcast:")
    fm = quick_generate_fm(
        frequency=98.5e6, frequency_deviation=50e3, audio_frequency=10e3, power=1.0
    )
    print(f"✓ Generated {fm.num_samples} samples")
    print(f"✓ Modulation index: {fm.metadata['modulation_index']:.2f}")
    print(f"✓ Carson bandwidth: {fm.metadata['carson_bandwidth'] / 1e3:.0f} kHz")
    print(f"✓ Peak TX amplitude: {fm.transmitted.peak_amplitude:.3f}")
    print(f"✓ Peak RX amplitude: {fm.received.peak_amplitude:.3f}")

    print("\n2️⃣ Singapore 5G sub-6 GHz (transmitted trace only):")
    nr = quick_generate_ofdm(
        frequency=3.5e9,
        subcarrier_spacing=30e3,
        subcarrier_count=16,
        power=4.0,
        include_received=False,
    )
    print(f"✓ Generated {nr.num_samples} samples")
    print(f"✓ Amplitude per subcarrier: {nr.metadata['amplitude_per_subcarrier']:.3f}")
    print(f"✓ Occupied bandwidth: {nr.metadata['occupied_bandwidth'] / 1e3:.0f} kHz")

    print("\n3️⃣ Rejected parameters:")
    try:
        quick_generate_fm(
            frequency=98.5e6, frequency_deviation=90e3, audio_frequency=15e3, power=1.0
        )
    except ValidationError as e:
        for field_name, message in e.errors.items():
            print(f"✗ {field_name}: {message}")

    print("\n✅ Quick start completed! The system is working correctly.")
    print("\nNext steps:")
    print("• Check examples/form_workflow_demo.py for the full form workflow")
    print("• Modify waveform_config.toml to customize sampling and channel constants")


if __name__ == "__main__":
    quick_start_example()
