#!/usr/bin/env python3
"""
Form workflow demonstration.

Fills in the simulator form the way a user would (values with units),
shows the per-field messages for invalid input, then generates and saves
the time-domain chart for both country profiles.

Run with: python examples/form_workflow_demo.py
"""

from pathlib import Path

from broadcast_waveform_simulator import ValidationError, WaveformSimulator


def show_errors(simulator: WaveformSimulator) -> None:
    for field_name, message in simulator.errors.items():
        print(f"  ✗ {field_name}: {message}")


def fm_workflow(simulator: WaveformSimulator, output_dir: Path) -> None:
    print("\n📻 México - Radiodifusión FM")
    simulator.select_profile("mx")
    simulator.set_quantity("frequency", 120, "MHz")
    simulator.set_quantity("frequency_deviation", 75, "kHz")
    simulator.set_quantity("audio_frequency", 15, "kHz")

    try:
        simulator.generate()
    except ValidationError:
        print("Invalid form:")
        show_errors(simulator)

    simulator.set_quantity("frequency", 98.5)
    simulator.set_quantity("frequency_deviation", 50)
    simulator.set_quantity_text("power", "750", "mW")

    waveform = simulator.generate()
    print(f"  ✓ Generated {waveform.num_samples} samples")
    fig = simulator.plot(save_path=output_dir / "fm_waveform.png")
    simulator.visualizer.close(fig)
    print(f"  ✓ Saved {output_dir / 'fm_waveform.png'}")


def ofdm_workflow(simulator: WaveformSimulator, output_dir: Path) -> None:
    print("\n📶 Singapur - 5G Sub-6 GHz")
    simulator.reset_form()
    simulator.select_profile("sg")
    simulator.set_quantity("frequency", 3.5, "GHz")
    simulator.set_quantity("subcarrier_spacing", 30, "kHz")
    simulator.set_subcarrier_count(12.5)
    simulator.set_quantity("power", 2, "W")

    try:
        simulator.generate()
    except ValidationError:
        print("Invalid form:")
        show_errors(simulator)

    simulator.set_subcarrier_count(12)
    waveform = simulator.generate(include_received=False)
    print(f"  ✓ Generated {waveform.num_samples} samples (transmitted only)")
    fig = simulator.plot(save_path=output_dir / "ofdm_waveform.png")
    simulator.visualizer.close(fig)
    print(f"  ✓ Saved {output_dir / 'ofdm_waveform.png'}")


def main():
    print("Broadcast Waveform Simulator - Form Workflow")
    print("=" * 50)

    output_dir = Path("waveform_output")
    output_dir.mkdir(exist_ok=True)

    simulator = WaveformSimulator()
    fm_workflow(simulator, output_dir)
    ofdm_workflow(simulator, output_dir)

    print("\n" + simulator.get_error_report())


if __name__ == "__main__":
    main()
