"""
Create a wire file with toy events for smoke runs of prepare_image_dataset.

Every event holds one straight track per plane in a random APA, on top of
gaussian noise.

Usage
-----
python -m image_preparation.scripts.create_toy_wire_file output.h5 --n_events 10
"""

# --- Standard library ---
import argparse

# --- Third-party ---
import awkward as ak
import numpy as np
from tqdm import tqdm

# --- Project modules ---
from utils.data_io import save_wire_file
from image_preparation.image_prep_utils import geometry


N_TICKS = 4492



def toy_event(rng: np.random.Generator, run: int, event: int, n_apas: int = 6,
              noise: float = 2.0, amplitude: float = 50.0) -> dict:
    """
    One toy event: a straight track on every plane of a random APA.

    Returns
    -------
    dict
        {run, subrun, event, wires: [{channel, signal}, ...]}
    """
    apa = int(rng.integers(n_apas))
    wires = []
    for plane in range(geometry.nb_planes):
        first_channel, last_channel = geometry.plane_channel_range(apa, plane)
        start_wire = int(rng.integers(first_channel, last_channel - 100))
        length = int(rng.integers(20, 100))
        start_tick = int(rng.integers(0, N_TICKS - 1000))
        slope = rng.uniform(1.0, 10.0)

        for i, channel in enumerate(range(start_wire, start_wire + length)):
            signal = rng.normal(0.0, noise, N_TICKS).astype(np.float32)
            tick = start_tick + int(i * slope)
            signal[tick:tick + 5] += amplitude
            wires.append({"channel": channel, "signal": signal.tolist()})

    return {"run": run, "subrun": 0, "event": event, "wires": wires}



def main():
    parser = argparse.ArgumentParser(description="Create a toy wire file.")
    parser.add_argument("output", help="Output HDF5 filename")
    parser.add_argument("--n_events", type=int, default=10)
    parser.add_argument("--label", default="caldata", help="Group of the wire signals")
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()

    rng = np.random.default_rng(args.seed)
    events = [toy_event(rng, run=1, event=i) for i in tqdm(range(args.n_events))]
    save_wire_file(ak.Array(events), args.output, label=args.label)
    print(f"Wrote {args.n_events} events to {args.output}")


if __name__ == "__main__":
    main()
