"""
Plot the plane images of records stored by prepare_image_dataset.

Usage
-----
python -m image_preparation.scripts.plot_event_images larcv.h5 --n_events 5 --plot_dir Plots/Images/
"""

# --- Standard library ---
import os
import argparse
import datetime as dt

# --- Project modules ---
from utils import log_utils
from utils.data_io import load_image_records
from image_preparation.image_prep_utils.visualization import plot_event_images


def main():
    parser = argparse.ArgumentParser(description="Plot plane images of image records.")
    parser.add_argument("input", nargs="+", help="Image record file(s)")
    parser.add_argument("--n_events", type=int, default=5, help="Number of records to plot")
    parser.add_argument("--plot_dir", default="Plots/Images/", help="Output directory")
    args = parser.parse_args()

    now = dt.datetime.now().strftime("%Y%m%d_%H%M%S")
    logger = log_utils.setup_logger(
        filename=f"PlotImages_{now}.log",
        log_folder="logs/plot/",
    )

    records = load_image_records(args.input)
    logger.info(f"Loaded {len(records)} records, plotting {min(args.n_events, len(records))}.")

    for record in records[:args.n_events]:
        name = f"run{record.run}_subrun{record.subrun}_event{record.event}"
        plot_event_images(
            record.images.to_numpy(),
            title=f"Run {record.run}, subrun {record.subrun}, event {record.event} "
                  f"(type {record.event_type})",
            path_out=os.path.join(args.plot_dir, f"{name}.png"),
        )
        logger.info(f"Saved {name}.png")

    log_utils.close_log_handlers(logger)


if __name__ == "__main__":
    main()
