"""
Prepare wire images of TPC events for image-based classification.

Workflow:
1. Load wire signals of all input files.
2. Per event, select the APA with the most activity.
3. Find the region of interest on each of the three planes.
4. Downsample every ROI into a 600x600 image.
5. Append the images and event ids to an HDF5 file.
"""

# --- Standard library ---
import sys
import argparse
import datetime as dt

# --- Project modules ---
from utils import log_utils
from utils import data_io
from image_preparation.image_prep_utils import config_utils
from image_preparation.image_prep_utils.pipeline import run_pipeline
from image_preparation.image_prep_utils.roi_utils import DivisibilityError


def main():
    """
    Prepare the image dataset.

    - Loads the wire signals given in the config.
    - Builds one record of three plane images per event with activity.
    - Stores the records in larcv[_<PROCESS>].h5 in the output directory.
    """

    # ---- CLI arguments ----
    parser = argparse.ArgumentParser(
        prog="prepare_image_dataset",
        description="Prepare wire images of TPC events",
    )
    parser.add_argument("--config", required=True, help="Path to config file (.py)")
    parser.add_argument("--event_type", type=int, help="Override event type")
    parser.add_argument("--max_events", type=int, help="Stop after this many events")
    args = parser.parse_args()

    # ---- Load config ----
    config = config_utils.load_config(args.config)
    if args.event_type is not None:
        config["event_type"] = args.event_type

    # ---- Logger ----
    now = dt.datetime.now().strftime("%Y%m%d_%H%M%S")
    logger = log_utils.setup_logger(
        filename=f"ImagePreparation_{now}.log",
        archive_logs=True,
        log_folder="logs/prepare/images",
        log_level=config.get("log_level", "info"),
    )
    logger.info("Starting image preparation...")

    # ---- Validate config ----
    if not config_utils.check_config(config, logger):
        logger.error("Invalid config file, exiting.")
        sys.exit(1)
    logger.info(f"Using event type {config['event_type']}, ADC cut {config['adc_cut']}, "
                f"max tick {config['max_tick']}.")

    # ---- Load wire signals ----
    events = data_io.load_wire_file(config["DIRS"]["input_files"], label=config["wire_module_label"])
    logger.info(f"Loaded {len(events)} events.")

    # ---- Process events ----
    out_path = data_io.output_filename(config["DIRS"]["output_dir"])
    save_config = config.get("SAVE", {})
    try:
        with data_io.ImageRecordWriter(
            out_path,
            compression=save_config.get("compression", "gzip"),
            replace=save_config.get("replace_files", False),
        ) as writer:
            stats = run_pipeline(data_io.iterate_events(events), writer, config, logger,
                                 max_events=args.max_events)
    except DivisibilityError as e:
        logger.error(f"Aborting run: {e} ({e.axis}: count {e.count}, order {e.order}, "
                     f"range [{e.first}, {e.last}])")
        log_utils.close_log_handlers(logger)
        sys.exit(1)

    logger.info(f"Saved {stats['written']} records to {out_path}.")
    logger.info("Finished image preparation.")
    log_utils.close_log_handlers(logger)


if __name__ == "__main__":
    main()
