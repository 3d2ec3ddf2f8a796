"""
Event loop of the image preparation.

Per event: fill a fresh WireSignalStore, select the best APA, find the ROI
of each plane and build the three plane images. Events without activity or
without an ROI on any plane are skipped. A DivisibilityError is not caught
here and stops the run.
"""

# --- Standard library ---
import logging
from collections import Counter
from typing import NamedTuple

# --- Third-party ---
import numpy as np
from tqdm import tqdm

# --- Project modules ---
from image_preparation.image_prep_utils import geometry
from image_preparation.image_prep_utils.image_utils import build_image
from image_preparation.image_prep_utils.roi_utils import find_best_apa, find_roi
from image_preparation.image_prep_utils.wire_store import WireSignalStore



class EventRecord(NamedTuple):
    run: int
    subrun: int
    event: int
    images: np.ndarray  # shape (3, 600, 600), planes in order 0, 1, 2
    event_type: int


# Skip reasons, used as keys of the run statistics
NO_ACTIVITY = "no_activity"
NO_APA = "no_apa"
NO_ROI = "no_roi"



def process_event(event_id: tuple, wire_signals, config: dict, logger: logging.Logger,
                  stats: Counter | None = None) -> EventRecord | None:
    """
    Produce the image record of one event.

    Parameters
    ----------
    event_id: tuple
        (run, subrun, event)
    wire_signals: iterable
        (channel, samples) pairs of the event
    config: dict
        Config file as parsed
    logger: logging.Logger
        Logger
    stats: Counter
        Optional, incremented with the skip reason of skipped events

    Returns
    -------
    record: EventRecord or None
        None if the event is skipped.
    """
    run, subrun, event = event_id
    stats = stats if stats is not None else Counter()

    store = WireSignalStore()
    for channel, samples in wire_signals:
        store.ingest(channel, samples)

    apas = store.active_apas()
    if not apas:
        logger.info(f"Skipping event {run}/{subrun}/{event}. No activity inside the TPC!")
        stats[NO_ACTIVITY] += 1
        return None

    best_apa = find_best_apa(store, apas, config["max_tick"])
    if best_apa is None:
        logger.info(f"Skipping event {run}/{subrun}/{event}. Could not find good APA!")
        stats[NO_APA] += 1
        return None

    rois = []
    for plane in range(geometry.nb_planes):
        roi = find_roi(store, best_apa, plane, config["adc_cut"], logger=logger)
        if roi is None:
            logger.info(f"Skipping event {run}/{subrun}/{event}. "
                        f"Could not find good ROI in APA {best_apa}, plane {plane}!")
            stats[NO_ROI] += 1
            return None
        rois.append(roi)

    images = np.stack([
        build_image(store, roi, mode=config.get("compression_mode", "sum"), logger=logger)
        for roi in rois
    ])

    return EventRecord(int(run), int(subrun), int(event), images, int(config["event_type"]))



def run_pipeline(events, writer, config: dict, logger: logging.Logger,
                 max_events: int | None = None) -> Counter:
    """
    Process events one after the other and append the records to a writer.

    Parameters
    ----------
    events: iterable
        (event_id, wire_signals) pairs, e.g. from data_io.iterate_events
    writer:
        Object with an append(record) method, e.g. data_io.ImageRecordWriter
    config: dict
        Config file as parsed
    logger: logging.Logger
        Logger
    max_events: int
        Optional, stop after this many events

    Returns
    -------
    stats: Counter
        Number of processed and written events, and skipped events per reason.
    """
    stats = Counter()

    for i, (event_id, wire_signals) in enumerate(tqdm(events, desc="Processing events")):
        if max_events is not None and i >= max_events:
            break
        stats["processed"] += 1

        record = process_event(event_id, wire_signals, config, logger, stats=stats)
        if record is None:
            continue

        writer.append(record)
        stats["written"] += 1

    logger.info(f"Processed {stats['processed']} events, wrote {stats['written']} records "
                f"(no activity: {stats[NO_ACTIVITY]}, no APA: {stats[NO_APA]}, "
                f"no ROI: {stats[NO_ROI]}).")
    return stats
