"""
Utility functions to locate the region of interest (ROI) of an event.

Includes:
- best APA selection
- ROI search per plane, with margins and downsampling corrections
"""

# --- Standard library ---
import logging
from typing import NamedTuple

# --- Third-party ---
import numpy as np

# --- Project modules ---
from image_preparation.image_prep_utils import geometry
from image_preparation.image_prep_utils.wire_store import WireSignalStore



class ROI(NamedTuple):
    """ Inclusive wire and tick bounds of a region of interest."""
    first_wire: int
    last_wire: int
    first_tick: int
    last_tick: int
    downsample: int

    @property
    def n_wires(self) -> int:
        return self.last_wire - self.first_wire + 1

    @property
    def n_ticks(self) -> int:
        return self.last_tick - self.first_tick + 1



class DivisibilityError(RuntimeError):
    """
    Raised when the ROI can not be made divisible by the downsample order.

    This is a logic error of the ROI correction, not a property of the
    event, so it should stop the run.
    """

    def __init__(self, axis: str, count: int, order: int, first: int, last: int):
        self.axis = axis
        self.count = count
        self.order = order
        self.first = first
        self.last = last
        super().__init__(
            f"Number of {axis} {count} in [{first}, {last}] "
            f"is not divisible by {order}."
        )



# ------------------------------------------------------------
# APA selection
# ------------------------------------------------------------
def apa_activity(store: WireSignalStore, apa: int, max_tick: int) -> float:
    """
    Summed amplitude of all channels of an APA within ticks [0, max_tick).

    Parameters
    ----------
    store: WireSignalStore
        Wire signals of the current event
    apa: int
        APA index
    max_tick: int
        Upper (exclusive) tick bound

    Returns
    -------
    total: float
    """
    first_channel, last_channel = geometry.apa_channel_range(apa)
    total = 0.0
    for channel in range(first_channel, last_channel + 1):
        samples = store.lookup(channel)
        if samples is not None:
            total += float(np.sum(samples[:max_tick], dtype=np.float64))
    return total



def find_best_apa(store: WireSignalStore, apas: list, max_tick: int) -> int | None:
    """
    Select the APA with the largest summed amplitude.

    The first APA in `apas` wins ties, since the best candidate is only
    replaced on a strict improvement.

    Parameters
    ----------
    store: WireSignalStore
        Wire signals of the current event
    apas: list
        Candidate APA indices
    max_tick: int
        Only ticks below max_tick contribute to the sum

    Returns
    -------
    best_apa: int or None
        None if there is no candidate.
    """
    best_apa = None
    best_adc = None

    for apa in apas:
        adc = apa_activity(store, apa, max_tick)
        if best_apa is None or adc > best_adc:
            best_apa = apa
            best_adc = adc

    return best_apa



# ------------------------------------------------------------
# ROI search
# ------------------------------------------------------------
def find_bounding_box(store: WireSignalStore, first_channel: int, last_channel: int,
                      adc_cut: float) -> tuple | None:
    """ Smallest (first_wire, last_wire, first_tick, last_tick) box above adc_cut."""
    first_wire = last_wire = first_tick = last_tick = None

    for channel in range(first_channel, last_channel + 1):
        samples = store.lookup(channel)
        if samples is None:
            continue
        ticks = np.flatnonzero(samples > adc_cut)
        if ticks.size == 0:
            continue
        if first_wire is None:
            first_wire = channel
            first_tick, last_tick = int(ticks[0]), int(ticks[-1])
        else:
            first_tick = min(first_tick, int(ticks[0]))
            last_tick = max(last_tick, int(ticks[-1]))
        last_wire = channel

    if first_wire is None:
        return None
    return first_wire, last_wire, first_tick, last_tick



def choose_downsample(n_wires: int, n_ticks: int) -> int:
    """ Downsample by two if the ROI does not fit on the canvas."""
    if n_wires > geometry.image_size or n_ticks // geometry.time_compression > geometry.image_size:
        return 2
    return 1



def pad_wires(first_wire: int, last_wire: int, first_channel: int, last_channel: int,
              downsample: int) -> tuple[int, int]:
    """
    Add the wire margin and make the number of wires divisible by downsample.
    """
    margin = geometry.wire_margin * downsample
    first_wire = max(first_wire - margin, first_channel)
    last_wire = min(last_wire + margin, last_channel)

    n_wires = last_wire - first_wire + 1
    if n_wires % downsample != 0:
        if last_wire < last_channel:
            last_wire += 1
        elif first_wire > first_channel:
            first_wire -= 1
        else:
            raise DivisibilityError("wires", n_wires, downsample, first_wire, last_wire)

    return first_wire, last_wire



def pad_ticks(first_tick: int, last_tick: int, downsample: int) -> tuple[int, int]:
    """
    Add the tick margin and make the number of ticks divisible by
    time_compression * downsample, inside the canonical readout window.

    If the padded ROI would not fit, the whole window is used.
    """
    window_first, window_last = geometry.tick_window[downsample]
    window_span = window_last - window_first
    order = geometry.time_compression * downsample
    margin = geometry.tick_margin * downsample

    def missing(first, last):
        remainder = (last - first + 1) % order
        return order - remainder if remainder else 0

    ticks_to_add = missing(first_tick, last_tick)
    if (last_tick - first_tick + 1) + 2 * margin + ticks_to_add > window_span:
        return window_first, window_last

    # start of the ROI
    first_tick = max(first_tick - (margin + ticks_to_add), window_first)

    # end of the ROI
    ticks_to_add = missing(first_tick, last_tick)
    last_tick = min(last_tick + margin + ticks_to_add, window_last)

    # residual from clamping at the window edges
    ticks_to_add = missing(first_tick, last_tick)
    if ticks_to_add:
        first_tick = max(first_tick - ticks_to_add, window_first)

    n_ticks = last_tick - first_tick + 1
    if n_ticks % order != 0:
        raise DivisibilityError("ticks", n_ticks, order, first_tick, last_tick)

    return first_tick, last_tick



def find_roi(store: WireSignalStore, apa: int, plane: int, adc_cut: float,
             logger: logging.Logger | None = None) -> ROI | None:
    """
    Find the region of interest of one plane.

    Locates the box of all samples above adc_cut, decides the downsample
    factor from its size, then adds margins and corrects the box so that the
    number of wires is divisible by the downsample factor and the number of
    ticks by 4 * downsample.

    Parameters
    ----------
    store: WireSignalStore
        Wire signals of the current event
    apa: int
        APA index
    plane: int
        Plane index (0, 1, 2)
    adc_cut: float
        Samples must be strictly above this value to enter the ROI
    logger: logging.Logger
        Optional, to log the ROI

    Returns
    -------
    roi: ROI or None
        None if no sample of the plane is above adc_cut, or if all of
        them lie outside the readout window.

    Raises
    ------
    DivisibilityError
        If the corrected ROI is still not divisible.
    """
    first_channel, last_channel = geometry.plane_channel_range(apa, plane)

    box = find_bounding_box(store, first_channel, last_channel, adc_cut)
    if box is None:
        return None
    first_wire, last_wire, first_tick, last_tick = box

    downsample = choose_downsample(last_wire - first_wire + 1, last_tick - first_tick + 1)

    # activity entirely outside the readout window leaves nothing to image
    window_first, window_last = geometry.tick_window[downsample]
    if first_tick > window_last or last_tick < window_first:
        if logger is not None:
            logger.debug(f"APA {apa} plane {plane}: activity in ticks [{first_tick}, {last_tick}] "
                         f"is outside the readout window [{window_first}, {window_last}].")
        return None

    first_wire, last_wire = pad_wires(first_wire, last_wire, first_channel, last_channel, downsample)
    first_tick, last_tick = pad_ticks(first_tick, last_tick, downsample)

    roi = ROI(first_wire, last_wire, first_tick, last_tick, downsample)
    if logger is not None:
        logger.debug(f"APA {apa} plane {plane}: wires [{first_wire}, {last_wire}], "
                     f"ticks [{first_tick}, {last_tick}], downsample {downsample}.")
    return roi
