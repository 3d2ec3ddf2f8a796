"""
Utility functions to turn a region of interest into a fixed-size image.
"""

# --- Standard library ---
import logging

# --- Third-party ---
import numpy as np

# --- Project modules ---
from image_preparation.image_prep_utils import geometry
from image_preparation.image_prep_utils.roi_utils import ROI
from image_preparation.image_prep_utils.wire_store import WireSignalStore


COMPRESSION_MODES = ("sum", "average", "max")



def compress(grid: np.ndarray, rows: int, cols: int, mode: str = "sum") -> np.ndarray:
    """
    Compress a 2D grid to (rows, cols) by combining equal blocks of cells.

    Parameters
    ----------
    grid : np.ndarray
        Input array, shape must be divisible by (rows, cols)
    rows, cols : int
        Output shape
    mode : str
        'sum', 'average' or 'max' of each block

    Returns
    -------
    np.ndarray
        Compressed array of shape (rows, cols)
    """
    if mode not in COMPRESSION_MODES:
        raise ValueError(f"Unknown compression mode '{mode}'. Use one of {COMPRESSION_MODES}.")
    if rows <= 0 or cols <= 0 or grid.shape[0] % rows or grid.shape[1] % cols:
        raise ValueError(f"Can not compress grid of shape {grid.shape} to ({rows}, {cols}).")

    blocks = grid.reshape(rows, grid.shape[0] // rows, cols, grid.shape[1] // cols)
    if mode == "sum":
        return blocks.sum(axis=(1, 3))
    elif mode == "average":
        return blocks.mean(axis=(1, 3))
    return blocks.max(axis=(1, 3))



def embed(image: np.ndarray, size: int = geometry.image_size,
          logger: logging.Logger | None = None) -> np.ndarray:
    """
    Place an image in the top-left corner of a zero canvas of shape (size, size).

    Pixels beyond the canvas are dropped.
    """
    canvas = np.zeros((size, size), dtype=np.float32)
    width = min(image.shape[0], size)
    height = min(image.shape[1], size)
    if (width, height) != image.shape and logger is not None:
        logger.warning(f"Image of shape {image.shape} cropped to the {size}x{size} canvas.")
    canvas[:width, :height] = image[:width, :height]
    return canvas



def build_image(store: WireSignalStore, roi: ROI, mode: str = "sum",
                logger: logging.Logger | None = None) -> np.ndarray:
    """
    Build the canvas image of one plane from its ROI.

    The ROI is read from the store as a (wires x ticks) grid, compressed by
    downsample along wires and by 4 * downsample along ticks, and embedded in
    the canvas.

    Parameters
    ----------
    store : WireSignalStore
        Wire signals of the current event
    roi : ROI
        Region of interest, as returned by find_roi
    mode : str
        Compression mode
    logger : logging.Logger
        Optional, logs the image resolution

    Returns
    -------
    image : np.ndarray
        Array of shape (600, 600), dtype float32
    """
    grid = store.window(roi.first_wire, roi.last_wire, roi.first_tick, roi.last_tick)

    width = roi.n_wires // roi.downsample
    height = roi.n_ticks // (geometry.time_compression * roi.downsample)
    compressed = compress(grid, width, height, mode=mode)

    if logger is not None:
        logger.debug(f"Original image resolution {roi.n_wires}x{roi.n_ticks} "
                     f"=> downsampling to {width}x{height}.")

    return embed(compressed, logger=logger)
