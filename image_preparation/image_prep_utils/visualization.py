"""
Plot utils for the plane images of an event.
"""

# --- Standard library ---
import os

# --- Third party library ---
import numpy as np
import matplotlib.pyplot as plt


PLANE_NAMES = ("U", "V", "Z")



def plot_event_images(images: np.ndarray, title: str = "",
                      path_out: str | None = None, vmax: float | None = None):
    """
    Plot the three plane images of one event side by side.

    Parameters
    ----------
    images : np.ndarray
        Array of shape (3, 600, 600), wires along the first image axis
    title : str
        Figure title
    path_out : str
        If given, the figure is saved there and closed
    vmax : float
        Upper limit of the colour scale, default is the 99th percentile of
        the non-zero pixels

    Returns
    -------
    fig : matplotlib.figure.Figure or None
    """
    images = np.asarray(images)
    if vmax is None:
        nonzero = images[images > 0]
        vmax = float(np.percentile(nonzero, 99)) if nonzero.size else 1.0

    fig, ax = plt.subplots(1, 3, figsize=(18, 6))
    for plane, image in enumerate(images):
        # wires on the x axis, ticks on the y axis
        im = ax[plane].imshow(image.T, origin="lower", cmap="viridis", vmin=0, vmax=vmax)
        ax[plane].set_title(f"Plane {plane} ({PLANE_NAMES[plane]})")
        ax[plane].set_xlabel("Wire (compressed)")
        ax[plane].set_ylabel("Tick (compressed)")
    fig.colorbar(im, ax=ax, shrink=0.8, label="ADC")
    if title:
        fig.suptitle(title)

    if path_out:
        os.makedirs(os.path.dirname(path_out) or ".", exist_ok=True)
        fig.savefig(path_out)
        plt.close(fig)
        return None
    return fig
