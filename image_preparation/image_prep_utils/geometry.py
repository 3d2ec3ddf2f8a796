"""
    This module contains the readout geometry and the image parameters.

Channels are grouped in APAs of 2560 consecutive channels. Each APA holds
two induction planes (800 channels each) followed by one collection
plane (960 channels).
"""


nb_apa_channels = 2560  # channels per APA
nb_plane_channels = (800, 800, 960)  # channels per plane (U, V, Z)
first_plane_channel = (0, 800, 1600)  # plane offset inside an APA
last_plane_channel = (799, 1599, 2559)
nb_planes = len(nb_plane_channels)

image_size = 600  # canvas is image_size x image_size pixels
time_compression = 4  # ticks per pixel before downsampling

wire_margin = 10  # wires added on each side, per downsample unit
tick_margin = 40  # ticks added on each side, per downsample unit

# Canonical readout window (inclusive). The downsampled window is shifted by
# the calibration offset of two ticks.
tick_window = {
    1: (0, 4491),
    2: (2, 4489),
}


def apa_of(channel: int) -> int:
    """ APA index of a global channel id."""
    return channel // nb_apa_channels


def plane_of(channel: int) -> int:
    """ Plane index (0, 1, 2) of a global channel id."""
    return min((channel % nb_apa_channels) // nb_plane_channels[0], nb_planes - 1)


def plane_channel_range(apa: int, plane: int) -> tuple[int, int]:
    """
    First and last (inclusive) global channel of a plane.

    Parameters
    ----------
    apa : int
        APA index
    plane : int
        Plane index, 0, 1 or 2

    Returns
    -------
    (first_channel, last_channel) : tuple of int
    """
    if plane not in range(nb_planes):
        raise ValueError(f"Plane must be 0, 1 or 2, got {plane}.")
    offset = apa * nb_apa_channels
    return offset + first_plane_channel[plane], offset + last_plane_channel[plane]


def apa_channel_range(apa: int) -> tuple[int, int]:
    """ First and last (inclusive) global channel of an APA."""
    return apa * nb_apa_channels, (apa + 1) * nb_apa_channels - 1
