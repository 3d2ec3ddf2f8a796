"""
Per-event storage of wire signals.

A WireSignalStore maps a channel id to its ADC samples. It lives for one
event only: the pipeline creates a new store for every event.
"""

# --- Third-party ---
import numpy as np

# --- Project modules ---
from image_preparation.image_prep_utils.geometry import apa_of



class WireSignalStore:
    """ Mapping channel id -> ADC samples of the current event."""

    def __init__(self):
        self._signals = {}

    def __len__(self) -> int:
        return len(self._signals)

    def __contains__(self, channel: int) -> bool:
        return channel in self._signals

    @property
    def channels(self) -> list:
        return list(self._signals.keys())

    def ingest(self, channel: int, samples) -> None:
        """ Insert or overwrite the samples of a channel."""
        if channel < 0:
            raise ValueError(f"Channel ids must be non-negative, got {channel}.")
        self._signals[int(channel)] = np.asarray(samples, dtype=np.float32)

    def lookup(self, channel: int) -> np.ndarray | None:
        return self._signals.get(channel)

    def sample(self, channel: int, tick: int) -> float:
        """ Amplitude at (channel, tick). Zero if the channel or tick is absent."""
        samples = self._signals.get(channel)
        if samples is None or tick < 0 or tick >= len(samples):
            return 0.0
        return float(samples[tick])

    def clear(self) -> None:
        self._signals.clear()

    def active_apas(self) -> list:
        """
        Distinct APA indices touched by a channel with a non-empty signal.

        Returns
        -------
        apas : list of int
            APA indices in the order they were first ingested.
        """
        apas = []
        for channel, samples in self._signals.items():
            if len(samples) == 0:
                continue
            apa = apa_of(channel)
            if apa not in apas:
                apas.append(apa)
        return apas

    def window(self, first_channel: int, last_channel: int,
               first_tick: int, last_tick: int) -> np.ndarray:
        """
        Dense block of samples, zero where no data is stored.

        Parameters
        ----------
        first_channel, last_channel : int
            Inclusive channel range (rows).
        first_tick, last_tick : int
            Inclusive tick range (columns).

        Returns
        -------
        block : np.ndarray
            Array of shape (n_channels, n_ticks), dtype float32.
        """
        n_channels = last_channel - first_channel + 1
        n_ticks = last_tick - first_tick + 1
        block = np.zeros((max(n_channels, 0), max(n_ticks, 0)), dtype=np.float32)

        for row, channel in enumerate(range(first_channel, last_channel + 1)):
            samples = self._signals.get(channel)
            if samples is None:
                continue
            start = max(first_tick, 0)
            stop = min(last_tick + 1, len(samples))
            if stop > start:
                block[row, start - first_tick:stop - first_tick] = samples[start:stop]

        return block
