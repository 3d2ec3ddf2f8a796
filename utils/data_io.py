"""
Data I/O utilities for the wire image preparation.

Includes:
- Pickle helpers
- Wire signal files (HDF5) and event iteration
- Image record sink (HDF5)
"""
import os
import pickle

import awkward as ak
import h5py
import numpy as np
from tqdm import tqdm

from image_preparation.image_prep_utils import geometry



# ------------------------------------------------------------
# Pickle I/O
# ------------------------------------------------------------
def load_pickle_file(files: str | list) -> ak.Array:
    """
    Load data from one or multiple pickle files.

    Parameters
    ----------
    files : str or list of str
        Path to a `.pkl` file or a list of file paths.

    Returns
    -------
    ak.Array
        Loaded data. If a list is given, files are concatenated.

    Raises
    ------
    TypeError
        If input is not str or list.
    """
    if isinstance(files, str):
        with open(files, 'rb') as file_loader:
            data_out = pickle.load(file_loader)
    elif isinstance(files, list):
        files_to_append = []
        for file in files:
            with open(file, 'rb') as file_loader:
                files_to_append.append(pickle.load(file_loader))
        data_out = ak.concatenate(files_to_append)
    else:
        raise TypeError("File must be either str or list.")

    return data_out



def save_pickle_file(obj, path: str) -> None:
    """
    Save an object to a pickle file.

    Parameters
    ----------
    obj : any
        Object to be pickled.
    path : str
        Output file path.
    """
    with open(path, "wb") as f:
        pickle.dump(obj, f)



# ------------------------------------------------------------
# Wire signal files
# ------------------------------------------------------------
# Layout of the group <label> in a wire file:
#   run, subrun, event, n_wires   one entry per event
#   channel, n_ticks              one entry per wire
#   signal                        all samples, flattened
WIRE_EVENT_FIELDS = ("run", "subrun", "event")


def save_wire_file(events: ak.Array, filename: str, label: str = "caldata") -> None:
    """
    Store wire signals of several events in an HDF5 file.

    Parameters
    ----------
    events : ak.Array
        Records with fields run, subrun, event and wires, where wires is a
        list of records {channel, signal}.
    filename : str
        Output file, overwritten if it exists.
    label : str
        Name of the group holding the signals.
    """
    wires = events["wires"]
    signal = ak.flatten(wires["signal"], axis=1)

    with h5py.File(filename, "w") as h5f:
        group = h5f.create_group(label)
        for field in WIRE_EVENT_FIELDS:
            group.create_dataset(field, data=ak.to_numpy(events[field]).astype(np.int64))
        group.create_dataset("n_wires", data=ak.to_numpy(ak.num(wires, axis=1)).astype(np.int64))
        group.create_dataset("channel", data=ak.to_numpy(ak.flatten(wires["channel"])).astype(np.int64))
        group.create_dataset("n_ticks", data=ak.to_numpy(ak.num(signal, axis=1)).astype(np.int64))
        group.create_dataset("signal", data=ak.to_numpy(ak.flatten(signal)).astype(np.float32),
                             compression="gzip")



def load_wire_file(files: str | list, label: str = "caldata") -> ak.Array:
    """
    Load wire signals from one or multiple HDF5 or pickle files.

    Parameters
    ----------
    files : str or list of str
        `.h5`/`.hdf5` wire files or `.pkl` files holding an awkward array.
    label : str
        Name of the group holding the signals (HDF5 only).

    Returns
    -------
    ak.Array
        One record per event, fields run, subrun, event, wires.

    Raises
    ------
    TypeError
        If input is not str or list.
    ValueError
        If a file has an unknown extension or misses the group `label`.
    """
    if isinstance(files, str):
        files = [files]
    elif not isinstance(files, list):
        raise TypeError("Files must be either str or list.")

    data_list = []
    for file in files:
        if file.endswith(".pkl"):
            data_list.append(load_pickle_file(file))
            continue
        if not file.endswith((".h5", ".hdf5")):
            raise ValueError(f"Unknown file type of {file}.")

        with h5py.File(file, "r") as h5f:
            if label not in h5f:
                raise ValueError(f"Group '{label}' not present in {file}.")
            group = h5f[label]
            columns = {field: np.array(group[field]) for field in WIRE_EVENT_FIELDS}
            n_wires = np.array(group["n_wires"])
            channel = np.array(group["channel"])
            n_ticks = np.array(group["n_ticks"])
            signal = np.array(group["signal"])

        wires = ak.zip(
            {"channel": channel, "signal": ak.unflatten(signal, n_ticks)},
            depth_limit=1,
        )
        columns["wires"] = ak.unflatten(wires, n_wires)
        data_list.append(ak.zip(columns, depth_limit=1))

    return ak.concatenate(data_list) if len(data_list) > 1 else data_list[0]



def iterate_events(events: ak.Array):
    """
    Yield ((run, subrun, event), [(channel, samples), ...]) for every event.
    """
    for entry in events:
        event_id = tuple(int(entry[field]) for field in WIRE_EVENT_FIELDS)
        channels = ak.to_numpy(entry["wires"]["channel"])
        signals = [ak.to_numpy(signal) for signal in entry["wires"]["signal"]]
        yield event_id, list(zip(channels.tolist(), signals))



# ------------------------------------------------------------
# Image records
# ------------------------------------------------------------
def output_filename(output_dir: str) -> str:
    """ larcv_<PROCESS>.h5 if the PROCESS environment variable is set, else larcv.h5."""
    process = os.environ.get("PROCESS")
    name = f"larcv_{process}.h5" if process else "larcv.h5"
    return os.path.join(output_dir, name)



class ImageRecordWriter:
    """
    Append-only HDF5 file of image records.

    Datasets (N = number of records):
        run, subrun, event, event_type   (N,)
        images                           (N, 3, 600, 600)
    """

    scalar_fields = ("run", "subrun", "event", "event_type")

    def __init__(self, filename: str, compression: str | None = "gzip", replace: bool = False):
        self.filename = filename
        self.compression = compression
        self.h5f = h5py.File(filename, "w" if replace else "a")
        self._create_datasets()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def __len__(self) -> int:
        return self.h5f["event"].shape[0]

    def _create_datasets(self):
        for field in self.scalar_fields:
            if field not in self.h5f:
                self.h5f.create_dataset(
                    field,
                    shape=(0,),
                    maxshape=(None,),
                    dtype=np.int64,
                    chunks=True,
                )
        if "images" not in self.h5f:
            size = geometry.image_size
            self.h5f.create_dataset(
                "images",
                shape=(0, geometry.nb_planes, size, size),
                maxshape=(None, geometry.nb_planes, size, size),
                dtype=np.float32,
                chunks=(1, 1, size, size),
                compression=self.compression,
            )

    def append(self, record) -> None:
        """ Append one EventRecord."""
        images = np.asarray(record.images, dtype=np.float32)
        if images.shape != self.h5f["images"].shape[1:]:
            raise ValueError(f"Images of shape {images.shape} do not match the file layout.")

        n = len(self)
        for field in self.scalar_fields:
            dset = self.h5f[field]
            dset.resize(n + 1, axis=0)
            dset[n] = getattr(record, field)
        dset = self.h5f["images"]
        dset.resize(n + 1, axis=0)
        dset[n] = images

    def close(self) -> None:
        if self.h5f.id.valid:
            self.h5f.close()



def load_image_records(filenames: str | list, load_images: bool = True) -> ak.Array:
    """
    Load image records from one or several HDF5 files into an awkward array.

    Parameters
    ----------
    filenames : str or list of str
        Files written by ImageRecordWriter
    load_images : bool
        If False, only the scalar fields are loaded.

    Returns
    -------
    data
        Awkward Array
    """
    if isinstance(filenames, str):
        filenames = [filenames]
    elif not isinstance(filenames, list):
        raise TypeError("Filenames must be either str or list.")

    data_list = []
    for file in tqdm(filenames, disable=len(filenames) < 2):
        data_dict = {}
        with h5py.File(file, "r") as hdf_file:
            for field in ImageRecordWriter.scalar_fields:
                if field not in hdf_file:
                    raise ValueError("Field {} not present in file.".format(field))
                data_dict[field] = np.array(hdf_file[field])
            if load_images:
                data_dict["images"] = np.array(hdf_file["images"])
        data_list.append(ak.Array(data_dict))

    return ak.concatenate(data_list, axis=0)
