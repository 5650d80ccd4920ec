"""
Input/Output Manager
Loads pipe configurations from JSON and saves reported results to .h5 files.
"""
from __future__ import annotations

import json
import logging
from importlib.metadata import version, PackageNotFoundError
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List

import h5py
import numpy as np

from pipeheattransfer.model.pipe import PipeConfig

if TYPE_CHECKING:
    from pipeheattransfer.controller.component import PipeReport

# Get module logger
logger = logging.getLogger(__name__)

try:
    APP_VERSION = version("pipeheattransfer")
except PackageNotFoundError:
    APP_VERSION = "0.0.0-dev"


def load_pipe_configs(filepath: str | Path) -> List[PipeConfig]:
    """
    Read pipe configurations from a JSON file.

    The file holds either a list of pipe dictionaries or an object with a
    "pipes" list.
    """
    logger.info(f"Loading pipe configurations from: {filepath}")
    with open(filepath, "r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("pipes", [])
    if not isinstance(data, list):
        raise ValueError(f"File '{filepath}' does not contain a list of pipes.")

    configs = [PipeConfig.from_dict(item) for item in data]
    logger.debug(f"Loaded {len(configs)} pipe configuration(s).")
    return configs


def save_pipe_configs(configs: List[PipeConfig], filepath: str | Path) -> None:
    """Write pipe configurations to a JSON file."""
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump({"pipes": [config.to_dict() for config in configs]}, f, indent=2)
    logger.info(f"Saved {len(configs)} pipe configuration(s) to: {filepath}")


def _group_key(name: str, f: h5py.File) -> str:
    """HDF5 group key for a pipe name: "/" replaced, unique within the file."""
    key = name.replace("/", "_") or "_"
    candidate, n = key, 1
    while candidate in f:
        candidate = f"{key}_{n}"
        n += 1
    return candidate


class ResultsRecorder:
    """
    Collects the reports of every pipe per macro timestep and writes them to HDF5.

    Layout: one group per pipe, holding a `time` dataset (hours) and one
    dataset per reported quantity. The pipe name is kept in the `name`
    attribute of its group, since HDF5 reads "/" in a group key as a path.
    """

    def __init__(self) -> None:
        self.times: Dict[str, List[float]] = {}
        self.records: Dict[str, Dict[str, List[float]]] = {}
        self.kinds: Dict[str, str] = {}

    def __len__(self) -> int:
        return sum(len(t) for t in self.times.values())

    def record(self, time: float, report: PipeReport) -> None:
        """
        Store one report.

        Args:
            time: Simulation time in hours.
            report: Report of a pipe for the timestep.
        """
        self.times.setdefault(report.name, []).append(time)
        self.kinds[report.name] = report.kind.value
        columns = self.records.setdefault(report.name, {})
        for key, val in report.to_dict().items():
            if key in ("name", "kind"):
                continue
            columns.setdefault(key, []).append(float(val))

    def series(self, pipe_name: str, quantity: str) -> np.ndarray:
        """Recorded values of one quantity of one pipe."""
        return np.asarray(self.records[pipe_name][quantity], dtype=np.float64)

    def save(self, filepath: str | Path) -> None:
        logger.info(f"Saving results to: {filepath}")
        try:
            with h5py.File(filepath, "w") as f:
                f.attrs["version"] = APP_VERSION
                for name, columns in self.records.items():
                    grp = f.create_group(_group_key(name, f))
                    grp.attrs["name"] = name
                    grp.attrs["environment"] = self.kinds[name]
                    grp.create_dataset("time", data=np.array(self.times[name], dtype=np.float64))
                    for key, values in columns.items():
                        grp.create_dataset(key, data=np.array(values, dtype=np.float64), compression="gzip")
            logger.info(f"Results saved to: {filepath}")

        except OSError as e:
            logger.exception(f"Failed to save results: {e}")
            raise

    @staticmethod
    def load(filepath: str | Path) -> Dict[str, Dict[str, np.ndarray]]:
        """Read a results file back into plain arrays, keyed by pipe name."""
        logger.info(f"Loading results from: {filepath}")
        if not h5py.is_hdf5(filepath):
            msg = f"File '{filepath}' is not a valid HDF5 file."
            logger.error(msg)
            raise ValueError(msg)

        results: Dict[str, Dict[str, np.ndarray]] = {}
        with h5py.File(filepath, "r") as f:
            for group_key, grp in f.items():
                results[grp.attrs.get("name", group_key)] = {key: grp[key][()] for key in grp.keys()}
        return results
