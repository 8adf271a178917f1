"""
Simulation Output
=================
The realised output of a run is indexed by the Smokeview (.smv) file. The
upstream parser turns that index into a JSON object; SmvData wraps it and
reads the time-series files it points to on demand.

Why is this file needed?
------------------------
1. Deferred I/O: Output checks are optional. Files are only read when a check
   asks for them, and each series is read at most once.
2. Tolerance: A missing or unreadable file, or a malformed row, is not an
   error. The series is reported absent (or the row skipped) and dependent
   checks are skipped.
"""
from __future__ import annotations

import asyncio
import csv
from dataclasses import dataclass
import logging
import os
from typing import Any, Dict, List, Optional, Protocol, Tuple

from fdsinspect.model.data_vector import DataPoint, DataVector

logger = logging.getLogger(__name__)


class OutputSource(Protocol):
    """What the verification engine needs from realised output."""
    chid: str

    async def get_hrr(self) -> Optional[DataVector]: ...


@dataclass(frozen=True)
class CsvEntry:
    index: int
    filename: str
    type: str

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> CsvEntry:
        return CsvEntry(index=int(data.get("index", 0)), filename=data["filename"], type=data["type"])


def _parse_float(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def read_hrr_csv(filepath: str, x_name: str = "Time", y_name: str = "HRR") -> DataVector:
    """
    Read a two-row-header FDS csv file (units, then column names).

    Rows where either column is missing or non-numeric are skipped.
    """
    with open(filepath, mode='r', encoding='utf-8-sig', newline='') as f:
        reader = csv.reader(f)
        units = [u.strip() for u in next(reader, [])]
        names = [n.strip() for n in next(reader, [])]
        try:
            x_col = names.index(x_name)
            y_col = names.index(y_name)
        except ValueError:
            raise ValueError(f"'{filepath}' has no '{x_name}' and '{y_name}' columns (found {names}).")

        values: List[DataPoint] = []
        skipped = 0
        for row in reader:
            x = _parse_float(row[x_col].strip()) if x_col < len(row) else None
            y = _parse_float(row[y_col].strip()) if y_col < len(row) else None
            if x is None or y is None:
                skipped += 1
                continue
            values.append(DataPoint(x, y))

    if skipped:
        logger.debug(f"Skipped {skipped} malformed row(s) in '{filepath}'")
    return DataVector(
        x_name=x_name,
        y_name=y_name,
        x_units=units[x_col] if x_col < len(units) else "",
        y_units=units[y_col] if y_col < len(units) else "",
        values=tuple(values),
    )


class SmvData:
    """The output index of one simulation run."""

    def __init__(
        self,
        base_dir: str,
        chid: str,
        csv_files: Optional[List[CsvEntry]] = None,
        version: Optional[int] = None,
        input_file: Optional[str] = None,
        fds_version: Optional[str] = None,
    ) -> None:
        self.base_dir = base_dir
        self.chid = chid
        self.csv_files: Tuple[CsvEntry, ...] = tuple(csv_files or [])
        self.version = version
        self.input_file = input_file
        self.fds_version = fds_version
        self._series_cache: Dict[str, Optional[DataVector]] = {}

    @staticmethod
    def from_dict(base_dir: str, data: Dict[str, Any]) -> SmvData:
        return SmvData(
            base_dir=base_dir,
            chid=data["chid"],
            csv_files=[CsvEntry.from_dict(entry) for entry in data.get("csv_files") or []],
            version=data.get("version"),
            input_file=data.get("input_file"),
            fds_version=data.get("fds_version"),
        )

    def get_csv_entry(self, csv_type: str) -> Optional[CsvEntry]:
        for entry in self.csv_files:
            if entry.type == csv_type:
                return entry
        return None

    async def get_hrr(self) -> Optional[DataVector]:
        """The realised HRR (kW) against time, None if it was not output."""
        if "hrr" not in self._series_cache:
            self._series_cache["hrr"] = await self._read_series("hrr")
        return self._series_cache["hrr"]

    async def _read_series(self, csv_type: str) -> Optional[DataVector]:
        entry = self.get_csv_entry(csv_type)
        if entry is None:
            logger.info(f"No '{csv_type}' csv file listed for '{self.chid}'")
            return None
        filepath = os.path.join(self.base_dir, entry.filename)
        logger.debug(f"Reading '{csv_type}' series from: {filepath}")
        try:
            return await asyncio.to_thread(read_hrr_csv, filepath)
        except (OSError, UnicodeDecodeError, ValueError) as e:
            logger.warning(f"Could not read '{csv_type}' csv file, treating it as absent: {e}")
            return None
