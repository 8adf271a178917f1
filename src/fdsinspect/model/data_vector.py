"""
Time Series Data
================
A named, unit-labelled series of (x, y) samples. Used for realised output
read from the simulation and for reference curves synthesised from the input.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple, Iterable, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


@dataclass(frozen=True)
class DataPoint:
    x: float
    y: float


@dataclass(frozen=True)
class DataVector:
    x_name: str
    y_name: str
    x_units: str = ""
    y_units: str = ""
    values: Tuple[DataPoint, ...] = field(default_factory=tuple)

    @staticmethod
    def from_arrays(
        x_name: str,
        y_name: str,
        xs: Iterable[float],
        ys: Iterable[float],
        x_units: str = "",
        y_units: str = "",
    ) -> DataVector:
        return DataVector(
            x_name=x_name,
            y_name=y_name,
            x_units=x_units,
            y_units=y_units,
            values=tuple(DataPoint(float(x), float(y)) for x, y in zip(xs, ys)),
        )

    @property
    def xs(self) -> npt.NDArray[np.float64]:
        return np.array([p.x for p in self.values], dtype=np.float64)

    @property
    def ys(self) -> npt.NDArray[np.float64]:
        return np.array([p.y for p in self.values], dtype=np.float64)

    def __len__(self) -> int:
        return len(self.values)

    def value_at(self, x: float) -> float:
        """Linearly interpolate the series at x, clamped to the end values."""
        if not self.values:
            raise ValueError(f"No data available for '{self.y_name}'.")
        return float(np.interp(x, self.xs, self.ys))

    @property
    def max_y(self) -> float:
        if not self.values:
            raise ValueError(f"No data available for '{self.y_name}'.")
        return float(np.max(self.ys))
