import json
import math
from enum import Enum
from pathlib import Path
from typing import Any, NamedTuple

import numpy as np
from numpy.typing import NDArray

from ridge_saw.errors import DatasetError


class DatasetKind(Enum):
    POINTS = "POINTS"
    LINES = "LINES"
    SEGMENTS = "SEGMENTS"


class Point(NamedTuple):
    row: float
    col: float


class Line:
    """One detected ridge polyline, stored as an (n, 2) array of (row, col)."""

    points: NDArray[np.float64]

    def __init__(self, points):
        points = np.asarray(points, dtype=np.float64)
        if points.size == 0:
            raise DatasetError("Line has no points")
        if points.ndim != 2 or points.shape[1] != 2:
            raise DatasetError(f"Line points must be (row, col) pairs, got {points.shape}")
        self.points = points

    def __len__(self):
        return len(self.points)

    def __getitem__(self, index: int) -> Point:
        row, col = self.points[index]
        return Point(float(row), float(col))

    @property
    def start(self) -> Point:
        return self[0]

    @property
    def end(self) -> Point:
        return self[-1]


class LineDataset:
    kind: DatasetKind
    lines: list[Line]

    def __init__(self, lines=(), kind: DatasetKind = DatasetKind.LINES):
        if kind is not DatasetKind.LINES:
            raise DatasetError(f"Expected a LINES dataset, got {kind.value}")
        self.kind = kind
        self.lines = [ln if isinstance(ln, Line) else Line(ln) for ln in lines]

    def __len__(self):
        return len(self.lines)

    def __getitem__(self, index: int) -> Line:
        return self.lines[index]

    def __iter__(self):
        return iter(self.lines)


def _parse_point(point: Any, line_idx: int, point_idx: int) -> tuple[float, float]:
    where = f"line {line_idx}, point {point_idx}"
    if not isinstance(point, (list, tuple)) or len(point) != 2:
        raise DatasetError(f"Malformed point at {where}: {point!r}")
    coords = []
    for value in point:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise DatasetError(f"Non-numeric coordinate at {where}: {value!r}")
        try:
            coord = float(value)
        except OverflowError:
            raise DatasetError(f"Coordinate out of range at {where}")
        if not math.isfinite(coord):
            raise DatasetError(f"Non-finite coordinate at {where}: {value!r}")
        coords.append(coord)
    return coords[0], coords[1]


def parse_dataset(data: Any) -> LineDataset:
    """Build a LineDataset from decoded JSON, rejecting anything not of the LINES kind."""
    if not isinstance(data, dict):
        raise DatasetError("Dataset must be an object with 'kind' and 'lines'")
    if "kind" not in data:
        raise DatasetError("Dataset has no 'kind'")
    try:
        kind = DatasetKind(str(data["kind"]).upper())
    except ValueError:
        raise DatasetError(f"Unknown dataset kind: {data['kind']!r}")
    if kind is not DatasetKind.LINES:
        raise DatasetError(f"Expected a LINES dataset, got {kind.value}")

    raw_lines = data.get("lines")
    if not isinstance(raw_lines, list):
        raise DatasetError("LINES dataset has no 'lines' list")

    lines = []
    for i, raw_line in enumerate(raw_lines):
        if not isinstance(raw_line, list):
            raise DatasetError(f"Malformed line {i}: {raw_line!r}")
        if not raw_line:
            raise DatasetError(f"Line {i} has no points")
        points = [_parse_point(p, i, j) for j, p in enumerate(raw_line)]
        lines.append(Line(points))
    return LineDataset(lines, kind=kind)


def load_dataset(path: str | Path) -> LineDataset:
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as err:
        raise DatasetError(
            f"Failed to load ridge data from '{path}': {err.strerror or err}"
        ) from err
    except ValueError as err:
        raise DatasetError(f"Failed to load ridge data from '{path}': {err}") from err
    return parse_dataset(data)

