from typing import NamedTuple, TextIO

import numpy as np

from ridge_saw.errors import OutputError
from ridge_saw.lines import Line, LineDataset


class Sample(NamedTuple):
    steps: int
    distance: float

    def to_csv(self) -> str:
        return f"{self.steps}, {self.distance:f}\n"


def reduce_line(line: Line) -> Sample:
    """Reduce a ridge line to its step count and end-to-end distance.

    Endpoints are floored to whole pixels before differencing, so the
    distance is measured between the pixels containing the endpoints.
    """
    start = np.floor(line.points[0])
    end = np.floor(line.points[-1])
    drow, dcol = end - start
    return Sample(steps=len(line) - 1, distance=float(np.hypot(dcol, drow)))


def write_sample(sample: Sample, sink: TextIO) -> None:
    try:
        sink.write(sample.to_csv())
    except (OSError, ValueError) as err:
        raise OutputError(f"Output failed: {err}") from err


def write_samples(dataset: LineDataset, sink: TextIO) -> int:
    """Stream one CSV record per line of `dataset`; return the number written."""
    count = 0
    for line in dataset:
        write_sample(reduce_line(line), sink)
        count += 1
    return count
