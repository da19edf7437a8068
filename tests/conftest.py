import json
import stat
import sys
from pathlib import Path

import pytest
from tifffile import tifffile

from ridge_saw.extractor import RidgeExtractor
from ridge_saw.lines import LineDataset

FAKE_RIDGETOOL = """\
#!{python}
import json
import os
import sys

args = sys.argv[1:]
with open(os.environ["FAKE_RIDGETOOL_LOG"], "a") as f:
    f.write(json.dumps(args) + "\\n")
status = int(os.environ.get("FAKE_RIDGETOOL_STATUS", "0"))
if status:
    if os.environ.get("FAKE_RIDGETOOL_RAW_STDERR"):
        sys.stderr.buffer.write(b"bad \\xff\\xfe\\n")
    sys.stderr.write("ridgetool: cannot read input image\\n")
    sys.stderr.flush()
    sys.exit(status)
with open(args[-1], "w") as f:
    f.write(os.environ.get("FAKE_RIDGETOOL_OUTPUT", '{{"kind": "LINES", "lines": []}}'))
"""


class FakeExtractor(RidgeExtractor):
    """Returns canned datasets in order, repeating the last one."""

    def __init__(self, *datasets: LineDataset, error: Exception | None = None):
        self.datasets = list(datasets) or [LineDataset()]
        self.error = error
        self.calls: list[tuple[Path, float]] = []
        self.rasters = []

    def extract(self, path, scale):
        path = Path(path)
        self.calls.append((path, scale))
        if path.suffix == ".tif":
            self.rasters.append(tifffile.imread(path))
        if self.error is not None:
            raise self.error
        return self.datasets[min(len(self.calls), len(self.datasets)) - 1]


class FakeRidgetool:
    def __init__(self, path: Path, log: Path, monkeypatch):
        self.path = path
        self.log = log
        self.monkeypatch = monkeypatch

    def set_lines(self, lines, kind="LINES"):
        self.set_output(json.dumps({"kind": kind, "lines": lines}))

    def set_output(self, text: str):
        self.monkeypatch.setenv("FAKE_RIDGETOOL_OUTPUT", text)

    def fail(self, status: int = 1, raw_stderr: bool = False):
        self.monkeypatch.setenv("FAKE_RIDGETOOL_STATUS", str(status))
        if raw_stderr:
            self.monkeypatch.setenv("FAKE_RIDGETOOL_RAW_STDERR", "1")

    def calls(self) -> list[list[str]]:
        if not self.log.exists():
            return []
        return [json.loads(line) for line in self.log.read_text().splitlines()]


@pytest.fixture
def fake_ridgetool(tmp_path, monkeypatch):
    script = tmp_path / "ridgetool"
    script.write_text(FAKE_RIDGETOOL.format(python=sys.executable))
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    log = tmp_path / "ridgetool.log"
    monkeypatch.setenv("RIDGETOOL", str(script))
    monkeypatch.setenv("FAKE_RIDGETOOL_LOG", str(log))
    monkeypatch.delenv("FAKE_RIDGETOOL_STATUS", raising=False)
    monkeypatch.delenv("FAKE_RIDGETOOL_OUTPUT", raising=False)
    monkeypatch.delenv("FAKE_RIDGETOOL_RAW_STDERR", raising=False)
    return FakeRidgetool(script, log, monkeypatch)


@pytest.fixture
def work_dir(tmp_path):
    path = tmp_path / "work"
    path.mkdir()
    return path


def write_dataset(dataset: LineDataset, path: Path) -> None:
    """Write `dataset` in the JSON layout ridgetool output is read in."""
    data = {
        "kind": dataset.kind.value,
        "lines": [line.points.tolist() for line in dataset],
    }
    path.write_text(json.dumps(data))
