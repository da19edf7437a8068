import logging
import os
import subprocess
import tempfile
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from ridge_saw.constants import RIDGETOOL_DEFAULT, RIDGETOOL_ENV, TEMP_PREFIX
from ridge_saw.errors import ExtractorError, ResourceError, TempFileError
from ridge_saw.lines import LineDataset, load_dataset

logger = logging.getLogger(__name__)


@contextmanager
def temporary_path(
    suffix: str = "",
    dir: Optional[str | Path] = None,
    error: type[ResourceError] = TempFileError,
) -> Iterator[Path]:
    """Reserve a temporary file and remove it when the block exits, however it exits."""
    try:
        fd, name = tempfile.mkstemp(prefix=TEMP_PREFIX, suffix=suffix, dir=dir)
    except OSError as err:
        raise error(f"Failed to create temporary file: {err.strerror or err}") from err
    os.close(fd)
    path = Path(name)
    logger.debug("Created temporary file %s", path)
    try:
        yield path
    finally:
        try:
            path.unlink(missing_ok=True)
        except OSError as err:
            logger.warning("Failed to remove temporary file %s: %s", path, err)


def resolve_ridgetool(environ=None) -> str:
    """Return the ridgetool executable, honouring the RIDGETOOL override."""
    environ = os.environ if environ is None else environ
    return environ.get(RIDGETOOL_ENV) or RIDGETOOL_DEFAULT


class RidgeExtractor(ABC):
    """Anything that turns an image file into ridge lines."""

    @abstractmethod
    def extract(self, path: str | Path, scale: float) -> LineDataset: ...


class RidgetoolExtractor(RidgeExtractor):
    """Run the external `ridgetool` program in line detection mode.

    The call blocks until the child exits; there is no timeout. The
    output dataset goes to a temporary file that is removed before
    `extract` returns or raises.
    """

    def __init__(
        self,
        executable: Optional[str] = None,
        temp_dir: Optional[str | Path] = None,
    ):
        self.executable = executable or resolve_ridgetool()
        self.temp_dir = temp_dir

    def command(self, input_path: str | Path, output_path: str | Path, scale: float):
        return [
            self.executable,
            "-l",
            f"-t{scale:f}",
            "-i0",
            str(input_path),
            str(output_path),
        ]

    def extract(self, path: str | Path, scale: float) -> LineDataset:
        with temporary_path(dir=self.temp_dir) as output_path:
            args = self.command(path, output_path, scale)
            logger.debug("Running %s", " ".join(args))
            try:
                result = subprocess.run(
                    args,
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.PIPE,
                    text=True,
                    errors="replace",
                )
            except OSError as err:
                raise ExtractorError(
                    f"Failed to run '{self.executable}': {err.strerror or err}"
                ) from err
            if result.returncode != 0:
                raise ExtractorError(
                    f"'{self.executable}' failed with exit status {result.returncode}",
                    diagnostics=result.stderr or "",
                )
            return load_dataset(output_path)
