import logging
import sys
from pathlib import Path
from typing import NamedTuple, Optional, TextIO

import numpy as np

from ridge_saw.config import LoopPolicy, RidgeSawConfig
from ridge_saw.constants import RASTER_SUFFIX
from ridge_saw.errors import GenerateTempFileError, OutputError
from ridge_saw.extractor import RidgeExtractor, RidgetoolExtractor, temporary_path
from ridge_saw.raster import export_surface
from ridge_saw.reducer import write_samples
from ridge_saw.surface import NoiseConfig, Surface, fill_surface, make_rng

logger = logging.getLogger(__name__)


class RunSummary(NamedTuple):
    samples: int
    iterations: int


class OutputSink:
    """CSV destination: the named file, or standard output when no path is given."""

    def __init__(self, path: Optional[str | Path] = None):
        self.path = Path(path) if path is not None else None
        self.stream: Optional[TextIO] = None

    @property
    def name(self) -> str:
        return "<stdout>" if self.path is None else str(self.path)

    def open(self) -> TextIO:
        if self.path is None:
            self.stream = sys.stdout
            return self.stream
        try:
            self.stream = open(self.path, "w", encoding="utf-8", newline="")
        except OSError as err:
            raise OutputError(
                f"Failed to open output file '{self.path}': {err.strerror or err}"
            ) from err
        return self.stream

    def close(self) -> None:
        if self.stream is None:
            return
        stream, self.stream = self.stream, None
        try:
            stream.flush()
            if self.path is not None:
                stream.close()
        except OSError as err:
            raise OutputError(
                f"Failed to close output file '{self.name}': {err.strerror or err}"
            ) from err

    def __enter__(self) -> TextIO:
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.close()
        else:
            # Already failing; keep the original error
            try:
                self.close()
            except OutputError as err:
                logger.debug("Ignoring close failure during error exit: %s", err)
        return False


class SawPipeline:
    """Drive ridge extraction in single-file or generate mode and stream samples."""

    def __init__(self, extractor: RidgeExtractor, scale: float = 0.0):
        self.extractor = extractor
        self.scale = scale

    def process_file(self, path: str | Path, sink: TextIO) -> int:
        dataset = self.extractor.extract(path, self.scale)
        return write_samples(dataset, sink)

    def run_single_file(self, path: str | Path, sink: TextIO) -> RunSummary:
        logger.info("Extracting ridge lines from %s", path)
        samples = self.process_file(path, sink)
        return RunSummary(samples=samples, iterations=1)

    def run_generate(
        self,
        noise: NoiseConfig,
        sink: TextIO,
        policy: LoopPolicy = LoopPolicy.ACCUMULATE,
        rng: Optional[np.random.Generator] = None,
        temp_dir: Optional[str | Path] = None,
    ) -> RunSummary:
        if rng is None:
            rng = make_rng(noise.seed)
            logger.info(
                "Random number seed: %d (%s)",
                noise.effective_seed,
                type(rng.bit_generator).__name__,
            )
        target = noise.target_count if noise.target_count is not None else -1
        logger.info("Loop policy: %s, target: %s", policy.value, noise.target_count)
        if policy is LoopPolicy.FIXED and target > 0:
            logger.warning(
                "Sample counter is not advanced under the 'fixed' policy; "
                "generation continues until the process is killed"
            )

        # One surface and one raster slot serve every iteration
        surface = Surface(noise.size, noise.size)
        counter = 0
        total = 0
        iterations = 0
        with temporary_path(
            suffix=RASTER_SUFFIX, dir=temp_dir, error=GenerateTempFileError
        ) as raster_path:
            while True:
                fill_surface(surface, noise.distribution, rng)
                export_surface(surface, raster_path)
                produced = self.process_file(raster_path, sink)
                iterations += 1
                total += produced
                if policy is LoopPolicy.ACCUMULATE:
                    counter += produced
                logger.info(
                    "Iteration %d: %d samples (%d total)", iterations, produced, total
                )
                if counter >= target:
                    break
        return RunSummary(samples=total, iterations=iterations)


def run(
    config: RidgeSawConfig,
    extractor: Optional[RidgeExtractor] = None,
    rng: Optional[np.random.Generator] = None,
) -> RunSummary:
    """Validate `config`, open the output and run the selected mode to completion."""
    config.validate()
    if extractor is None:
        extractor = RidgetoolExtractor(config.ridgetool, temp_dir=config.temp_dir)
    pipeline = SawPipeline(extractor, scale=config.scale)

    with OutputSink(config.output_path) as sink:
        if config.input_path is not None:
            summary = pipeline.run_single_file(config.input_path, sink)
        else:
            summary = pipeline.run_generate(
                config.noise_config(),
                sink,
                policy=config.loop_policy,
                rng=rng,
                temp_dir=config.temp_dir,
            )
    logger.info(
        "Wrote %d samples in %d iteration(s)", summary.samples, summary.iterations
    )
    return summary
