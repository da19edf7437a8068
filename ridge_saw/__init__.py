from ridge_saw.extractor import RidgeExtractor, RidgetoolExtractor
from ridge_saw.lines import DatasetKind, Line, LineDataset, Point, load_dataset
from ridge_saw.pipeline import SawPipeline, run
from ridge_saw.reducer import Sample, reduce_line
from ridge_saw.surface import Distribution, NoiseConfig, Surface, generate

__all__ = [
    "DatasetKind",
    "Distribution",
    "Line",
    "LineDataset",
    "NoiseConfig",
    "Point",
    "RidgeExtractor",
    "RidgetoolExtractor",
    "Sample",
    "SawPipeline",
    "Surface",
    "generate",
    "load_dataset",
    "reduce_line",
    "run",
]
