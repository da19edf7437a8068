import logging
from pathlib import Path

import numpy as np
from tifffile import tifffile

from ridge_saw.errors import RasterExportError
from ridge_saw.surface import Surface

logger = logging.getLogger(__name__)


def export_surface(surface: Surface, path: str | Path) -> Path:
    """Write `surface` as a single-channel 32-bit float TIFF.

    The extractor reads float rasters, so values are cast to float32 the
    same way for every tile.
    """
    path = Path(path)
    try:
        tifffile.imwrite(
            path,
            surface.values.astype(np.float32),
            photometric="minisblack",
        )
    except (OSError, ValueError) as err:
        raise RasterExportError(
            f"Failed to write image data to '{path}': {err}"
        ) from err
    logger.debug("Wrote %dx%d raster to %s", surface.rows, surface.cols, path)
    return path
