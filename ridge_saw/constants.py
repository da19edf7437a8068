# Defaults for the command-line options
DEFAULT_SIZE = 2048
DEFAULT_SCALE = 0.0
DEFAULT_SEED = 0
"""Seed used for generated noise when none is given on the command line."""

# Extractor
RIDGETOOL_ENV = "RIDGETOOL"
RIDGETOOL_DEFAULT = "ridgetool"
TEMP_PREFIX = "ridge-saw."
RASTER_SUFFIX = ".tif"

# Exit status per failure category
EXIT_OK = 0
EXIT_USAGE = 1
EXIT_TEMP_FILE = 2
EXIT_EXTRACTOR = 3
EXIT_OUTPUT = 4
EXIT_EXPORT = 5
