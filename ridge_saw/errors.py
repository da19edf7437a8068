from ridge_saw.constants import (
    EXIT_EXPORT,
    EXIT_EXTRACTOR,
    EXIT_OUTPUT,
    EXIT_TEMP_FILE,
    EXIT_USAGE,
)


class RidgeSawError(Exception):
    """Base class for all fatal errors. `exit_code` is the process status."""

    exit_code: int = 1


class UsageError(RidgeSawError, ValueError):
    exit_code = EXIT_USAGE


class ResourceError(RidgeSawError):
    """Temporary file or output file could not be created, written or closed."""


class TempFileError(ResourceError):
    exit_code = EXIT_TEMP_FILE


class GenerateTempFileError(ResourceError):
    exit_code = EXIT_EXPORT


class RasterExportError(ResourceError):
    exit_code = EXIT_EXPORT


class OutputError(ResourceError):
    exit_code = EXIT_OUTPUT


class ExtractorError(RidgeSawError):
    exit_code = EXIT_EXTRACTOR

    def __init__(self, message: str, diagnostics: str = ""):
        super().__init__(message)
        self.diagnostics = diagnostics


class DataError(RidgeSawError, ValueError):
    exit_code = EXIT_TEMP_FILE


class DatasetError(DataError):
    """The line dataset is missing, malformed or not of the LINES kind."""
