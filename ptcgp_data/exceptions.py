"""
PTCGP Data exception types
"""

import pathlib
from typing import Optional, Union


class PtcgpDataError(Exception):
    """Base class for every error raised by the exporter."""


class RepositoryConfigError(PtcgpDataError):
    """Raised when the tcgdex checkout cannot be used as a data source."""


class UnsafeModulePathError(RepositoryConfigError):
    """Raised when a data module lies outside the repository directory."""

    def __init__(self, file_path: Union[str, pathlib.Path]):
        self.file_path = str(file_path)
        super().__init__(
            f"Refusing to import outside of repo directory: {self.file_path}"
        )


class ModuleLoadError(PtcgpDataError):
    """Raised when a data module cannot be read or parsed."""

    def __init__(
        self,
        file_path: Union[str, pathlib.Path],
        message: str,
        line: Optional[int] = None,
    ):
        self.file_path = str(file_path)
        self.line = line
        location = f"{self.file_path}:{line}" if line is not None else self.file_path
        super().__init__(f"{location}: {message}")


class SetLoadError(PtcgpDataError):
    """Raised when the set batch fails."""


class CardLoadError(PtcgpDataError):
    """Raised when the card batch fails."""


class InvalidConcurrencyError(PtcgpDataError, ValueError):
    """Raised when a concurrency limit is not a finite positive number."""


class ExportValidationError(PtcgpDataError):
    """Raised when a published export file is missing or malformed."""

    def __init__(self, file_path: Union[str, pathlib.Path], reason: str):
        self.file_path = str(file_path)
        self.reason = reason
        super().__init__(f"{self.file_path} {reason}")
