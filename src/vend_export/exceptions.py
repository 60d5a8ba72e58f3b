"""Domain-specific exceptions for vend-export.

This module defines custom exceptions that are part of the public API.
All exceptions inherit from VendExportError for easy catching.
"""


class VendExportError(Exception):
    """Base exception for all vend-export errors.

    Users can catch this exception to handle any error raised by the
    package.
    """

    pass


class ConfigError(VendExportError):
    """Raised when there is a configuration error.

    This exception is raised when:
    - The domain prefix or API token is missing
    - The timezone name is not a known zoneinfo identifier
    """

    pass


class ETLError(VendExportError):
    """Raised when a stage of the export pipeline fails."""

    pass


class ExtractionError(ETLError):
    """Raised when data extraction from the Vend API fails.

    This exception is raised when:
    - Network connection to the Vend API fails
    - The API returns a non-2xx status or a body that is not JSON
    - The requested outlet does not exist
    """

    pass


class ReportError(ETLError):
    """Raised when the CSV report file cannot be created."""

    pass
