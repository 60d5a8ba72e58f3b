"""vend-export - Vend sales history to CSV.

Fetches registers, users, customers, products and sales from the Vend API
2.0 and writes them as one flat CSV report in the layout of Vend's own
sales history export.

Module Structure:
    vend_export.client: Vend API client (paged collections, sales search)
    vend_export.models: Read-only API records
    vend_export.report: Row builders and the CSV report writer
    vend_export.config: ExportConfig run configuration
    vend_export.cli: Command-line entry point

Quick Start:
    >>> from vend_export import ExportConfig
    >>> from vend_export.cli import export_sales
    >>>
    >>> config = ExportConfig(
    ...     domain_prefix="mystore",
    ...     token="...",
    ...     date_from="2018-03-01",
    ...     date_to="2018-04-01",
    ...     timezone="Pacific/Auckland",
    ... )
    >>> export_sales(config)

Row layout per exported sale:
    - Sale: summary with totals, customer, register and user
    - Sale Line: one per line item
    - Payment: one per payment
"""

__version__ = "0.1.0"

from vend_export.config import ExportConfig
from vend_export.exceptions import ConfigError, ETLError, ExtractionError, ReportError, VendExportError

__all__ = [
    "ConfigError",
    "ETLError",
    "ExportConfig",
    "ExtractionError",
    "ReportError",
    "VendExportError",
    "__version__",
]
