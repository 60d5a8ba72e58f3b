"""Run configuration for vend-export.

This module provides the single configuration object passed through the
export pipeline, replacing module-level flag globals.
"""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from pathlib import Path

from vend_export.exceptions import ConfigError
from vend_export.utils import load_zone

ENV_DOMAIN_PREFIX = "VEND_DOMAIN_PREFIX"
ENV_TOKEN = "VEND_TOKEN"


@dataclass
class ExportConfig:
    """Everything one export run needs.

    Attributes:
        domain_prefix: Store subdomain on vendhq.com (also the report file prefix).
        token: Personal API token used as a bearer credential.
        date_from: Start date, YYYY-MM-DD, passed through to the search endpoint.
        date_to: End date, YYYY-MM-DD, passed through to the search endpoint.
        timezone: zoneinfo identifier of the store. None means the local
            system timezone.
        outlet: Optional outlet name to restrict the sales search.
        output_dir: Directory the CSV report is created in.
    """

    domain_prefix: str
    token: str
    date_from: str
    date_to: str
    timezone: str | None = None
    outlet: str | None = None
    output_dir: Path = Path(".")

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> ExportConfig:
        """Build the configuration from parsed CLI arguments.

        The domain prefix and token fall back to the ``VEND_DOMAIN_PREFIX``
        and ``VEND_TOKEN`` environment variables.

        Raises:
            ConfigError: If the prefix or token is missing, or the timezone
                is not a known zoneinfo identifier.

        """
        domain_prefix = args.domain_prefix or os.environ.get(ENV_DOMAIN_PREFIX)
        token = args.token or os.environ.get(ENV_TOKEN)
        if not domain_prefix:
            raise ConfigError(f"Domain prefix is required (-d or {ENV_DOMAIN_PREFIX}).")
        if not token:
            raise ConfigError(f"API token is required (-t or {ENV_TOKEN}).")

        timezone = args.timezone or None
        if timezone:
            load_zone(timezone)

        output_dir = args.outdir
        if isinstance(output_dir, str):
            output_dir = Path(output_dir)

        return cls(
            domain_prefix=domain_prefix.strip(),
            token=token.strip(),
            date_from=args.date_from,
            date_to=args.date_to,
            timezone=timezone,
            outlet=args.outlet or None,
            output_dir=output_dir,
        )
