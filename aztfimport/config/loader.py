"""Run configuration construction from command line values."""
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from .schema import RunConfig
from ..errors import ArgumentError

APP_NAME = "aztfimport"


class ConfigLoader:
    """Builds a validated RunConfig."""

    @staticmethod
    def default_output_dir(resource_group: str) -> str:
        """Directory under the user app dir, named after the resource group."""
        return str(Path(typer.get_app_dir(APP_NAME)) / resource_group)

    @staticmethod
    def new_config(
        resource_group: str,
        output_dir: Optional[str] = None,
        mapping_file: Optional[str] = None,
        name_pattern: str = "res-",
        log_file: Optional[str] = None,
        subscription_id: Optional[str] = None,
    ) -> RunConfig:
        """Validate command line values into a run configuration.

        Raises:
            ArgumentError: If any value is invalid.
        """
        try:
            config = RunConfig(
                resource_group=resource_group,
                output_dir=output_dir or ConfigLoader.default_output_dir(resource_group.strip()),
                mapping_file=mapping_file or None,
                name_pattern=name_pattern,
                log_file=log_file or None,
                subscription_id=subscription_id or None,
            )
        except ValidationError as e:
            errors = "; ".join(err["msg"] for err in e.errors())
            raise ArgumentError(f"invalid configuration: {errors}") from e

        config.output_dir = str(Path(config.output_dir).expanduser().resolve())
        return config
