"""Import engine: discovery, per-resource import and config generation."""
import os
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

import yaml
from azure.core.exceptions import AzureError, ClientAuthenticationError
from pydantic import ValidationError

from .models import ImportOutcome, ResourceRecord, TargetAddress
from ..config.mapping import MappingParser, resolve_targets
from ..config.schema import ResourceMapping, RunConfig
from ..discovery.lister import AzureResourceLister, resolve_subscription_id
from ..errors import GenerationError, InitializationError
from ..generate.generator import ConfigGenerator
from ..runlog import RunLogger, sdk_logger
from ..terraform.runner import TerraformError, TerraformRunner


class ImportEngine(ABC):
    """Collaborator driven by the batch orchestrator."""

    @abstractmethod
    def init(self) -> None:
        """Establish provider context and discover resources.

        Raises:
            InitializationError: If the engine cannot be initialized.
        """
        pass

    @abstractmethod
    def list_resources(self) -> List[ResourceRecord]:
        """Return the discovered resources in a fixed order."""
        pass

    @abstractmethod
    def import_resource(self, record: ResourceRecord) -> ImportOutcome:
        """Import one mapped resource and return its outcome."""
        pass

    @abstractmethod
    def generate_config(self, records: List[ResourceRecord]) -> List[str]:
        """Write configuration for the record set and return written paths."""
        pass


class TerraformImportEngine(ImportEngine):
    """Imports Azure resources into local Terraform state."""

    def __init__(self, config: RunConfig, logger: RunLogger, lister: Optional[AzureResourceLister] = None,
                 runner: Optional[TerraformRunner] = None, generator: Optional[ConfigGenerator] = None):
        """Initialize the engine.

        Args:
            config: Run configuration.
            logger: Run logger.
            lister: Resource lister; built from the subscription on init if not given.
            runner: Terraform runner; built for the output dir if not given.
            generator: Config generator; built for the output dir if not given.
        """
        self.config = config
        self.logger = logger
        self.lister = lister
        self.runner = runner or TerraformRunner(config.output_dir, logger)
        self.generator = generator or ConfigGenerator(config.output_dir)
        self.mapping = ResourceMapping()
        self.records: List[ResourceRecord] = []

    def init(self) -> None:
        self.mapping = self._load_mapping()
        self._prepare_output_dir()

        try:
            self.generator.write_provider()
        except OSError as e:
            raise InitializationError(f"writing provider configuration: {e}") from e

        if not self.runner.available():
            raise InitializationError(f"'{self.runner.binary}' executable not found in PATH")
        try:
            self.logger.debug("Running terraform init")
            self.runner.init()
        except TerraformError as e:
            raise InitializationError(str(e)) from e

        resource_ids = self._discover()
        self.records = self._build_records(resource_ids)

    def _load_mapping(self) -> ResourceMapping:
        if not self.config.mapping_file:
            return ResourceMapping()
        try:
            mapping = MappingParser.load(self.config.mapping_file)
        except FileNotFoundError as e:
            raise InitializationError(f"mapping file {self.config.mapping_file} not found") from e
        except (ValidationError, yaml.YAMLError) as e:
            raise InitializationError(f"invalid mapping file {self.config.mapping_file}: {e}") from e
        self.logger.debug(f"Loaded {len(mapping)} mapping entries from {self.config.mapping_file}")
        return mapping

    def _prepare_output_dir(self) -> None:
        output_dir = Path(self.config.output_dir)
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise InitializationError(f"creating output directory {output_dir}: {e}") from e
        if not output_dir.is_dir():
            raise InitializationError(f"output path {output_dir} is not a directory")
        if not os.access(output_dir, os.W_OK):
            raise InitializationError(f"output directory {output_dir} is not writable")

        existing = sorted(p.name for p in output_dir.iterdir()
                          if p.suffix == ".tf" or p.name == "terraform.tfstate")
        if existing:
            raise InitializationError(
                f"output directory {output_dir} already contains Terraform files: {', '.join(existing)}"
            )

    def _discover(self) -> List[str]:
        try:
            if self.lister is None:
                subscription_id = resolve_subscription_id(self.config.subscription_id)
                self.runner.env.setdefault("ARM_SUBSCRIPTION_ID", subscription_id)
                self.lister = AzureResourceLister(subscription_id, sdk_logger=sdk_logger())
            return self.lister.list_resource_ids(self.config.resource_group)
        except ClientAuthenticationError as e:
            raise InitializationError(f"authenticating to Azure: {e.message}") from e
        except AzureError as e:
            raise InitializationError(f"listing resource group {self.config.resource_group}: {e}") from e
        except (OSError, ValueError, subprocess.CalledProcessError) as e:
            raise InitializationError(f"resolving subscription: {e}") from e

    def _build_records(self, resource_ids: List[str]) -> List[ResourceRecord]:
        targets = resolve_targets(self.mapping, resource_ids, self.config.name_pattern)
        return [
            ResourceRecord(resource_id, TargetAddress(resource_type, name) if resource_type else None)
            for resource_id, (resource_type, name) in zip(resource_ids, targets)
        ]

    def list_resources(self) -> List[ResourceRecord]:
        return self.records

    def import_resource(self, record: ResourceRecord) -> ImportOutcome:
        address = record.address
        stub = Path(self.config.output_dir) / f"import_{address.resource_type}_{address.resource_name}.tf"
        try:
            # terraform import requires a resource block for the target address
            stub.write_text(f'resource "{address.resource_type}" "{address.resource_name}" {{}}\n')
            self.runner.import_resource(str(address), record.resource_id)
        except TerraformError as e:
            return ImportOutcome.failed(e.stderr or str(e))
        except OSError as e:
            return ImportOutcome.failed(str(e))
        finally:
            stub.unlink(missing_ok=True)
        return ImportOutcome.imported()

    def generate_config(self, records: List[ResourceRecord]) -> List[str]:
        try:
            state = self.runner.show_state()
        except (TerraformError, ValueError) as e:
            raise GenerationError(f"reading Terraform state: {e}", context=None) from e
        return [self.generator.generate(records, state)]

