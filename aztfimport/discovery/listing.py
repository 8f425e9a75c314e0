"""Resource group listing for the non-quiet path."""
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .lister import AzureResourceLister, resolve_subscription_id
from ..config.mapping import MAPPING_FILE_NAME, MappingParser, MappingWriter, resolve_targets
from ..config.schema import ResourceMapping, RunConfig
from ..runlog import sdk_logger


@dataclass
class ListedResource:
    """A discovered resource with the target it would be imported as."""
    resource_id: str
    resource_type: str
    resource_name: str

    @property
    def mapped(self) -> bool:
        return bool(self.resource_type)


class ResourceGroupListing:
    """Discovers a resource group and writes a mapping file skeleton."""

    def __init__(self, config: RunConfig, lister: Optional[AzureResourceLister] = None):
        self.config = config
        self.lister = lister

    def list(self) -> List[ListedResource]:
        """List resources, applying the mapping file if one is configured."""
        if self.lister is None:
            subscription_id = resolve_subscription_id(self.config.subscription_id)
            self.lister = AzureResourceLister(subscription_id, sdk_logger=sdk_logger())
        resource_ids = self.lister.list_resource_ids(self.config.resource_group)

        mapping = MappingParser.load(self.config.mapping_file) if self.config.mapping_file else ResourceMapping()
        targets = resolve_targets(mapping, resource_ids, self.config.name_pattern)
        return [
            ListedResource(resource_id, resource_type, name)
            for resource_id, (resource_type, name) in zip(resource_ids, targets)
        ]

    def write_mapping(self, resources: List[ListedResource]) -> str:
        """Write the mapping file into the output directory and return its path."""
        output_dir = Path(self.config.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        path = output_dir / MAPPING_FILE_NAME

        entries = MappingWriter.skeleton(
            [r.resource_id for r in resources],
            [(r.resource_type, r.resource_name) for r in resources]
        )
        MappingWriter.dump(str(path), entries)
        return str(path)
