"""Resource mapping file parser and writer."""
import json
from typing import Dict, List, Tuple

import yaml

from .naming import NamePattern
from .schema import MappingEntry, ResourceMapping
from ..errors import InitializationError

MAPPING_FILE_NAME = "resource_mapping.json"


class MappingParser:
    """Parser for resource mapping files."""

    @staticmethod
    def load(file_path: str) -> ResourceMapping:
        """Load and validate a resource mapping file.

        The file is JSON; since it is parsed with the YAML loader, YAML
        mapping files are accepted as well.

        Args:
            file_path: Path to the mapping file.

        Returns:
            ResourceMapping: Validated mapping.

        Raises:
            FileNotFoundError: If the mapping file doesn't exist.
            ValidationError: If the mapping is invalid.
            yaml.YAMLError: If the file is malformed.
        """
        with open(file_path, 'r') as f:
            data = yaml.safe_load(f)
        return ResourceMapping.model_validate(data or {})


class MappingWriter:
    """Writes resource mapping files."""

    @staticmethod
    def dump(file_path: str, entries: Dict[str, MappingEntry]) -> None:
        """Write a mapping file, one object per resource ID.

        Args:
            file_path: Path of the mapping file to write.
            entries: Resource ID to mapping entry, in the order to write.
        """
        data = {
            resource_id: {
                "resource_type": entry.resource_type,
                "resource_name": entry.resource_name,
            }
            for resource_id, entry in entries.items()
        }
        with open(file_path, 'w') as f:
            json.dump(data, f, indent=2)
            f.write("\n")

    @staticmethod
    def skeleton(resource_ids: List[str], targets: List[Tuple[str, str]]) -> Dict[str, MappingEntry]:
        """Build entries for discovered resources.

        Unmapped resources keep an empty type for the user to fill in.
        """
        return {
            resource_id: MappingEntry(resource_type=resource_type, resource_name=name)
            for resource_id, (resource_type, name) in zip(resource_ids, targets)
        }


def resolve_targets(mapping: ResourceMapping, resource_ids: List[str], pattern: str) -> List[Tuple[str, str]]:
    """Resolve the (resource type, resource name) target of each resource.

    Resources without an explicit name take the next name from the pattern,
    in discovery order, skipping names the mapping already uses. The type is
    empty for unmapped resources.

    Raises:
        InitializationError: If two resources are mapped to the same address.
    """
    entries = [mapping.lookup(resource_id) for resource_id in resource_ids]

    claimed: Dict[Tuple[str, str], str] = {}
    for resource_id, entry in zip(resource_ids, entries):
        if entry is None or not entry.mapped or not entry.resource_name:
            continue
        address = (entry.resource_type, entry.resource_name)
        if address in claimed:
            raise InitializationError(
                f"resources {claimed[address]} and {resource_id} are both mapped to {'.'.join(address)}"
            )
        claimed[address] = resource_id

    reserved = {e.resource_name for e in entries if e is not None and e.resource_name}
    names = NamePattern(pattern).names(reserved)

    targets = []
    for entry in entries:
        if entry is not None and entry.resource_name:
            name = entry.resource_name
        else:
            name = next(names)
        targets.append((entry.resource_type if entry is not None else "", name))
    return targets
