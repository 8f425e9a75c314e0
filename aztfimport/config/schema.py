"""Pydantic models for run configuration and resource mapping."""
from typing import Dict, Optional

from pydantic import BaseModel, Field, RootModel, field_validator, model_validator

from .naming import NamePattern
from ..meta.models import TF_IDENTIFIER


class RunConfig(BaseModel):
    """Configuration of a single import run."""
    resource_group: str
    output_dir: str
    mapping_file: Optional[str] = None
    name_pattern: str = "res-"
    log_file: Optional[str] = None
    subscription_id: Optional[str] = None

    @field_validator("resource_group")
    @classmethod
    def _non_empty_group(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("resource group name must not be empty")
        return value

    @field_validator("name_pattern")
    @classmethod
    def _valid_pattern(cls, value: str) -> str:
        NamePattern(value).validate()
        return value


class MappingEntry(BaseModel):
    """Mapping of one Azure resource to its Terraform target."""
    resource_type: str = ""
    resource_name: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _from_address(cls, data):
        # "type.name" or bare "type"
        if isinstance(data, str):
            resource_type, _, resource_name = data.partition(".")
            return {"resource_type": resource_type, "resource_name": resource_name or None}
        return data

    @field_validator("resource_type", "resource_name")
    @classmethod
    def _identifier(cls, value: Optional[str]) -> Optional[str]:
        if value and not TF_IDENTIFIER.match(value):
            raise ValueError(f"'{value}' is not a valid Terraform identifier")
        return value

    @property
    def mapped(self) -> bool:
        return bool(self.resource_type)


class ResourceMapping(RootModel[Dict[str, MappingEntry]]):
    """Resource ID to mapping entry; lookups ignore case."""
    root: Dict[str, MappingEntry] = Field(default_factory=dict)

    def lookup(self, resource_id: str) -> Optional[MappingEntry]:
        entry = self.root.get(resource_id)
        if entry is not None:
            return entry
        lowered = resource_id.lower()
        for key, value in self.root.items():
            if key.lower() == lowered:
                return value
        return None

    def __len__(self) -> int:
        return len(self.root)
