"""Terraform configuration generator."""
from pathlib import Path
from typing import Dict, List, Optional

from jinja2 import BaseLoader, Environment

from .hcl import render_body
from ..errors import GenerationError
from ..meta.models import ImportStatus, ResourceRecord

# Embedded Terraform templates
TEMPLATES = {
    "provider": """terraform {
  required_providers {
    azurerm = {
      source = "hashicorp/azurerm"
{% if provider_version %}
      version = "{{ provider_version }}"
{% endif %}
    }
  }
}

provider "azurerm" {
  features {}
}
""",

    "main": """{% for block in blocks %}
resource "{{ block.type }}" "{{ block.name }}" {
{% for line in block.body %}
{{ line }}
{% endfor %}
}

{% endfor %}
""",
}


class ConfigGenerator:
    """Generates Terraform configuration for imported resources."""

    def __init__(self, output_dir: str, provider_version: Optional[str] = None):
        """Initialize the generator.

        Args:
            output_dir: Directory for generated Terraform files.
            provider_version: Optional azurerm provider version constraint.
        """
        self.output_dir = output_dir
        self.provider_version = provider_version
        self.jinja_env = Environment(
            loader=BaseLoader(),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True
        )

    def _render(self, name: str, **context) -> str:
        return self.jinja_env.from_string(TEMPLATES[name]).render(**context)

    def write_provider(self) -> str:
        """Write provider.tf and return its path."""
        path = Path(self.output_dir) / "provider.tf"
        path.write_text(self._render("provider", provider_version=self.provider_version))
        return str(path)

    def generate(self, records: List[ResourceRecord], state: Dict) -> str:
        """Write main.tf for every imported record.

        Skipped and failed records are not emitted.

        Args:
            records: Full record set in discovery order.
            state: Parsed ``terraform show -json`` output.

        Returns:
            str: Path of the written main.tf.

        Raises:
            GenerationError: If an imported resource is missing from state.
        """
        values = self._state_values(state)

        blocks = []
        for record in records:
            if record.outcome.status is not ImportStatus.IMPORTED:
                continue
            address = record.target_address
            if address not in values:
                raise GenerationError(f"resource {address} not found in Terraform state", context=None)
            blocks.append({
                "type": record.address.resource_type,
                "name": record.address.resource_name,
                "body": render_body(values[address]),
            })

        path = Path(self.output_dir) / "main.tf"
        path.write_text(self._render("main", blocks=blocks))
        return str(path)

    @staticmethod
    def _state_values(state: Dict) -> Dict[str, Dict]:
        """Map resource addresses to attribute values from state JSON."""
        resources = state.get("values", {}).get("root_module", {}).get("resources", [])
        return {r["address"]: r.get("values", {}) for r in resources}
