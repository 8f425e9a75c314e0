"""Azure resource discovery."""
import logging
import os
import subprocess
from typing import List, Optional

from azure.identity import DefaultAzureCredential

SUBSCRIPTION_ENV_VARS = ("ARM_SUBSCRIPTION_ID", "AZURE_SUBSCRIPTION_ID")


def resolve_subscription_id(subscription_id: Optional[str] = None) -> str:
    """Resolve the subscription to discover resources in.

    Explicit value first, then the environment, then the Azure CLI default.

    Raises:
        subprocess.CalledProcessError: If the Azure CLI command fails.
        FileNotFoundError: If the Azure CLI is not installed.
    """
    if subscription_id:
        return subscription_id
    for var in SUBSCRIPTION_ENV_VARS:
        if os.environ.get(var):
            return os.environ[var]

    cmd = ["az", "account", "show", "--query", "id", "-o", "tsv"]
    result = subprocess.run(
        cmd,
        capture_output=True,
        text=True,
        check=True
    )
    return result.stdout.strip()


class AzureResourceLister:
    """Lists the resources of a resource group through the ARM API."""

    def __init__(self, subscription_id: str, credential=None, sdk_logger: Optional[logging.Logger] = None):
        """Initialize the lister.

        Args:
            subscription_id: Azure subscription ID.
            credential: Azure credential, DefaultAzureCredential if not given.
            sdk_logger: Logger for the SDK's HTTP pipeline.
        """
        self.subscription_id = subscription_id
        self.credential = credential or DefaultAzureCredential()
        self.sdk_logger = sdk_logger

    def _client(self):
        from azure.mgmt.resource.resources import ResourceManagementClient

        kwargs = {"logger": self.sdk_logger} if self.sdk_logger else {}
        return ResourceManagementClient(self.credential, self.subscription_id, **kwargs)

    def list_resource_ids(self, resource_group: str) -> List[str]:
        """List the IDs of a resource group and its resources.

        The resource group itself comes first, followed by its resources
        sorted case-insensitively by ID.

        Raises:
            azure.core.exceptions.ResourceNotFoundError: If the group doesn't exist.
            azure.core.exceptions.HttpResponseError: On any other API failure.
        """
        client = self._client()
        group = client.resource_groups.get(resource_group)
        resource_ids = [r.id for r in client.resources.list_by_resource_group(resource_group)]
        return [group.id] + sorted(resource_ids, key=str.lower)
