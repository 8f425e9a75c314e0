"""Exception hierarchy for aztfimport."""
from typing import Optional


class AztfImportError(Exception):
    """Base class for all errors surfaced to the command line."""
    pass


class ArgumentError(AztfImportError):
    """Raised when the command line invocation is invalid."""
    pass


class InitializationError(AztfImportError):
    """Raised when the import engine cannot be constructed or initialized."""
    pass


class ResourceImportError(AztfImportError):
    """Raised when a single resource fails to import and the run aborts."""

    def __init__(self, resource_id: str, address: str, cause: str):
        self.resource_id = resource_id
        self.address = address
        self.cause = cause
        super().__init__(f"Failed to import {resource_id} as {address}: {cause}")

    def __eq__(self, other):
        if not isinstance(other, ResourceImportError):
            return NotImplemented
        return (self.resource_id, self.address, self.cause) == (other.resource_id, other.address, other.cause)

    def __hash__(self):
        return hash((self.resource_id, self.address, self.cause))


class GenerationError(AztfImportError):
    """Raised when Terraform configuration cannot be generated."""

    def __init__(self, cause: object, context: Optional[str] = "generating Terraform configuration"):
        self.cause = cause
        message = f"{context}: {cause}" if context else str(cause)
        super().__init__(message)


class RunStateError(AztfImportError):
    """Raised when a run is driven out of order."""
    pass
