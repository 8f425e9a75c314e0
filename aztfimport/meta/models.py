"""Data models for discovered resources and their import outcome."""
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..errors import RunStateError

TF_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_-]*$")


class ImportStatus(Enum):
    PENDING = "pending"
    SKIPPED = "skipped"
    IMPORTED = "imported"
    FAILED = "failed"


@dataclass(frozen=True)
class ImportOutcome:
    """Result of the import decision for a single resource."""
    status: ImportStatus
    cause: Optional[str] = None

    @classmethod
    def skipped(cls) -> "ImportOutcome":
        return cls(ImportStatus.SKIPPED)

    @classmethod
    def imported(cls) -> "ImportOutcome":
        return cls(ImportStatus.IMPORTED)

    @classmethod
    def failed(cls, cause: str) -> "ImportOutcome":
        return cls(ImportStatus.FAILED, cause)

    @property
    def is_failed(self) -> bool:
        return self.status is ImportStatus.FAILED


PENDING = ImportOutcome(ImportStatus.PENDING)


@dataclass(frozen=True)
class TargetAddress:
    """Terraform resource address, e.g. ``azurerm_resource_group.res-0``."""
    resource_type: str
    resource_name: str

    def __post_init__(self):
        for part in (self.resource_type, self.resource_name):
            if not TF_IDENTIFIER.match(part):
                raise ValueError(f"'{part}' is not a valid Terraform identifier")

    def __str__(self) -> str:
        return f"{self.resource_type}.{self.resource_name}"


class ResourceRecord:
    """One discovered Azure resource plus its import outcome.

    The resource ID and target address are fixed at discovery. The outcome
    starts as pending and can be recorded exactly once.
    """

    def __init__(self, resource_id: str, address: Optional[TargetAddress] = None):
        self._resource_id = resource_id
        self._address = address
        self._outcome = PENDING

    def __repr__(self) -> str:
        return f"ResourceRecord(resource_id={self._resource_id!r}, address={self._address!r})"

    @property
    def resource_id(self) -> str:
        return self._resource_id

    @property
    def address(self) -> Optional[TargetAddress]:
        return self._address

    @property
    def mapping_present(self) -> bool:
        return self._address is not None

    @property
    def target_address(self) -> str:
        return str(self._address) if self._address else ""

    @property
    def outcome(self) -> ImportOutcome:
        return self._outcome

    @property
    def import_error(self) -> Optional[str]:
        """Failure cause, or None if the resource was not (or successfully) imported."""
        return self._outcome.cause if self._outcome.is_failed else None

    def record(self, outcome: ImportOutcome) -> None:
        """Record the import outcome.

        Raises:
            RunStateError: If an outcome was already recorded.
        """
        if self._outcome.status is not ImportStatus.PENDING:
            raise RunStateError(f"Outcome for {self.resource_id} already recorded as {self._outcome.status.value}")
        if outcome.status is ImportStatus.PENDING:
            raise RunStateError("Cannot record a pending outcome")
        self._outcome = outcome


@dataclass
class BatchResult:
    """Summary of a completed batch run."""
    records: List[ResourceRecord]
    generated_files: List[str] = field(default_factory=list)

    def count(self, status: ImportStatus) -> int:
        return sum(1 for r in self.records if r.outcome.status is status)

    @property
    def imported(self) -> int:
        return self.count(ImportStatus.IMPORTED)

    @property
    def skipped(self) -> int:
        return self.count(ImportStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return self.count(ImportStatus.FAILED)
