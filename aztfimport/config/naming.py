"""Auto-generated Terraform resource names."""
from typing import Iterable, Iterator, Optional, Set

from ..meta.models import TF_IDENTIFIER


class NamePattern:
    """Generates resource names from a pattern and an incrementing counter.

    If the pattern contains a ``*`` the counter replaces the last one,
    otherwise the counter is appended to the pattern.
    """

    def __init__(self, pattern: str = "res-"):
        self.pattern = pattern

    def format(self, index: int) -> str:
        if "*" in self.pattern:
            head, _, tail = self.pattern.rpartition("*")
            return f"{head}{index}{tail}"
        return f"{self.pattern}{index}"

    def validate(self) -> None:
        """Check that the pattern yields valid Terraform names.

        Raises:
            ValueError: If the generated name is not a Terraform identifier.
        """
        sample = self.format(0)
        if not TF_IDENTIFIER.match(sample):
            raise ValueError(f"name pattern '{self.pattern}' produces invalid resource name '{sample}'")

    def names(self, reserved: Optional[Iterable[str]] = None) -> Iterator[str]:
        """Yield names in counter order, skipping any in ``reserved``."""
        taken: Set[str] = set(reserved or ())
        index = 0
        while True:
            name = self.format(index)
            index += 1
            if name not in taken:
                yield name
