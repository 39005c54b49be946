"""
Standard bar and link diameter catalogs.

Every diameter search walks one of these ordered sequences from a
starting size towards the largest size.
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from .materials import _EC2_MATERIALS


@dataclass(frozen=True)
class DiameterCatalog:
    """Ordered, immutable sequence of standard diameters (mm)."""
    name: str
    diameters: Tuple[float, ...]

    def __post_init__(self):
        """Validate catalog ordering."""
        if len(self.diameters) == 0:
            raise ValueError(f"{self.name} catalog is empty")
        if list(self.diameters) != sorted(set(self.diameters)):
            raise ValueError(f"{self.name} catalog must be strictly increasing")

    def __len__(self) -> int:
        return len(self.diameters)

    def __iter__(self) -> Iterator[float]:
        return iter(self.diameters)

    def __contains__(self, diameter: object) -> bool:
        return diameter in self.diameters

    def __getitem__(self, index: int) -> float:
        return self.diameters[index]

    @property
    def largest(self) -> float:
        return self.diameters[-1]

    def index(self, diameter: float) -> int:
        """
        Position of a diameter in the catalog.

        Raises:
            ValueError: If the diameter is not a standard size
        """
        if diameter not in self.diameters:
            available = ", ".join(f"{d:g}" for d in self.diameters)
            raise ValueError(f"Unknown {self.name} diameter: {diameter}. Available: {available}")
        return self.diameters.index(diameter)

    def is_last(self, index: int) -> bool:
        return index >= len(self.diameters) - 1

    def next_after(self, diameter: float) -> Optional[float]:
        """Next larger standard diameter, or None at the end of the catalog."""
        i = self.index(diameter)
        if self.is_last(i):
            return None
        return self.diameters[i + 1]


BAR_CATALOG = DiameterCatalog(
    name="bar",
    diameters=tuple(float(d) for d in _EC2_MATERIALS['catalogs']['bar_diameters']),
)

LINK_CATALOG = DiameterCatalog(
    name="link",
    diameters=tuple(float(d) for d in _EC2_MATERIALS['catalogs']['link_diameters']),
)
