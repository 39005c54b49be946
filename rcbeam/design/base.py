"""
Base abstract class for design code implementations.

This module provides the Strategy Pattern interface for multi-standard support.
Every design code registered in rcbeam.design inherits from DesignCode.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class DesignCode(ABC):
    """Abstract base class for beam section design codes."""

    @property
    @abstractmethod
    def code_name(self) -> str:
        """Return code identifier (e.g., 'Eurocode 2 EN 1992-1-1:2004 (UK NA)')."""
        pass

    @property
    @abstractmethod
    def code_units(self) -> str:
        """Return primary unit system ('SI' or 'Imperial')."""
        pass

    @abstractmethod
    def design_beam_section(
        self,
        section: Any,
        grade: Any,
        fyk: float,
        loads: Any,
        options: Optional[Any] = None
    ) -> Any:
        """
        Design reinforcement for a rectangular beam section.

        Returns:
            Result object carrying status, bar and link selections,
            strut angle and the ordered design trace
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code='{self.code_name}')"
