"""Tool abstract interface.

A tool wraps a single external capability behind a text-in, text-out
call so an orchestrator can discover it by name and description.
"""

from abc import ABC, abstractmethod


class Tool(ABC):
    """Abstract interface for single-purpose tools."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name an orchestrator refers to the tool by."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Return a description of when to use the tool and what input it takes."""
        pass

    @abstractmethod
    async def run(self, input: str) -> str:
        """Execute the tool.

        Raises:
            ToolError: If the call fails or produces no usable result
        """
        pass
