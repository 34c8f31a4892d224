"""Base processor abstract class."""

from abc import ABC, abstractmethod

from regexsolve.models import SolveContext

__all__ = ["Processor"]


class Processor(ABC):
    """Abstract base class for all processors in the pipeline."""

    @abstractmethod
    def process(self, context: SolveContext) -> None:
        """
        Process the solve context.

        Args:
            context: The solve context to process.

        """
        raise NotImplementedError
