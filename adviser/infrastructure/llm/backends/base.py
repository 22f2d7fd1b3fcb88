from abc import ABC, abstractmethod
from typing import Dict, Any

from adviser.infrastructure.llm.types import LLMMetadata


class LLMBackend(ABC):
    """
    Base contract for any agent backend implementation.
    """

    @abstractmethod
    def generate(
        self,
        system_prompt: str,
        prompt: str,
        schema: Dict[str, Any],
        params: Dict[str, Any],
    ) -> str:
        """
        Run synchronous inference constrained to `schema`.
        Returns the raw text of the answer (expected to be JSON).
        """
        raise NotImplementedError

    @property
    @abstractmethod
    def meta(self) -> LLMMetadata:
        """
        Canonical metadata for this backend instance.
        Must be backend-agnostic and stable.
        """
        raise NotImplementedError
