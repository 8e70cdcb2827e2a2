"""
Estimator Provider Interface - Abstract base for language-model backends.

This module defines the interface the pricing and scoring services use to
reach a language model (OpenAI, Ollama, any OpenAI-compatible endpoint).
"""
from abc import ABC, abstractmethod
from typing import Optional


class EstimatorProvider(ABC):
    """
    Abstract Interface for text-completion providers.
    """

    @abstractmethod
    def complete(
        self,
        prompt: str,
        *,
        max_tokens: int,
        temperature: float,
        system_prompt: Optional[str] = None,
    ) -> str:
        """
        Send a single prompt and return the model's text response.

        Implementations make exactly one attempt and raise on any failure;
        callers decide how to fall back.
        """
        pass
