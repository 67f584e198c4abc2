"""Interfaces (Protocols) for application layer dependencies.

This module defines Protocol-based interfaces that infrastructure
implementations must satisfy. The application layer depends on these
interfaces, not concrete implementations, so the live Azure OpenAI provider
and the in-memory stand-in can be swapped at startup without the
orchestrator noticing.

Design Principles:
    - Structural Typing: Uses Python Protocol for duck typing
    - Dependency Inversion: Application depends on abstractions
    - Substitutability: Every provider honors the same contract

Key Interfaces:
    - CompletionProviderInterface: Text and image completions
    - RequestLoggerInterface: Structured request logging

Note:
    Implementations don't need to explicitly inherit from these protocols;
    they just need to implement the required methods.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from rag_ai.domain.entities import AugmentedAnswer


class CompletionProviderInterface(Protocol):
    """Protocol for completion provider implementations.

    Implementations must provide:
        - Text completion with optional retrieval augmentation (complete)
        - Image-grounded completion returning raw text (complete_with_image)

    Both methods are async and may raise the domain exceptions from
    rag_ai.domain.exceptions (UnauthorizedError, ProviderTimeoutError,
    InvalidArgumentError, ...) or any other exception for unexpected
    infrastructure failures. Implementations never retry on behalf of the
    caller beyond what their own client does, and never fabricate citations.
    """

    async def complete(
        self,
        system_prompt: str,
        user_query: str,
        use_retrieval: bool,
        temperature: float,
    ) -> AugmentedAnswer:
        """Answer a text query.

        Args:
            system_prompt: Instructions that set the assistant's behavior.
            user_query: The question to answer. Already validated.
            use_retrieval: Attach the configured retrieval source when True.
            temperature: Sampling temperature, already clamped to [0, 2].

        Returns:
            AugmentedAnswer with the answer text and any citations reported
            by the retrieval backend, in backend order.

        Raises:
            UnauthorizedError: If the backend rejects credentials.
            ProviderTimeoutError: If the backend does not answer in time.
            InvalidArgumentError: If the backend rejects the request.
            Exception: For other infrastructure errors.
        """
        ...

    async def complete_with_image(
        self,
        system_prompt: str,
        initial_query: str,
        image_url: str,
        temperature: float,
    ) -> str:
        """Answer a question about an image.

        Args:
            system_prompt: Instructions that set the assistant's behavior.
            initial_query: Question asked about the image.
            image_url: Absolute URL of the image.
            temperature: Sampling temperature, already clamped to [0, 2].

        Returns:
            Raw answer text. May be JSON if the prompt asked for it; the
            caller decides how to interpret it.

        Raises:
            Same as complete().
        """
        ...


class RequestLoggerInterface(Protocol):
    """Protocol for request logging implementations.

    Implementations should log structured data in a format suitable for
    analysis (JSON Lines) and must not raise: logging failures must never
    affect request processing.
    """

    def log_request(self, data: dict[str, Any]) -> None:
        """Log a request event with structured data.

        Args:
            data: Dictionary with request event data. Expected keys:
                - event: Event type identifier (e.g., "query")
                - operation: Operation name ("text_query", "image_query")
                - status: "started", "success" or "error"
            Optional keys include latency_ms, error_type, request_id and
            operation-specific fields.
        """
        ...


__all__ = ["CompletionProviderInterface", "RequestLoggerInterface"]
