"""Provider interfaces and client bindings."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol


class AnswerClient(Protocol):
    def generate_answer(self, prompt: str, model_name: str) -> str | None:
        """Return the structured answer text, or None when the provider produced no output."""
        ...


@dataclass(frozen=True)
class ProviderBinding:
    """How to obtain clients for one provider namespace.

    ``get_default_client`` returns the process-wide client and may be cached.
    ``build_scoped_client`` builds a fresh client bound to a caller credential;
    it is None for providers that do not accept caller credentials.
    """

    get_default_client: Callable[[], AnswerClient]
    build_scoped_client: Callable[[str], AnswerClient] | None = None
