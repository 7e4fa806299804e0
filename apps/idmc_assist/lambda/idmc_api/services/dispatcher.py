"""Request dispatcher: selects a provider client and issues one answer call."""

import logging
from collections.abc import Callable, Mapping
from typing import Any

from langchain_core.prompts import PromptTemplate
from langchain_core.runnables import RunnableLambda

from idmc_api.constants import ANSWER_PROMPT_TEMPLATE, NO_OUTPUT_MESSAGE
from idmc_api.errors import ConfigurationError, ProviderError
from idmc_api.model_registry import parse_model_selector
from idmc_api.providers.base import AnswerClient, ProviderBinding
from idmc_api.schemas import AnswerResult

logger = logging.getLogger(__name__)

ANSWER_PROMPT = PromptTemplate.from_template(ANSWER_PROMPT_TEMPLATE)


def resolve_client(
    binding: ProviderBinding, provider: str, credential: str | None
) -> tuple[AnswerClient, bool]:
    """Return the client for this call and whether it is scoped to the credential.

    A scoped client is built fresh for the caller's credential and is never
    cached; otherwise the shared default client is returned unchanged.
    """
    if credential and binding.build_scoped_client is not None:
        return binding.build_scoped_client(credential), True
    if credential:
        logger.warning(
            "Caller API key ignored; provider does not accept caller credentials",
            extra={"provider": provider},
        )
    return binding.get_default_client(), False


def _bind_generate(client: AnswerClient) -> Callable[[dict[str, Any]], str | None]:
    # Traced inputs are the prompt and model name only; the client is closed over.
    def generate_answer(params: dict[str, Any]) -> str | None:
        return client.generate_answer(params["prompt"], params["model_name"])

    return generate_answer


class RequestDispatcher:
    def __init__(self, bindings: Mapping[str, ProviderBinding]) -> None:
        self._bindings = bindings

    def dispatch(
        self, question: str, model_selector: str | None, credential: str | None = None
    ) -> AnswerResult:
        if not model_selector:
            raise ConfigurationError("modelId is required.")

        provider, model_name = parse_model_selector(model_selector)
        binding = self._bindings.get(provider)
        if binding is None:
            raise ProviderError(f"Unsupported provider: {provider}")

        logger.info(
            "Answer request received",
            extra={"provider": provider, "model": model_name, "question_length": len(question)},
        )
        prompt = ANSWER_PROMPT.format(question=question)

        try:
            client, scoped = resolve_client(binding, provider, credential)
            runnable = RunnableLambda(_bind_generate(client)).with_config(
                {"run_name": "idmc_assist_answer"}
            )
            answer = runnable.invoke(
                {"prompt": prompt, "model_name": model_name},
                config={
                    "tags": ["idmc-assist", model_selector],
                    "metadata": {"provider": provider, "scoped_client": scoped},
                },
            )
        except ProviderError:
            raise
        except Exception as e:
            logger.warning(
                "Provider call failed",
                extra={"provider": provider, "model": model_name, "error_type": type(e).__name__},
            )
            raise ProviderError(str(e)) from e

        if answer is None:
            raise ProviderError(NO_OUTPUT_MESSAGE)
        return AnswerResult(answer=answer)
