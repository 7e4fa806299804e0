"""OpenAI provider implementation for answer requests."""

import logging
import time

from openai import OpenAI

from idmc_api.schemas import AnswerOutput

logger = logging.getLogger(__name__)


class OpenAIAnswerClient:
    def __init__(self, client: OpenAI) -> None:
        self._client = client

    def generate_answer(self, prompt: str, model_name: str) -> str | None:
        start = time.time()
        response = self._client.responses.parse(
            model=model_name,
            input=prompt,
            text_format=AnswerOutput,
        )
        duration_ms = int((time.time() - start) * 1000)

        parsed = response.output_parsed
        answer = parsed.answer if parsed is not None else None

        logger.info(
            "Answer generated",
            extra={
                "openai_duration_ms": duration_ms,
                "model": response.model,
                "usage_prompt_tokens": (response.usage.input_tokens if response.usage else None),
                "usage_completion_tokens": (
                    response.usage.output_tokens if response.usage else None
                ),
                "response_length": len(answer) if answer is not None else None,
                "response_id": response.id,
            },
        )
        return answer
