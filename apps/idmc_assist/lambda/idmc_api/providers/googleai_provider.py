"""Google AI (Gemini) provider implementation for answer requests."""

import logging
import time

from google import genai
from google.genai import types

from idmc_api.schemas import AnswerOutput

logger = logging.getLogger(__name__)


class GoogleAIAnswerClient:
    def __init__(self, client: genai.Client) -> None:
        self._client = client

    def generate_answer(self, prompt: str, model_name: str) -> str | None:
        start = time.time()
        response = self._client.models.generate_content(
            model=model_name,
            contents=prompt,
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=AnswerOutput,
            ),
        )
        duration_ms = int((time.time() - start) * 1000)

        parsed = response.parsed
        answer = parsed.answer if isinstance(parsed, AnswerOutput) else None

        usage = response.usage_metadata
        logger.info(
            "Answer generated",
            extra={
                "googleai_duration_ms": duration_ms,
                "model": model_name,
                "usage_prompt_tokens": usage.prompt_token_count if usage else None,
                "usage_completion_tokens": usage.candidates_token_count if usage else None,
                "response_length": len(answer) if answer is not None else None,
            },
        )
        return answer
