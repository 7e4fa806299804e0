"""Shared constants and literal types for the IDMC Assist Lambda."""

from typing import Literal

AWS_REGION = "ap-northeast-1"
LANGSMITH_PROJECT = "idmc-assist"
DEFAULT_PROVIDER = "googleai"
DEFAULT_MODEL_SELECTOR = "googleai/gemini-2.0-flash"
MODEL_SELECTOR_SEPARATOR = "/"
MIN_QUESTION_LENGTH = 10
ANSWER_PROMPT_TEMPLATE = (
    "You are an AI assistant that helps users learn Informatica IDMC. "
    "Answer the following question accurately and concisely:\n\n"
    "Question: {question}"
)
NO_OUTPUT_MESSAGE = "no output produced"

Provider = Literal["googleai", "openai"]
