"""Pydantic schemas for the assist API."""

from pydantic import BaseModel, ConfigDict, Field

from .constants import MIN_QUESTION_LENGTH, Provider


class AnswerOutput(BaseModel):
    """Structured output requested from the provider."""

    answer: str = Field(description="The AI-generated answer to the question.")


class AnswerResult(BaseModel):
    answer: str


class AskRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question: str = Field(
        min_length=MIN_QUESTION_LENGTH,
        description="The question about Informatica IDMC.",
    )
    model_id: str | None = Field(default=None, alias="modelId")
    api_key: str | None = Field(default=None, alias="apiKey", repr=False)


class ModelMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    label: str
    provider: Provider
    accepts_api_key: bool = Field(alias="acceptsApiKey")
