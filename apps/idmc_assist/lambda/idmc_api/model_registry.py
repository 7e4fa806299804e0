"""Model options and provider capability registry."""

from dataclasses import dataclass

from .constants import DEFAULT_PROVIDER, MODEL_SELECTOR_SEPARATOR, Provider


@dataclass(frozen=True)
class ProviderCapability:
    accepts_caller_credentials: bool


@dataclass(frozen=True)
class ModelOption:
    selector: str
    label: str
    provider: Provider


PROVIDER_CAPABILITIES: dict[str, ProviderCapability] = {
    "googleai": ProviderCapability(accepts_caller_credentials=True),
    "openai": ProviderCapability(accepts_caller_credentials=False),
}

MODEL_OPTIONS: tuple[ModelOption, ...] = (
    # --- Google AI (Gemini) models ---
    ModelOption(
        selector="googleai/gemini-2.0-flash",
        label="Gemini 2.0 Flash (Fastest)",
        provider="googleai",
    ),
    ModelOption(
        selector="googleai/gemini-1.5-pro",
        label="Gemini 1.5 Pro (Most Accurate)",
        provider="googleai",
    ),
    ModelOption(
        selector="googleai/gemini-1.5-flash",
        label="Gemini 1.5 Flash",
        provider="googleai",
    ),
    # --- OpenAI models ---
    ModelOption(selector="openai/gpt-4.1-mini", label="GPT-4.1 mini", provider="openai"),
)


def parse_model_selector(model_selector: str) -> tuple[str, str]:
    """Split ``<namespace>/<model-name>`` into its parts.

    A selector without a namespace belongs to the default provider.
    """
    namespace, separator, model_name = model_selector.partition(MODEL_SELECTOR_SEPARATOR)
    if not separator:
        return DEFAULT_PROVIDER, model_selector
    return namespace, model_name
