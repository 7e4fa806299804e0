"""Domain-level exceptions for the assist API."""


class ConfigurationError(ValueError):
    """Raised when the caller omits required configuration such as the model selector."""


class ProviderError(RuntimeError):
    """Raised when the provider call fails; the message is the provider's reason."""
