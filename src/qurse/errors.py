"""Exception hierarchy for the integration layers."""


class QurseError(RuntimeError):
    """Base class for all Qurse errors."""


class ModelNotFoundError(QurseError):
    """The requested model is not in the enabled catalog."""

    def __init__(self, model: str):
        self.model = model
        super().__init__(f"Model {model!r} not found in enabled model groups")


class ProviderUnavailableError(QurseError):
    """A provider cannot be used, typically because its API key is missing."""

    def __init__(self, provider: str, reason: str):
        self.provider = provider
        self.reason = reason
        super().__init__(f"Provider {provider!r} unavailable: {reason}")


class UnknownProviderError(QurseError):
    """A catalog entry names a provider without an LLM builder."""

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"Unknown provider: {provider!r}")


class SearchError(QurseError):
    """A search backend failed to return results."""
