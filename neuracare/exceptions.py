"""Error taxonomy for the analysis pipeline.

Validation and consent errors are raised before any mutation. Provider
errors never leave the failover client. Storage errors abort the request.
"""


class NeuraCareError(Exception):
    """Base exception for NeuraCare errors."""

    pass


class PayloadValidationError(NeuraCareError):
    """A request payload is malformed or missing required fields."""

    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


class ConsentError(NeuraCareError):
    """Analysis is blocked by the user's consent state."""

    def __init__(self, message: str, state: str):
        super().__init__(message)
        self.message = message
        self.state = state


class ProviderError(NeuraCareError):
    """An AI provider returned an unusable response."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class StorageError(NeuraCareError):
    """The document store could not be read or written."""

    pass
