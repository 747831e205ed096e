from __future__ import annotations


class ForgeError(Exception):
    """Base class for every error raised by forgectx."""


class InvalidRepositoryFormatError(ForgeError):
    def __init__(self, repository: str) -> None:
        super().__init__(f"Invalid repository format: {repository}. Expected 'owner/repo'.")
        self.repository = repository


class InvalidNumberError(ForgeError):
    pass


class UpstreamError(ForgeError):
    """A backend answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None, detail: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail or message


class NotFoundError(UpstreamError):
    def __init__(self, message: str, detail: str = "") -> None:
        super().__init__(message, status_code=404, detail=detail)


class AuthError(UpstreamError):
    def __init__(self, message: str, detail: str = "") -> None:
        super().__init__(message, status_code=401, detail=detail)


class RateLimitError(UpstreamError):
    pass


class NetworkError(ForgeError):
    pass


class ConfigurationError(ForgeError):
    pass


class MissingClientError(ConfigurationError):
    pass


class MissingTokenError(ConfigurationError):
    pass


class UnknownProviderError(ConfigurationError):
    pass
