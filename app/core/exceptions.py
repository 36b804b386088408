# app/core/exceptions.py


class TarotProxyError(Exception):
    """Base class for errors raised while serving a reading."""


class ConfigurationError(TarotProxyError):
    """The upstream credential is missing or unusable."""


class MethodNotAllowed(TarotProxyError):
    """The request used an HTTP method other than POST or OPTIONS."""


class MalformedRequest(TarotProxyError):
    """The request body could not be read as a ReadingRequest."""


class UpstreamExhausted(TarotProxyError):
    """Every model candidate failed. The message is the last recorded failure."""

    def __init__(self, last_error: str):
        super().__init__(last_error)
        self.last_error = last_error
