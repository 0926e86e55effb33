from abc import ABC


class BaseCustomException(Exception, ABC):
    """
    Base class for all custom exceptions.
    """

    def __init__(self, message: str | None = None):
        self.message = message or self.get_default_message()
        super().__init__(self.message)

    def get_default_message(self) -> str:
        """
        Return default error message.

        Returns
        -------
        str
            Default error message
        """
        return "error.unknown"

    def get_status_code(self) -> int:
        """
        Return HTTP status code for exception.

        Returns
        -------
        int
            HTTP status code
        """
        return 500


class BadRequestException(BaseCustomException):
    """Bad request exception (400)."""

    def get_status_code(self) -> int:
        return 400


class NotFoundException(BaseCustomException):
    """Not found exception (404)."""

    def get_status_code(self) -> int:
        return 404


class ConfigurationException(BaseCustomException):
    """Invalid startup configuration."""

    def get_default_message(self) -> str:
        return "error.configuration.invalid"


class InvalidArgumentsException(BadRequestException):
    """Tool arguments failed validation."""

    def get_default_message(self) -> str:
        return "error.arguments.invalid"


class NetworkNotSupportedException(BadRequestException):
    """Network not supported exception."""

    def get_default_message(self) -> str:
        return "error.network.not_supported"


class NetworkUnavailableException(BadRequestException):
    """
    Network has no usable API key.

    Parameters
    ----------
    message : str | None
        Error message
    available_networks : list[str] | None
        Networks that can currently be queried
    """

    def __init__(
        self,
        message: str | None = None,
        available_networks: list[str] | None = None
    ):
        self.available_networks = available_networks or []
        super().__init__(message)

    def get_default_message(self) -> str:
        return "error.network.unavailable"


class InvalidAddressException(BadRequestException):
    """Invalid address exception."""

    def get_default_message(self) -> str:
        return "error.address.invalid"


class UpstreamException(BaseCustomException):
    """
    Explorer API reported a failure or returned an unusable payload.

    Parameters
    ----------
    message : str | None
        Error message
    upstream_message : str | None
        Message as reported by the explorer, unmodified
    """

    def __init__(
        self,
        message: str | None = None,
        upstream_message: str | None = None
    ):
        self.upstream_message = upstream_message
        super().__init__(message)

    def get_default_message(self) -> str:
        return "error.upstream.failed"

    def get_status_code(self) -> int:
        return 502


class TransportException(UpstreamException):
    """HTTP call to the explorer failed."""

    def get_default_message(self) -> str:
        return "error.upstream.transport"
