"""Domain-specific errors for kitectl."""


class KiteError(Exception):
    """Base error for kitectl."""


class ConfigError(KiteError):
    """Raised when the client configuration file is missing or malformed."""


class UserInputError(KiteError):
    """Raised when an operator command line cannot be turned into a message."""


class SetupValidationError(KiteError):
    """Raised when a setup descriptor or one of its referenced files is unusable."""


class ExportError(KiteError):
    """Raised when exported data arrives without a usable target file."""


class ProtocolError(KiteError):
    """Raised when an inbound frame cannot be decoded into a message."""


class TransportError(KiteError):
    """Base transport error."""


class TransportConnectError(TransportError):
    """Raised when dialing the hub fails."""


class TransportSendError(TransportError):
    """Raised when writing a frame to the hub fails."""


class TransportReceiveError(TransportError):
    """Raised when reading from the hub fails or the connection is closed."""
