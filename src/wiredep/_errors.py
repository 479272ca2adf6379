from __future__ import annotations


class ContainerError(Exception):
    """Base class of every error raised by wiredep."""


class NotRegisteredError(ContainerError, KeyError):
    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"Dependency not registered: {identifier!r}")

    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0])


class InvalidRegistrationError(ContainerError, ValueError):
    pass


class InvalidProviderError(ContainerError, TypeError):
    pass


class InvalidAnnotationError(ContainerError, ValueError):
    pass
