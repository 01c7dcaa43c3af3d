"""Message handler protocol definitions."""

from typing import Protocol, Any, runtime_checkable


@runtime_checkable
class MessageHandler(Protocol):
    """
    Synchronous protocol for message handlers.

    Any callable taking the decoded payload works: a function, a lambda or a
    bound method.
    """

    def __call__(self, payload: Any) -> Any:
        """
        Process a decoded payload.

        Args:
            payload: Decoded message payload (str, dict, list, number, ...)

        Returns:
            Response value. When responses are checked, a falsy value (or a
            raised exception) causes the message to be redelivered.
        """
        ...
