"""
Error module for the Console Inventory client
Defines the single classified failure raised by every controller operation
"""

from typing import Any, Dict, List, Optional

import requests


DEFAULT_SERVER_MESSAGE = "An error occurred on the server."


class ServiceError(Exception):
    """
    Failure of a call against the backend

    Attributes:
        message (str): Human readable message, with one extra line per invalid field
        status_code (Optional[int]): HTTP status, None when no response was received
        data (Any): Decoded error payload, None when the body was not JSON
    """

    def __init__(
        self, message: str, status_code: Optional[int] = None, data: Any = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.data = data

    def __repr__(self) -> str:
        return (
            f"ServiceError(status_code={self.status_code!r}, "
            f"message={self.message!r})"
        )

    @property
    def is_not_found(self) -> bool:
        """True when the backend answered 404"""
        return self.status_code == 404

    @property
    def is_client_error(self) -> bool:
        """True for 4xx answers"""
        return self.status_code is not None and 400 <= self.status_code < 500

    @property
    def is_server_error(self) -> bool:
        """True for 5xx answers"""
        return self.status_code is not None and self.status_code >= 500

    @property
    def field_errors(self) -> Dict[str, List[str]]:
        """
        Validation messages per field, as sent by the backend

        Returns:
            Dict[str, List[str]]: Field name to messages, empty when there are none
        """
        if not isinstance(self.data, dict):
            return {}

        errors = self.data.get("errors")
        if not isinstance(errors, dict):
            return {}

        return {field: _as_messages(value) for field, value in errors.items()}

    @classmethod
    def from_response(cls, response: requests.Response) -> "ServiceError":
        """
        Build the error for a failed response

        A JSON body contributes its "message" and its per-field "errors";
        anything else falls back to the status code and reason

        Args:
            response (requests.Response): Response with a failure status

        Returns:
            ServiceError: Classified error for the response
        """
        try:
            data = response.json()
        except ValueError:
            status_line = f"{response.status_code} {response.reason or ''}".rstrip()
            return cls(
                f"Network error: {status_line}",
                status_code=response.status_code,
            )

        return cls(
            compose_message(data), status_code=response.status_code, data=data
        )


def compose_message(data: Any) -> str:
    """
    Join the backend message and its validation errors into one text

    Args:
        data (Any): Decoded error body

    Returns:
        str: Message followed by a "<field>: <messages>" line per invalid field
    """
    if not isinstance(data, dict):
        return DEFAULT_SERVER_MESSAGE

    message = data.get("message")
    if message is None or message == "":
        message = DEFAULT_SERVER_MESSAGE
    lines = [str(message)]

    errors = data.get("errors")
    if isinstance(errors, dict):
        for field, value in errors.items():
            messages = _as_messages(value)
            if messages:
                lines.append(f"{field}: {', '.join(messages)}")

    return "\n".join(lines)


def _as_messages(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    return [str(value)]
