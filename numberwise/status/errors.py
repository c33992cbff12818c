"""
Status Errors

Exceptions raised by the status queries.
"""


class StatusError(Exception):
    """Base class for dashboard status errors."""


class ClientNotFoundError(StatusError):
    """No client exists for the requested id."""

    def __init__(self, client_id: str):
        self.client_id = client_id
        super().__init__(f"Client {client_id} not found")
