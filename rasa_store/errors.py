from __future__ import annotations


class StoreError(Exception):
    """Base class for local store failures."""


class UnknownCollectionError(StoreError, KeyError):
    def __init__(self, name: str, reason: str = "unknown collection"):
        super().__init__(f"{reason}: {name!r}")
        self.name = name

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message.
        return str(self.args[0])


class DuplicateIdError(StoreError):
    def __init__(self, collection: str, record_id: str):
        super().__init__(f"{collection} already contains a record with id {record_id!r}")
        self.collection = collection
        self.record_id = record_id


class NotFoundError(StoreError):
    def __init__(self, collection: str, key: str):
        super().__init__(f"{collection}: no record matching {key!r}")
        self.collection = collection
        self.key = key


class ValidationError(StoreError, ValueError):
    """Input rejected before any state was touched."""


class RemoteError(Exception):
    """Base class for failures of the remote API path."""


class NetworkError(RemoteError):
    """Connection failure, timeout or abort before a response arrived."""


class ServerError(RemoteError):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
