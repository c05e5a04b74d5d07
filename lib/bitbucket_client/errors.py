from __future__ import annotations


class BitbucketClientError(Exception):
    """Base client error."""


class NetworkError(BitbucketClientError):
    """Transport/network layer error. No HTTP response was received."""


class ApiError(BitbucketClientError):
    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        if body:
            message = f"api request failed: status {status_code}: {body}"
        else:
            message = f"api request failed: status {status_code}"
        super().__init__(message)


class DecodeError(BitbucketClientError):
    """Successful response whose body could not be decoded."""

    def __init__(self, phase: str, message: str):
        super().__init__(f"{phase}: {message}")
        self.phase = phase
