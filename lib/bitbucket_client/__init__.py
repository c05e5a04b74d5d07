from .client import BitbucketClient, ListPage
from .config_types import ClientConfig
from .errors import ApiError, BitbucketClientError, DecodeError, NetworkError

__all__ = [
    "BitbucketClient",
    "ClientConfig",
    "ListPage",
    "ApiError",
    "BitbucketClientError",
    "DecodeError",
    "NetworkError",
]
