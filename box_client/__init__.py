"""Box Content API client."""
from .core import (
    BoxClient,
    Identity,
    RequestParams,
    Failure,
    Success,
    FailureKind,
    build_assertion,
    token_from_response,
)

__all__ = [
    "BoxClient",
    "Identity",
    "RequestParams",
    "Failure",
    "Success",
    "FailureKind",
    "build_assertion",
    "token_from_response",
]
