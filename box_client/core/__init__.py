"""Box Content API client library.

This package provides a modular, testable interface to the Box API.

Architecture:
- credentials.py: Client identity and access token state
- assertion.py: JWT assertion construction (RS256)
- request.py: Request assembly (query, bearer/As-User headers, body encoding)
- executor.py: Single-shot HTTP execution and response classification
- result.py: Success/Failure result types
- client.py: BoxClient session tying the above together
- users.py, groups.py, folders.py, files.py: Resource services
- exceptions.py: Typed exceptions for error handling

Usage:
    from box_client.core import BoxClient, Identity, UserService, build_assertion, token_from_response

    client = BoxClient(Identity("client-id", "client-secret", "key-id"))
    assertion = build_assertion(client.identity, private_key_pem, enterprise_id)
    result = client.authenticate(assertion)
    if result.ok:
        client.set_access(*token_from_response(result.value))

    users = UserService(client).list_users(filter_term="alice")
"""
from .assertion import build_assertion, load_private_key
from .client import (
    BoxClient,
    token_from_response,
    BOX_API_URL,
    BOX_TOKEN_URL,
    BOX_UPLOAD_URL,
    JWT_BEARER_GRANT,
)
from .credentials import CredentialStore, Identity
from .exceptions import (
    BoxError,
    BoxAPIError,
    ConfigurationError,
    AuthenticationError,
    TransportError,
    MalformedResponseError,
)
from .executor import RequestExecutor, TLSAdapter
from .request import (
    MultipartBody,
    PreparedRequest,
    RequestParams,
    build_request,
    AS_USER_HEADER,
    AUTHORIZATION_HEADER,
)
from .result import Failure, FailureKind, Result, Success
from .users import UserService
from .groups import GroupService
from .folders import FolderService
from .files import FileService

__all__ = [
    # Client
    "BoxClient",
    "token_from_response",
    "BOX_API_URL",
    "BOX_TOKEN_URL",
    "BOX_UPLOAD_URL",
    "JWT_BEARER_GRANT",
    
    # Credentials
    "Identity",
    "CredentialStore",
    "build_assertion",
    "load_private_key",
    
    # Requests
    "RequestParams",
    "MultipartBody",
    "PreparedRequest",
    "build_request",
    "RequestExecutor",
    "TLSAdapter",
    "AUTHORIZATION_HEADER",
    "AS_USER_HEADER",
    
    # Results
    "Result",
    "Success",
    "Failure",
    "FailureKind",
    
    # Exceptions
    "BoxError",
    "BoxAPIError",
    "ConfigurationError",
    "AuthenticationError",
    "TransportError",
    "MalformedResponseError",
    
    # Services
    "UserService",
    "GroupService",
    "FolderService",
    "FileService",
]
