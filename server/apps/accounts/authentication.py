"""Token authentication for API views."""

import base64
import binascii
import functools
import logging
from collections.abc import Callable
from typing import Any, Final

from django.http import HttpRequest, HttpResponse, JsonResponse

from server.apps.accounts.exceptions import UnauthenticatedError
from server.apps.accounts.infrastructure.credential_store import (
    get_credential_store,
)
from server.apps.accounts.logic.session_manager import resolve_token

logger = logging.getLogger(__name__)

_TOKEN_HEADER: Final = 'X-Token'
_BEARER_PREFIX: Final = 'Bearer '
_BASIC_PREFIX: Final = 'Basic '

# Key to store the authenticated user id on the request
REQUEST_USER_ID_ATTR: Final = 'user_id'

_View = Callable[..., HttpResponse]


def unauthorized() -> JsonResponse:
    """Build the response for every authentication failure.

    Returns:
        401 response with a generic error.
    """
    return JsonResponse({'error': 'Unauthorized'}, status=401)


def get_request_token(request: HttpRequest) -> str | None:
    """Extract the token sent with a request.

    The ``X-Token`` header is preferred, ``Authorization: Bearer``
    is accepted as well.

    Args:
        request: Incoming request.

    Returns:
        Token, or None if the request carries none.
    """
    token = request.headers.get(_TOKEN_HEADER)
    if token:
        return token

    authorization = request.headers.get('Authorization', '')
    if authorization.startswith(_BEARER_PREFIX):
        return authorization[len(_BEARER_PREFIX):].strip() or None
    return None


def get_basic_credentials(request: HttpRequest) -> tuple[str, str] | None:
    """Extract email and password from HTTP Basic authorization.

    Args:
        request: Incoming request.

    Returns:
        (email, password) pair, or None if missing or malformed.
    """
    authorization = request.headers.get('Authorization', '')
    if not authorization.startswith(_BASIC_PREFIX):
        return None

    try:
        decoded = base64.b64decode(
            authorization[len(_BASIC_PREFIX):],
            validate=True,
        ).decode('utf-8')
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return None

    email, separator, password = decoded.partition(':')
    if not separator or not email or not password:
        return None
    return email, password


def resolve_request_user(request: HttpRequest) -> int | None:
    """Resolve the token of a request without requiring one.

    Args:
        request: Incoming request.

    Returns:
        User id, or None for anonymous requests and invalid tokens.
    """
    try:
        return resolve_token(get_credential_store(), get_request_token(request))
    except UnauthenticatedError:
        return None


def token_required(view: _View) -> _View:
    """Reject requests without a valid token before calling the view.

    The resolved user id is stored as ``request.user_id``.

    Args:
        view: View function or method taking the request first.

    Returns:
        Wrapped view.
    """
    @functools.wraps(view)
    def wrapper(  # noqa: WPS430
        request: HttpRequest,
        *args: Any,
        **kwargs: Any,
    ) -> HttpResponse:
        try:
            user_id = resolve_token(
                get_credential_store(),
                get_request_token(request),
            )
        except UnauthenticatedError as error:
            logger.debug('Rejected request to %s: %s', request.path, error)
            return unauthorized()
        setattr(request, REQUEST_USER_ID_ATTR, user_id)
        return view(request, *args, **kwargs)

    return wrapper
