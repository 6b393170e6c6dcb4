"""HTTP endpoints for users and authentication tokens."""

import json

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from server.apps.accounts.authentication import (
    get_basic_credentials,
    get_request_token,
    token_required,
    unauthorized,
)
from server.apps.accounts.exceptions import (
    InvalidUserDataError,
    UnauthenticatedError,
)
from server.apps.accounts.infrastructure.credential_store import (
    get_credential_store,
)
from server.apps.accounts.logic.session_manager import (
    issue_token,
    revoke_token,
)
from server.apps.accounts.logic.user_operations import create_user, get_user


@require_GET
def connect(request: HttpRequest) -> HttpResponse:
    """Sign in with HTTP Basic credentials and return a new token."""
    credentials = get_basic_credentials(request)
    if credentials is None:
        return unauthorized()

    email, password = credentials
    try:
        token = issue_token(get_credential_store(), email, password)
    except UnauthenticatedError:
        return unauthorized()
    return JsonResponse({'token': token})


@require_GET
@token_required
def disconnect(request: HttpRequest) -> HttpResponse:
    """Revoke the token used for the request."""
    revoke_token(get_credential_store(), get_request_token(request) or '')
    return HttpResponse(status=204)


@csrf_exempt
@require_POST
def users(request: HttpRequest) -> HttpResponse:
    """Register a user from a JSON body with email and password."""
    try:
        payload = json.loads(request.body or b'{}')
    except ValueError:
        payload = {}
    if not isinstance(payload, dict):
        payload = {}

    try:
        user = create_user(payload.get('email'), payload.get('password'))
    except InvalidUserDataError as error:
        return JsonResponse({'error': str(error)}, status=400)
    return JsonResponse({'id': user.id, 'email': user.email}, status=201)


@require_GET
@token_required
def users_me(request: HttpRequest) -> HttpResponse:
    """Describe the user owning the token."""
    try:
        user = get_user(request.user_id)  # type: ignore[attr-defined]
    except UnauthenticatedError:
        return unauthorized()
    return JsonResponse({'id': user.id, 'email': user.email})
