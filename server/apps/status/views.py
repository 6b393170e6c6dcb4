"""HTTP endpoints exposing service health."""

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.http import require_GET

from server.apps.accounts.infrastructure.credential_store import (
    get_credential_store,
)
from server.apps.status.logic import get_stats, get_status


@require_GET
def status(request: HttpRequest) -> HttpResponse:
    """Report reachability of the credential store and database."""
    return JsonResponse(get_status(get_credential_store()))


@require_GET
def stats(request: HttpRequest) -> HttpResponse:
    """Report the number of users and files."""
    return JsonResponse(get_stats())
