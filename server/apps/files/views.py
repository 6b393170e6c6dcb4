"""HTTP endpoints for files and folders."""

import functools
import json
import logging
from collections.abc import Callable
from typing import Any, Final, final

from django.db import DatabaseError
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods

from server.apps.accounts.authentication import (
    resolve_request_user,
    token_required,
)
from server.apps.files.exceptions import (
    FilesError,
    InternalError,
    InvalidArgumentError,
    InvalidOperationError,
    NotFoundError,
)
from server.apps.files.infrastructure.queue import get_job_queue
from server.apps.files.logic.file_operations import (
    get_file,
    list_files,
    read_file_content,
    set_visibility,
    upload_file,
)
from server.apps.files.logic.parents import ParentRef
from server.apps.files.models import File

logger = logging.getLogger(__name__)

_ERROR_STATUSES: Final[dict[type[FilesError], int]] = {
    InvalidArgumentError: 400,
    InvalidOperationError: 400,
    NotFoundError: 404,
    InternalError: 500,
}

_View = Callable[..., HttpResponse]


def serialize_file(file_instance: File) -> dict[str, Any]:
    """Build the public representation of a record.

    The storage location is never exposed.

    Args:
        file_instance: Record to serialize.

    Returns:
        JSON serializable dictionary.
    """
    return {
        'id': file_instance.id,
        'userId': file_instance.owner_id,
        'name': file_instance.name,
        'type': file_instance.kind,
        'isPublic': file_instance.is_public,
        'parentId': ParentRef(file_instance.parent_id).to_wire(),
    }


def api_errors(view: _View) -> _View:
    """Translate service errors into JSON error responses.

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
            return view(request, *args, **kwargs)
        except FilesError as error:
            status = _ERROR_STATUSES.get(type(error), 500)
            return JsonResponse({'error': error.message}, status=status)
        except DatabaseError:
            logger.exception('Database failure on %s', request.path)
            return JsonResponse({'error': 'Internal Server Error'}, status=500)

    return wrapper


def _parse_json_body(request: HttpRequest) -> dict[str, Any]:
    try:
        payload = json.loads(request.body or b'{}')
    except ValueError:
        return {}
    if not isinstance(payload, dict):
        return {}
    return payload


@final
@method_decorator(csrf_exempt, name='dispatch')
class FileCollectionView(View):
    """Upload new records and list existing ones."""

    @method_decorator(token_required)
    @method_decorator(api_errors)
    def post(self, request: HttpRequest) -> HttpResponse:
        """Create a folder, file or image from a JSON body."""
        payload = _parse_json_body(request)
        file_instance = upload_file(
            request.user_id,  # type: ignore[attr-defined]
            name=payload.get('name'),
            kind=payload.get('type'),
            parent=payload.get('parentId'),
            # Only a JSON true publishes
            is_public=payload.get('isPublic') is True,
            data=payload.get('data'),
            job_queue=get_job_queue(),
        )
        return JsonResponse(serialize_file(file_instance), status=201)

    @method_decorator(token_required)
    @method_decorator(api_errors)
    def get(self, request: HttpRequest) -> HttpResponse:
        """List one page of records inside a folder."""
        files = list_files(
            request.user_id,  # type: ignore[attr-defined]
            parent=request.GET.get('parentId'),
            page=request.GET.get('page', 0),
        )
        return JsonResponse(
            [serialize_file(file_instance) for file_instance in files],
            safe=False,
        )


@require_GET
@token_required
@api_errors
def file_detail(request: HttpRequest, file_id: str) -> HttpResponse:
    """Show one record of the user."""
    file_instance = get_file(
        request.user_id,  # type: ignore[attr-defined]
        file_id,
    )
    return JsonResponse(serialize_file(file_instance))


@csrf_exempt
@require_http_methods(['PUT'])
@token_required
@api_errors
def file_publish(request: HttpRequest, file_id: str) -> HttpResponse:
    """Make a record public."""
    file_instance = set_visibility(
        request.user_id,  # type: ignore[attr-defined]
        file_id,
        is_public=True,
    )
    return JsonResponse(serialize_file(file_instance))


@csrf_exempt
@require_http_methods(['PUT'])
@token_required
@api_errors
def file_unpublish(request: HttpRequest, file_id: str) -> HttpResponse:
    """Make a record private."""
    file_instance = set_visibility(
        request.user_id,  # type: ignore[attr-defined]
        file_id,
        is_public=False,
    )
    return JsonResponse(serialize_file(file_instance))


@require_GET
@api_errors
def file_data(request: HttpRequest, file_id: str) -> HttpResponse:
    """Send the content of a file, or of one of its thumbnails."""
    file_content = read_file_content(
        file_id,
        user_id=resolve_request_user(request),
        size=request.GET.get('size'),
    )
    return HttpResponse(
        file_content.content,
        content_type=file_content.content_type,
    )
