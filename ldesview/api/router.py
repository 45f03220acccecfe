from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import RedirectResponse, Response
import orjson
from ..services import LdesViewService, Redirect, View

router = APIRouter(prefix="/data", tags=["data"])


class JsonLdResponse(Response):
    media_type = "application/ld+json; charset=utf-8"

    def render(self, content) -> bytes:
        return orjson.dumps(content)


def get_view_service(request: Request) -> LdesViewService:
    return request.app.state.view_service


def get_base_url(request: Request) -> str:
    configured = request.app.state.settings.BASE_URL
    return str(configured) if configured else str(request.base_url)


def _respond(result: Redirect | View) -> Response:
    if isinstance(result, Redirect):
        return RedirectResponse(result.location, status_code=301)
    return JsonLdResponse(result.document)


@router.get("/{stream}", response_class=JsonLdResponse)
async def stream_view(
    stream: str,
    since: str | None = Query(default=None, description="Inclusive ISO 8601 lower bound"),
    base_url: str = Depends(get_base_url),
    service: LdesViewService = Depends(get_view_service),
):
    """Page through every event of a stream."""
    return _respond(await service.stream_view(base_url, stream, since))


@router.get("/{stream}/{fragmentation}", response_class=JsonLdResponse)
async def fragmentation_view(
    stream: str,
    fragmentation: str,
    base_url: str = Depends(get_base_url),
    service: LdesViewService = Depends(get_view_service),
):
    """List the root buckets of a fragmentation."""
    return _respond(await service.fragmentation_view(base_url, stream, fragmentation))


@router.get("/{stream}/{fragmentation}/{bucket:path}", response_class=JsonLdResponse)
async def bucket_view(
    stream: str,
    fragmentation: str,
    bucket: str,
    since: str | None = Query(default=None, description="Inclusive ISO 8601 lower bound"),
    base_url: str = Depends(get_base_url),
    service: LdesViewService = Depends(get_view_service),
):
    """Page through the events of one bucket."""
    return _respond(await service.bucket_view(base_url, stream, fragmentation, bucket, since))
