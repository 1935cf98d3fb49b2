"""
Flugzeug REST read routes.
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Header, Request, Response
from fastapi.responses import JSONResponse

from flugzeug.application.services import FlugzeugReadService
from flugzeug.domain.entities import Flugzeug
from flugzeug.domain.exceptions import FlugzeugNotFoundError

from ..dependencies import get_read_service
from ..schemas import (
    FlugzeugListResponse,
    FlugzeugResponse,
    FlugzeugeEmbedded,
    Link,
    Links,
    ModellSchema,
)

logger = structlog.get_logger(__name__)

router = APIRouter()

APPLICATION_HAL_JSON = "application/hal+json"


def get_base_uri(request: Request) -> str:
    """Base URI of the REST collection, e.g. ``http://host/rest``."""
    return f"{str(request.base_url).rstrip('/')}/rest"


def parse_id(id_str: str) -> Optional[int]:
    """Parse a path ID; None if it is not a positive integer."""
    return FlugzeugReadService.parse_id(id_str)


def etag(version: int) -> str:
    return f'"{version}"'


def _to_response(flugzeug: Flugzeug, base_uri: str, full_links: bool = True) -> FlugzeugResponse:
    self_uri = f"{base_uri}/{flugzeug.id}"
    if full_links:
        links = Links(
            self=Link(href=self_uri),
            list=Link(href=base_uri),
            add=Link(href=base_uri),
            update=Link(href=self_uri),
            remove=Link(href=self_uri),
        )
    else:
        links = Links(self=Link(href=self_uri))

    modell = None
    if flugzeug.modell is not None:
        modell = ModellSchema.model_validate(flugzeug.modell)

    return FlugzeugResponse(
        preis=float(flugzeug.preis),
        einsatzbereit=flugzeug.einsatzbereit,
        baujahr=flugzeug.baujahr,
        modell=modell,
        links=links,
    )


@router.get("/{flugzeug_id}", response_model=FlugzeugResponse)
async def get_flugzeug(
    flugzeug_id: str,
    request: Request,
    if_none_match: Optional[str] = Header(None),
    service: FlugzeugReadService = Depends(get_read_service),
):
    """
    Get a Flugzeug by ID.

    Returns 304 if ``If-None-Match`` carries the current version,
    otherwise the Flugzeug as HAL JSON with an ``ETag``.
    """
    logger.debug("get_flugzeug", flugzeug_id=flugzeug_id, if_none_match=if_none_match)

    parsed_id = parse_id(flugzeug_id)
    if parsed_id is None:
        raise FlugzeugNotFoundError(
            flugzeug_id,
            message=f"Die Flugzeug-ID {flugzeug_id} ist ungueltig.",
        )

    flugzeug = await service.find_by_id(parsed_id)

    current = etag(flugzeug.version)
    if if_none_match == current:
        logger.debug("get_flugzeug: not modified", flugzeug_id=parsed_id)
        return Response(status_code=304)

    body = _to_response(flugzeug, get_base_uri(request))
    return JSONResponse(
        content=body.model_dump(mode="json", by_alias=True),
        media_type=APPLICATION_HAL_JSON,
        headers={"ETag": current},
    )


@router.get("", response_model=FlugzeugListResponse)
async def list_flugzeuge(
    request: Request,
    service: FlugzeugReadService = Depends(get_read_service),
):
    """Search Flugzeuge; every query parameter is a search criterion."""
    suchkriterien = dict(request.query_params)
    logger.debug("list_flugzeuge", suchkriterien=suchkriterien)

    flugzeuge = await service.find(suchkriterien)

    base_uri = get_base_uri(request)
    body = FlugzeugListResponse(
        embedded=FlugzeugeEmbedded(
            flugzeuge=[_to_response(f, base_uri, full_links=False) for f in flugzeuge],
        ),
    )
    return JSONResponse(
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
        media_type=APPLICATION_HAL_JSON,
    )
