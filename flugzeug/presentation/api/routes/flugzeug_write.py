"""
Flugzeug REST write routes.
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Header, Request, Response
from fastapi.responses import JSONResponse

from flugzeug.application.services import FlugzeugWriteService

from ..dependencies import get_write_service
from ..schemas import FlugzeugCreate, FlugzeugUpdate
from .flugzeug_read import etag, get_base_uri, parse_id

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post("", status_code=201)
async def create_flugzeug(
    data: FlugzeugCreate,
    request: Request,
    service: FlugzeugWriteService = Depends(get_write_service),
):
    """Create a Flugzeug; the new resource is in the ``Location`` header."""
    logger.debug("create_flugzeug", data=data.model_dump(mode="json"))

    flugzeug_id = await service.create(data.to_entity())

    location = f"{get_base_uri(request)}/{flugzeug_id}"
    return Response(status_code=201, headers={"Location": location})


@router.put("/{flugzeug_id}", status_code=204)
async def update_flugzeug(
    flugzeug_id: str,
    data: FlugzeugUpdate,
    if_match: Optional[str] = Header(None),
    service: FlugzeugWriteService = Depends(get_write_service),
):
    """
    Update preis, einsatzbereit and baujahr of a Flugzeug.

    ``If-Match`` must carry the version read before, e.g. ``"0"``.
    """
    logger.debug("update_flugzeug", flugzeug_id=flugzeug_id, if_match=if_match)

    if if_match is None:
        logger.debug("update_flugzeug: If-Match missing")
        return JSONResponse(
            status_code=428,
            content={"detail": 'Header "If-Match" fehlt'},
        )

    neue_version = await service.update(
        parse_id(flugzeug_id),
        data.to_entity(),
        if_match,
    )

    return Response(status_code=204, headers={"ETag": etag(neue_version)})


@router.delete("/{flugzeug_id}", status_code=204)
async def delete_flugzeug(
    flugzeug_id: str,
    service: FlugzeugWriteService = Depends(get_write_service),
):
    """Delete a Flugzeug; succeeds whether or not it existed."""
    logger.debug("delete_flugzeug", flugzeug_id=flugzeug_id)

    parsed_id = parse_id(flugzeug_id)
    if parsed_id is not None:
        await service.delete(parsed_id)

    return Response(status_code=204)
