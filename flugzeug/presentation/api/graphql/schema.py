"""
GraphQL schema.

Queries are public; mutations require the X-API-Key header. Domain
errors and invalid input are reported as GraphQL errors with
``extensions.code = "BAD_USER_INPUT"``.
"""

from datetime import date
from typing import Any, Awaitable, Callable, Optional, TypeVar

import strawberry
import structlog
from fastapi import Depends
from graphql import GraphQLError
from pydantic import ValidationError
from strawberry.fastapi import GraphQLRouter
from strawberry.permission import BasePermission
from strawberry.types import Info

from flugzeug.application.services import (
    FlugzeugReadService,
    FlugzeugWriteService,
)
from flugzeug.domain.entities import Flugzeug
from flugzeug.domain.exceptions import DomainException

from ..dependencies import get_read_service, get_write_service
from ..middleware import API_KEY_HEADER, APIKeyRejected, verify_api_key
from ..schemas import FlugzeugCreate, FlugzeugUpdate

logger = structlog.get_logger(__name__)

BAD_USER_INPUT = "BAD_USER_INPUT"

T = TypeVar("T")


def bad_user_input(message: str) -> GraphQLError:
    return GraphQLError(message, extensions={"code": BAD_USER_INPUT})


async def _call(operation: Callable[[], Awaitable[T]]) -> T:
    """Run a service call, reporting domain errors as BAD_USER_INPUT."""
    try:
        return await operation()
    except DomainException as e:
        logger.debug("GraphQL domain error", code=e.code, error=e.message)
        raise bad_user_input(e.message) from e


def _validate(schema, data: dict[str, Any]):
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        messages = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        raise bad_user_input(messages) from e


def _parse_id(value: Any) -> Optional[int]:
    return FlugzeugReadService.parse_id(str(value))


class HasApiKey(BasePermission):
    """Mutations need a valid X-API-Key header."""

    message = "Missing or invalid API key"
    error_extensions = {"code": "UNAUTHENTICATED"}

    def has_permission(self, source: Any, info: Info, **kwargs) -> bool:
        request = info.context["request"]
        try:
            verify_api_key(request.headers.get(API_KEY_HEADER))
        except APIKeyRejected as e:
            logger.debug("GraphQL mutation rejected", reason=e.detail)
            return False
        return True


# =============================================================================
# Types
# =============================================================================

@strawberry.type(name="Modell")
class ModellType:
    modell: str


@strawberry.type(name="Flugzeug")
class FlugzeugType:
    id: strawberry.ID
    version: int
    preis: float
    einsatzbereit: Optional[bool]
    baujahr: Optional[date]
    modell: Optional[ModellType]

    @classmethod
    def from_entity(cls, flugzeug: Flugzeug) -> "FlugzeugType":
        modell = None
        if flugzeug.modell is not None:
            modell = ModellType(modell=flugzeug.modell.modell)
        return cls(
            id=strawberry.ID(str(flugzeug.id)),
            version=flugzeug.version,
            preis=float(flugzeug.preis),
            einsatzbereit=flugzeug.einsatzbereit,
            baujahr=flugzeug.baujahr,
            modell=modell,
        )


@strawberry.type
class CreatePayload:
    id: int


@strawberry.type
class UpdatePayload:
    version: int


# =============================================================================
# Inputs
# =============================================================================

@strawberry.input
class SuchkriterienInput:
    preis: Optional[float] = None
    einsatzbereit: Optional[bool] = None
    baujahr: Optional[str] = None
    modell: Optional[str] = None


@strawberry.input
class ModellInput:
    modell: str


@strawberry.input
class SitzplatzInput:
    sitzplatzklasse: str


@strawberry.input
class FlugzeugInput:
    preis: float
    einsatzbereit: bool
    modell: ModellInput
    baujahr: Optional[str] = None
    sitzplaetze: Optional[list[SitzplatzInput]] = None


@strawberry.input
class FlugzeugUpdateInput:
    id: strawberry.ID
    version: int
    preis: float
    einsatzbereit: bool
    baujahr: Optional[str] = None


# =============================================================================
# Resolvers
# =============================================================================

@strawberry.type
class Query:

    @strawberry.field
    async def flugzeug(self, info: Info, id: strawberry.ID) -> FlugzeugType:
        logger.debug("GraphQL flugzeug", flugzeug_id=id)
        service: FlugzeugReadService = info.context["read_service"]

        flugzeug_id = _parse_id(id)
        if flugzeug_id is None:
            raise bad_user_input(f"Es gibt kein Flugzeug mit der ID {id}.")

        flugzeug = await _call(lambda: service.find_by_id(flugzeug_id))
        return FlugzeugType.from_entity(flugzeug)

    @strawberry.field
    async def flugzeuge(
        self,
        info: Info,
        suchkriterien: Optional[SuchkriterienInput] = None,
    ) -> list[FlugzeugType]:
        criteria = {}
        if suchkriterien is not None:
            criteria = {
                key: value
                for key, value in strawberry.asdict(suchkriterien).items()
                if value is not None
            }
        logger.debug("GraphQL flugzeuge", suchkriterien=criteria)
        service: FlugzeugReadService = info.context["read_service"]

        flugzeuge = await _call(lambda: service.find(criteria))
        return [FlugzeugType.from_entity(f) for f in flugzeuge]


@strawberry.type
class Mutation:

    @strawberry.mutation(permission_classes=[HasApiKey])
    async def create(self, info: Info, input: FlugzeugInput) -> CreatePayload:
        data = _validate(FlugzeugCreate, strawberry.asdict(input))
        logger.debug("GraphQL create", data=data.model_dump(mode="json"))
        service: FlugzeugWriteService = info.context["write_service"]

        flugzeug_id = await _call(lambda: service.create(data.to_entity()))
        return CreatePayload(id=flugzeug_id)

    @strawberry.mutation(permission_classes=[HasApiKey])
    async def update(self, info: Info, input: FlugzeugUpdateInput) -> UpdatePayload:
        fields = strawberry.asdict(input)
        flugzeug_id = _parse_id(fields.pop("id"))
        version = fields.pop("version")
        data = _validate(FlugzeugUpdate, fields)
        logger.debug("GraphQL update", flugzeug_id=flugzeug_id, version=version)
        service: FlugzeugWriteService = info.context["write_service"]

        neue_version = await _call(
            lambda: service.update(flugzeug_id, data.to_entity(), f'"{version}"')
        )
        return UpdatePayload(version=neue_version)

    @strawberry.mutation(permission_classes=[HasApiKey])
    async def delete(self, info: Info, id: strawberry.ID) -> bool:
        logger.debug("GraphQL delete", flugzeug_id=id)
        service: FlugzeugWriteService = info.context["write_service"]

        flugzeug_id = _parse_id(id)
        if flugzeug_id is None:
            return False
        return await _call(lambda: service.delete(flugzeug_id))


schema = strawberry.Schema(query=Query, mutation=Mutation)


async def get_context(
    read_service: FlugzeugReadService = Depends(get_read_service),
    write_service: FlugzeugWriteService = Depends(get_write_service),
) -> dict[str, Any]:
    """Services for the resolvers; Strawberry adds the request."""
    return {
        "read_service": read_service,
        "write_service": write_service,
    }


def create_graphql_router() -> GraphQLRouter:
    return GraphQLRouter(schema, context_getter=get_context)
