"""
API schemas.

Pydantic models for request/response validation.
"""

from datetime import date
from decimal import Decimal
from typing import Optional, List

from pydantic import BaseModel, Field, ConfigDict

from flugzeug.domain.entities import Flugzeug, Modell, Sitzplatz


# =============================================================================
# Base schemas
# =============================================================================

class BaseResponse(BaseModel):
    """Base response with common fields."""
    model_config = ConfigDict(from_attributes=True)


# =============================================================================
# HAL links
# =============================================================================

class Link(BaseModel):
    """Hypermedia link."""
    href: str


class Links(BaseModel):
    """Links of a Flugzeug; only ``self`` is set in lists."""
    self: Link
    list: Optional[Link] = None
    add: Optional[Link] = None
    update: Optional[Link] = None
    remove: Optional[Link] = None


# =============================================================================
# Flugzeug schemas
# =============================================================================

class ModellSchema(BaseModel):
    """Modell of a Flugzeug."""
    model_config = ConfigDict(from_attributes=True)

    modell: str = Field(..., max_length=40, pattern=r"^\w", examples=["Titelpost"])


class SitzplatzSchema(BaseModel):
    """Seat class of a Flugzeug."""
    model_config = ConfigDict(from_attributes=True)

    sitzplatzklasse: str = Field(..., max_length=32, examples=["Klasse 1"])


class FlugzeugUpdate(BaseModel):
    """Update Flugzeug request (scalar fields only)."""
    preis: Decimal = Field(..., gt=0, max_digits=8, decimal_places=2, examples=[99.99])
    einsatzbereit: bool = Field(..., examples=[True])
    baujahr: Optional[date] = Field(None, examples=["2022-02-28"])

    def to_entity(self) -> Flugzeug:
        """Patch entity carrying only the updatable fields."""
        return Flugzeug(
            preis=self.preis,
            einsatzbereit=self.einsatzbereit,
            baujahr=self.baujahr,
        )


class FlugzeugCreate(FlugzeugUpdate):
    """Create Flugzeug request with Modell and Sitzplaetze."""
    modell: ModellSchema
    sitzplaetze: Optional[List[SitzplatzSchema]] = None

    def to_entity(self) -> Flugzeug:
        """New Flugzeug graph without IDs."""
        return Flugzeug(
            preis=self.preis,
            einsatzbereit=self.einsatzbereit,
            baujahr=self.baujahr,
            modell=Modell(modell=self.modell.modell),
            sitzplaetze=[
                Sitzplatz(sitzplatzklasse=s.sitzplatzklasse)
                for s in self.sitzplaetze or []
            ],
        )


class FlugzeugResponse(BaseResponse):
    """Flugzeug as HAL resource."""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    preis: float
    einsatzbereit: Optional[bool] = None
    baujahr: Optional[date] = None
    modell: Optional[ModellSchema] = None
    links: Links = Field(..., alias="_links")


class FlugzeugeEmbedded(BaseModel):
    """Embedded list of Flugzeuge."""
    flugzeuge: List[FlugzeugResponse]


class FlugzeugListResponse(BaseModel):
    """HAL collection of Flugzeuge."""
    model_config = ConfigDict(populate_by_name=True)

    embedded: FlugzeugeEmbedded = Field(..., alias="_embedded")
