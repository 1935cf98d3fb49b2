"""Mappers between domain entities and database models.

The domain layer uses plain dataclasses whose children point at their
owner by ID. The persistence layer uses ORM relationships.

This module is the single translation point between them.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import inspect

from flugzeug.domain.entities import Flugzeug, Modell, Sitzplatz
from flugzeug.infrastructure.database.models import (
    FlugzeugModel,
    ModellModel,
    SitzplatzModel,
)


def _is_loaded(model, attribute: str) -> bool:
    return attribute not in inspect(model).unloaded


# ============================================================
# Modell / Sitzplatz
# ============================================================


def modell_model_to_entity(model: ModellModel) -> Modell:
    return Modell(
        id=model.id,
        modell=model.modell,
        flugzeug_id=model.flugzeug_id,
    )


def sitzplatz_model_to_entity(model: SitzplatzModel) -> Sitzplatz:
    return Sitzplatz(
        id=model.id,
        sitzplatzklasse=model.sitzplatzklasse,
        flugzeug_id=model.flugzeug_id,
    )


# ============================================================
# Flugzeug
# ============================================================


def flugzeug_model_to_entity(model: FlugzeugModel) -> Flugzeug:
    """Convert a FlugzeugModel; children are mapped only if loaded."""
    modell = None
    if _is_loaded(model, "modell") and model.modell is not None:
        modell = modell_model_to_entity(model.modell)

    sitzplaetze = []
    if _is_loaded(model, "sitzplaetze"):
        sitzplaetze = [sitzplatz_model_to_entity(s) for s in model.sitzplaetze]

    return Flugzeug(
        id=model.id,
        version=model.version,
        preis=model.preis,
        einsatzbereit=model.einsatzbereit,
        baujahr=model.baujahr,
        modell=modell,
        sitzplaetze=sitzplaetze,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def flugzeug_entity_to_model(
    entity: Flugzeug,
    model: Optional[FlugzeugModel] = None,
) -> FlugzeugModel:
    """Convert a Flugzeug entity.

    Without ``model`` the whole graph is built for an insert. With an
    existing ``model`` only the scalar columns are copied; the version is
    left to the mapper's version counter.
    """
    if model is None:
        model = FlugzeugModel()
        if entity.modell is not None:
            model.modell = ModellModel(modell=entity.modell.modell)
        model.sitzplaetze = [
            SitzplatzModel(sitzplatzklasse=s.sitzplatzklasse)
            for s in entity.sitzplaetze
        ]
        if entity.created_at is not None:
            model.created_at = entity.created_at

    model.preis = entity.preis
    model.einsatzbereit = entity.einsatzbereit
    model.baujahr = entity.baujahr

    if entity.updated_at is not None:
        model.updated_at = entity.updated_at

    return model
