"""
Search criteria compiler.

Turns a sparse mapping of search fields into a SQLAlchemy ``Select`` over
``flugzeug`` joined to ``modell``. Every value is a bound parameter and
every field name is looked up in a static column table, so criteria can
never inject SQL.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Mapping, Optional

import structlog
from sqlalchemy import Select, bindparam, select
from sqlalchemy.orm import InstrumentedAttribute, contains_eager

from flugzeug.domain.exceptions import InvalidSearchCriteriaError

from .models import FlugzeugModel, ModellModel

logger = structlog.get_logger(__name__)


_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off"}
_INT_MAX = 2_147_483_647


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("boolean is not an integer")
    number = int(value)
    if not -_INT_MAX - 1 <= number <= _INT_MAX:
        raise ValueError(f"out of range: {value!r}")
    return number


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise ValueError("boolean is not a number")
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"not a number: {value!r}") from e


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise ValueError(f"not a boolean: {value!r}")


def _to_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def _to_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


@dataclass(frozen=True)
class Criterion:
    """A searchable Flugzeug column and the coercion for its values."""

    column: InstrumentedAttribute
    coerce: Callable[[Any], Any]


# Must list exactly Flugzeug.SEARCHABLE_PROPERTIES.
CRITERIA: dict[str, Criterion] = {
    "id": Criterion(FlugzeugModel.id, _to_int),
    "version": Criterion(FlugzeugModel.version, _to_int),
    "preis": Criterion(FlugzeugModel.preis, _to_decimal),
    "einsatzbereit": Criterion(FlugzeugModel.einsatzbereit, _to_bool),
    "baujahr": Criterion(FlugzeugModel.baujahr, _to_date),
    "created_at": Criterion(FlugzeugModel.created_at, _to_datetime),
    "updated_at": Criterion(FlugzeugModel.updated_at, _to_datetime),
}


class QueryBuilder:
    """
    Builds SELECT statements for Flugzeuge.

    Args:
        dialect: Database dialect name; PostgreSQL gets ``ILIKE`` for the
            Modell search, every other dialect plain ``LIKE``.
    """

    def __init__(self, dialect: str = "postgresql"):
        self.dialect = dialect

    def build_id(self, flugzeug_id: int, mit_sitzplaetze: bool = False) -> Select:
        """
        Build the lookup of one Flugzeug by ID.

        The Modell is inner-joined (a Flugzeug always has one); Sitzplaetze
        are left-joined only when requested.

        Args:
            flugzeug_id: Flugzeug ID
            mit_sitzplaetze: Also fetch the Sitzplaetze

        Returns:
            SELECT statement
        """
        stmt = (
            select(FlugzeugModel)
            .join(FlugzeugModel.modell)
            .options(contains_eager(FlugzeugModel.modell))
        )

        if mit_sitzplaetze:
            stmt = stmt.outerjoin(FlugzeugModel.sitzplaetze).options(
                contains_eager(FlugzeugModel.sitzplaetze)
            )

        return stmt.where(FlugzeugModel.id == flugzeug_id).execution_options(
            populate_existing=True
        )

    def build(self, suchkriterien: Optional[Mapping[str, Any]] = None) -> Select:
        """
        Build the search for Flugzeuge.

        ``modell`` is a case-insensitive substring search on the Modell
        name; every other key is an equality test on a Flugzeug column.
        All predicates are combined with AND.

        Args:
            suchkriterien: Field name to value, e.g. {"modell": "a", "einsatzbereit": True}

        Returns:
            SELECT statement

        Raises:
            InvalidSearchCriteriaError: On unknown keys or uncoercible values
        """
        criteria = dict(suchkriterien or {})
        modell = criteria.pop("modell", None)
        logger.debug("build", modell=modell, props=criteria)

        stmt = (
            select(FlugzeugModel)
            .join(FlugzeugModel.modell)
            .options(contains_eager(FlugzeugModel.modell))
        )

        if isinstance(modell, str):
            pattern = f"%{modell}%"
            if self.dialect == "postgresql":
                stmt = stmt.where(ModellModel.modell.ilike(pattern))
            else:
                stmt = stmt.where(ModellModel.modell.like(pattern))

        unknown = [key for key in criteria if key not in CRITERIA]
        if unknown:
            raise InvalidSearchCriteriaError(unknown, suchkriterien)

        # Successive where() calls are joined with AND.
        for key, value in criteria.items():
            criterion = CRITERIA[key]
            try:
                param = criterion.coerce(value)
            except (TypeError, ValueError) as e:
                raise InvalidSearchCriteriaError([key], suchkriterien, reason=str(e)) from e
            stmt = stmt.where(
                criterion.column == bindparam(key, param, type_=criterion.column.type)
            )

        stmt = stmt.order_by(FlugzeugModel.id)
        logger.debug("build: sql", sql=str(stmt))
        return stmt.execution_options(populate_existing=True)
