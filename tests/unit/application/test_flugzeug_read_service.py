"""
Unit tests for FlugzeugReadService.
"""

from unittest.mock import AsyncMock

import pytest

from flugzeug.application.services import FlugzeugReadService
from flugzeug.domain.entities import Flugzeug
from flugzeug.domain.exceptions import (
    FlugzeugNotFoundError,
    InvalidSearchCriteriaError,
)


class TestFindById:
    """Tests for find_by_id."""

    @pytest.mark.asyncio
    async def test_found(self, mock_flugzeug_repo, flugzeug_factory):
        """Test the repository result is returned."""
        flugzeug = flugzeug_factory(id=1, version=0)
        mock_flugzeug_repo.find_by_id = AsyncMock(return_value=flugzeug)
        service = FlugzeugReadService(mock_flugzeug_repo)

        result = await service.find_by_id(1)

        assert result is flugzeug
        mock_flugzeug_repo.find_by_id.assert_called_once_with(1, mit_sitzplaetze=False)

    @pytest.mark.asyncio
    async def test_passes_sitzplaetze_flag(self, mock_flugzeug_repo, flugzeug_factory):
        """Test mit_sitzplaetze reaches the repository."""
        mock_flugzeug_repo.find_by_id = AsyncMock(return_value=flugzeug_factory(id=1))
        service = FlugzeugReadService(mock_flugzeug_repo)

        await service.find_by_id(1, mit_sitzplaetze=True)

        mock_flugzeug_repo.find_by_id.assert_called_once_with(1, mit_sitzplaetze=True)

    @pytest.mark.asyncio
    async def test_not_found(self, mock_flugzeug_repo):
        """Test a missing Flugzeug raises with its ID."""
        service = FlugzeugReadService(mock_flugzeug_repo)

        with pytest.raises(FlugzeugNotFoundError) as exc_info:
            await service.find_by_id(42)

        assert exc_info.value.flugzeug_id == 42


class TestFind:
    """Tests for find."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("suchkriterien", [None, {}])
    async def test_without_criteria_returns_all(self, mock_flugzeug_repo, suchkriterien):
        """Test no criteria returns everything, even if empty."""
        service = FlugzeugReadService(mock_flugzeug_repo)

        result = await service.find(suchkriterien)

        assert result == []
        mock_flugzeug_repo.find.assert_called_once_with({})

    @pytest.mark.asyncio
    async def test_with_criteria(self, mock_flugzeug_repo, flugzeug_factory):
        """Test matching Flugzeuge are returned."""
        flugzeuge = [flugzeug_factory(id=1), flugzeug_factory(id=2)]
        mock_flugzeug_repo.find = AsyncMock(return_value=flugzeuge)
        service = FlugzeugReadService(mock_flugzeug_repo)

        result = await service.find({"modell": "Titel", "einsatzbereit": True})

        assert result == flugzeuge
        mock_flugzeug_repo.find.assert_called_once_with(
            {"modell": "Titel", "einsatzbereit": True}
        )

    @pytest.mark.asyncio
    async def test_invalid_keys(self, mock_flugzeug_repo):
        """Test unknown keys are rejected before querying."""
        service = FlugzeugReadService(mock_flugzeug_repo)

        with pytest.raises(InvalidSearchCriteriaError) as exc_info:
            await service.find({"farbe": "rot", "sitzplaetze": 1, "preis": 1})

        assert exc_info.value.keys == ["farbe", "sitzplaetze"]
        mock_flugzeug_repo.find.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_match(self, mock_flugzeug_repo):
        """Test an empty result with criteria raises."""
        service = FlugzeugReadService(mock_flugzeug_repo)

        with pytest.raises(FlugzeugNotFoundError) as exc_info:
            await service.find({"modell": "Gibt es nicht"})

        assert exc_info.value.suchkriterien == {"modell": "Gibt es nicht"}

    @pytest.mark.asyncio
    async def test_every_searchable_key_accepted(self, mock_flugzeug_repo):
        """Test all searchable properties pass the key check."""
        mock_flugzeug_repo.find = AsyncMock(return_value=[Flugzeug(id=1)])
        service = FlugzeugReadService(mock_flugzeug_repo)
        suchkriterien = {key: "1" for key in Flugzeug.SEARCHABLE_PROPERTIES}
        suchkriterien["modell"] = "x"

        assert await service.find(suchkriterien) == [Flugzeug(id=1)]


class TestIdPattern:
    """Tests for the ID pattern."""

    @pytest.mark.parametrize("value", ["1", "42", "1234567890"])
    def test_valid(self, value):
        assert FlugzeugReadService.ID_PATTERN.match(value)

    @pytest.mark.parametrize("value", ["0", "-1", "abc", "1.5", "", "12345678901"])
    def test_invalid(self, value):
        assert FlugzeugReadService.ID_PATTERN.match(value) is None

    @pytest.mark.parametrize(
        "value, expected",
        [("1", 1), ("2147483647", 2147483647), ("2147483648", None), ("abc", None)],
    )
    def test_parse_id(self, value, expected):
        assert FlugzeugReadService.parse_id(value) == expected
