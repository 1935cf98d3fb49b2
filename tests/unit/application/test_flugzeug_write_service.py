"""
Unit tests for FlugzeugWriteService.
"""

from dataclasses import replace
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, patch

import pytest

from flugzeug.application.services import FlugzeugReadService, FlugzeugWriteService
from flugzeug.domain.entities import Flugzeug
from flugzeug.domain.exceptions import (
    FlugzeugNotFoundError,
    VersionInvalidError,
    VersionOutdatedError,
)


@pytest.fixture
def write_service(mock_flugzeug_repo, mock_mail_service):
    """Write service over mocked collaborators."""
    read_service = FlugzeugReadService(mock_flugzeug_repo)
    return FlugzeugWriteService(mock_flugzeug_repo, read_service, mock_mail_service)


@pytest.fixture
def db_write_service(flugzeug_repo, mock_mail_service):
    """Write service over the SQLite repository."""
    read_service = FlugzeugReadService(flugzeug_repo)
    return FlugzeugWriteService(flugzeug_repo, read_service, mock_mail_service)


class TestCreate:
    """Tests for create."""

    @pytest.mark.asyncio
    async def test_returns_id_and_notifies(self, write_service, mock_flugzeug_repo,
                                           mock_mail_service, flugzeug_factory):
        """Test the new ID is returned and a mail is sent."""
        flugzeug = flugzeug_factory()
        mock_flugzeug_repo.save = AsyncMock(return_value=replace(flugzeug, id=7, version=0))

        result = await write_service.create(flugzeug)

        assert result == 7
        mock_mail_service.send_mail.assert_called_once_with(
            "Neues Flugzeug 7",
            "Das Flugzeug mit dem Modell <strong>Titelpost</strong> ist angelegt",
        )

    @pytest.mark.asyncio
    async def test_mail_failure_does_not_fail_create(self, write_service, mock_flugzeug_repo,
                                                     mock_mail_service, flugzeug_factory):
        """Test a broken mail collaborator is only logged."""
        flugzeug = flugzeug_factory()
        mock_flugzeug_repo.save = AsyncMock(return_value=replace(flugzeug, id=3, version=0))
        mock_mail_service.send_mail = AsyncMock(side_effect=RuntimeError("smtp down"))

        assert await write_service.create(flugzeug) == 3


class TestUpdate:
    """Tests for update with version tokens."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", ["abc", "0", '"a"', '"1234"', '"-1"', '""', '"1"x', None])
    async def test_invalid_token(self, write_service, mock_flugzeug_repo, token):
        """Test malformed tokens are rejected before any lookup."""
        with pytest.raises(VersionInvalidError):
            await write_service.update(1, Flugzeug(preis=Decimal("1")), token)

        mock_flugzeug_repo.find_by_id.assert_not_called()
        mock_flugzeug_repo.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_id(self, write_service):
        """Test an update without ID is not found."""
        with pytest.raises(FlugzeugNotFoundError):
            await write_service.update(None, Flugzeug(), '"0"')

    @pytest.mark.asyncio
    async def test_unknown_id(self, write_service, mock_flugzeug_repo):
        """Test an unknown ID is not found and nothing is saved."""
        with pytest.raises(FlugzeugNotFoundError):
            await write_service.update(999, Flugzeug(), '"0"')

        mock_flugzeug_repo.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_outdated(self, write_service, mock_flugzeug_repo, flugzeug_factory):
        """Test a token older than the stored version is rejected."""
        mock_flugzeug_repo.find_by_id = AsyncMock(
            return_value=flugzeug_factory(id=1, version=2)
        )

        with pytest.raises(VersionOutdatedError) as exc_info:
            await write_service.update(1, Flugzeug(preis=Decimal("5")), '"1"')

        assert exc_info.value.version == 1
        mock_flugzeug_repo.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_merges_scalars_only(self, write_service, mock_flugzeug_repo, flugzeug_factory):
        """Test only preis, einsatzbereit and baujahr are taken from the patch."""
        stored = flugzeug_factory(id=1, version=0)
        mock_flugzeug_repo.find_by_id = AsyncMock(return_value=stored)
        mock_flugzeug_repo.save = AsyncMock(side_effect=lambda f: replace(f, version=1))
        patch = Flugzeug(
            preis=Decimal("120.00"),
            einsatzbereit=False,
            baujahr=date(2021, 1, 1),
        )

        result = await write_service.update(1, patch, '"0"')

        assert result == 1
        saved = mock_flugzeug_repo.save.call_args.args[0]
        assert saved.id == 1
        assert saved.preis == Decimal("120.00")
        assert saved.einsatzbereit is False
        assert saved.baujahr == date(2021, 1, 1)
        assert saved.modell.modell == "Titelpost"
        assert saved.updated_at is not None


class TestDelete:
    """Tests for delete."""

    @pytest.mark.asyncio
    async def test_unknown_returns_false(self, write_service, mock_flugzeug_repo):
        """Test deleting an unknown ID returns False."""
        assert await write_service.delete(999) is False
        mock_flugzeug_repo.delete_aggregate.assert_not_called()

    @pytest.mark.asyncio
    async def test_loads_sitzplaetze_and_deletes(self, write_service, mock_flugzeug_repo,
                                                 flugzeug_factory):
        """Test the full aggregate is loaded and deleted."""
        flugzeug = flugzeug_factory(id=1, version=0)
        mock_flugzeug_repo.find_by_id = AsyncMock(return_value=flugzeug)

        assert await write_service.delete(1) is True

        mock_flugzeug_repo.find_by_id.assert_called_once_with(1, mit_sitzplaetze=True)
        mock_flugzeug_repo.delete_aggregate.assert_called_once_with(flugzeug)


class TestWithDatabase:
    """Create, update and delete against SQLite."""

    @pytest.mark.asyncio
    async def test_lifecycle(self, db_write_service, flugzeug_factory):
        """Test create, find, delete and find again."""
        read_service = db_write_service.read_service

        flugzeug_id = await db_write_service.create(flugzeug_factory())

        assert flugzeug_id > 0
        found = await read_service.find_by_id(flugzeug_id, mit_sitzplaetze=True)
        assert found.version == 0
        assert found.preis == Decimal("99.99")
        assert found.einsatzbereit is True
        assert found.baujahr == date(2022, 2, 28)
        assert found.modell.modell == "Titelpost"
        assert [s.sitzplatzklasse for s in found.sitzplaetze] == ["Klasse 1"]

        assert await db_write_service.delete(flugzeug_id) is True

        with pytest.raises(FlugzeugNotFoundError):
            await read_service.find_by_id(flugzeug_id)

    @pytest.mark.asyncio
    async def test_update_returns_next_version(self, db_write_service, flugzeug_factory):
        """Test each accepted update yields version + 1."""
        flugzeug_id = await db_write_service.create(flugzeug_factory())

        first = await db_write_service.update(
            flugzeug_id, Flugzeug(preis=Decimal("100.00")), '"0"'
        )
        second = await db_write_service.update(
            flugzeug_id, Flugzeug(einsatzbereit=False), '"1"'
        )

        assert (first, second) == (1, 2)
        found = await db_write_service.read_service.find_by_id(flugzeug_id)
        assert found.version == 2
        assert found.preis == Decimal("100.00")
        assert found.einsatzbereit is False

    @pytest.mark.asyncio
    async def test_stale_token_rejected(self, db_write_service, flugzeug_factory):
        """Test reusing an old token after an update fails."""
        flugzeug_id = await db_write_service.create(flugzeug_factory())
        await db_write_service.update(flugzeug_id, Flugzeug(preis=Decimal("1.00")), '"0"')

        with pytest.raises(VersionOutdatedError):
            await db_write_service.update(flugzeug_id, Flugzeug(preis=Decimal("2.00")), '"0"')

    @pytest.mark.asyncio
    async def test_newer_token_accepted(self, db_write_service, flugzeug_factory):
        """Test a token ahead of the stored version is accepted."""
        flugzeug_id = await db_write_service.create(flugzeug_factory())

        version = await db_write_service.update(
            flugzeug_id, Flugzeug(preis=Decimal("3.00")), '"5"'
        )

        assert version == 1

    @pytest.mark.asyncio
    async def test_update_from_stale_read_rejected(self, db_write_service, flugzeug_repo,
                                                  flugzeug_factory):
        """Test an update based on a read older than a committed update fails."""
        flugzeug_id = await db_write_service.create(flugzeug_factory())
        stale = await flugzeug_repo.find_by_id(flugzeug_id)

        await db_write_service.update(flugzeug_id, Flugzeug(preis=Decimal("20.00")), '"0"')

        with patch.object(flugzeug_repo, "find_by_id", AsyncMock(return_value=stale)):
            with pytest.raises(VersionOutdatedError):
                await db_write_service.update(
                    flugzeug_id, Flugzeug(preis=Decimal("30.00")), '"0"'
                )

        found = await db_write_service.read_service.find_by_id(flugzeug_id)
        assert found.version == 1
        assert found.preis == Decimal("20.00")
