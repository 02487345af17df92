"""Tests for PrincipalRepositorySQLAlchemy on SQLite."""

from datetime import timedelta

import pytest

from keyhold_identity import (
    EmailAlreadyExistsError,
    ExternalIdentityConflictError,
    PrincipalNotFoundError,
)
from keyhold_identity.infrastructure.persistence.sqlalchemy import (
    PrincipalRepositorySQLAlchemy,
)
from tests.shared.fixtures.doubles import FIXED_NOW
from tests.shared.fixtures.factories import TestPrincipalFactory


@pytest.fixture
def repo(sqlite_session):
    return PrincipalRepositorySQLAlchemy(sqlite_session)


class TestPrincipalRepository:
    @pytest.mark.asyncio
    async def test_add_and_find(self, repo):
        alice = TestPrincipalFactory.alice()
        await repo.add(alice, "hash-a")

        by_id = await repo.find_by_id(alice.id)
        by_email = await repo.find_by_email(alice.email)

        assert by_id == alice
        assert by_email == alice
        assert by_id.email == "Alice@Example.com"
        assert by_id.created_at == FIXED_NOW
        assert by_id.created_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_plain_lookup_carries_no_hash(self, repo):
        alice = TestPrincipalFactory.alice()
        await repo.add(alice, "hash-a")

        principal = await repo.find_by_id(alice.id)

        assert not hasattr(principal, "password_hash")

    @pytest.mark.asyncio
    async def test_credentials_lookups(self, repo):
        alice = TestPrincipalFactory.alice()
        await repo.add(alice, "hash-a")

        by_id = await repo.find_credentials_by_id(alice.id)
        by_email = await repo.find_credentials_by_email(alice.email)

        assert by_id.password_hash == "hash-a"
        assert by_email.principal == alice
        assert "hash-a" not in repr(by_id)

    @pytest.mark.asyncio
    async def test_email_lookup_is_exact(self, repo):
        await repo.add(TestPrincipalFactory.alice(), "hash-a")

        assert await repo.find_by_email("alice@example.com") is None
        assert await repo.find_by_email("  Alice@Example.com ") is not None

    @pytest.mark.asyncio
    async def test_malformed_email_lookup_matches_nothing(self, repo):
        assert await repo.find_by_email("not-an-email") is None
        assert await repo.find_credentials_by_email("not-an-email") is None

    @pytest.mark.asyncio
    async def test_missing_principal(self, repo):
        alice = TestPrincipalFactory.alice()

        assert await repo.find_by_id(alice.id) is None
        assert await repo.find_credentials_by_id(alice.id) is None
        assert await repo.find_by_external_id("nobody") is None

    @pytest.mark.asyncio
    async def test_duplicate_email(self, repo, sqlite_session):
        await repo.add(TestPrincipalFactory.alice(), "hash-a")

        with pytest.raises(EmailAlreadyExistsError):
            await repo.add(
                TestPrincipalFactory.bob(email=TestPrincipalFactory.ALICE_EMAIL),
                "hash-b",
            )

        await sqlite_session.rollback()

    @pytest.mark.asyncio
    async def test_duplicate_external_id(self, repo, sqlite_session):
        await repo.add(TestPrincipalFactory.alice(external_id="gh|1"), "hash-a")

        with pytest.raises(ExternalIdentityConflictError):
            await repo.add(TestPrincipalFactory.bob(external_id="gh|1"), "hash-b")

        await sqlite_session.rollback()

    @pytest.mark.asyncio
    async def test_save_updates_fields(self, repo):
        alice = TestPrincipalFactory.alice()
        await repo.add(alice, "hash-a")

        later = FIXED_NOW + timedelta(minutes=5)
        alice.rename("Alicia", now=later)
        alice.link_external_identity("gh|1", "https://cdn.example.com/a.png", now=later)
        alice.deactivate(now=later)
        await repo.save(alice)

        stored = await repo.find_by_external_id("gh|1")
        assert stored.name == "Alicia"
        assert stored.avatar_url == "https://cdn.example.com/a.png"
        assert stored.active is False
        assert stored.updated_at == later

    @pytest.mark.asyncio
    async def test_save_unknown_principal(self, repo):
        with pytest.raises(PrincipalNotFoundError):
            await repo.save(TestPrincipalFactory.alice())

    @pytest.mark.asyncio
    async def test_update_password_hash(self, repo):
        alice = TestPrincipalFactory.alice()
        await repo.add(alice, "hash-a")

        assert await repo.update_password_hash(alice.id, "hash-new") is True
        assert await repo.update_password_hash(TestPrincipalFactory.BOB_ID, "x") is False

        credentials = await repo.find_credentials_by_id(alice.id)
        assert credentials.password_hash == "hash-new"

    @pytest.mark.asyncio
    async def test_delete(self, repo):
        alice = TestPrincipalFactory.alice()
        await repo.add(alice, "hash-a")

        assert await repo.delete(alice.id) is True
        assert await repo.delete(alice.id) is False
        assert await repo.find_by_id(alice.id) is None

    @pytest.mark.asyncio
    async def test_count_and_list(self, repo):
        await repo.add(TestPrincipalFactory.alice(), "hash-a")
        await repo.add(
            TestPrincipalFactory.bob(
                active=False,
                created_at=FIXED_NOW + timedelta(seconds=1),
            ),
            "hash-b",
        )

        assert await repo.count() == 2
        everyone = await repo.list_all()
        assert [p.name for p in everyone] == ["Alice", "Bob"]
        active_only = await repo.list_all(include_inactive=False)
        assert [p.name for p in active_only] == ["Alice"]
