"""Tests for ProductRepository."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from amazon_recommends.models.product import Product
from amazon_recommends.schemas.product import ProductPayload
from amazon_recommends.services import product_repository
from amazon_recommends.services.product_repository import ProductRepository

T0 = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def payload(product_payload: dict[str, Any]) -> ProductPayload:
    return ProductPayload.model_validate(product_payload)


@pytest.fixture
def clock(monkeypatch: pytest.MonkeyPatch) -> Callable[[datetime], None]:
    """Pin the repository clock; call the returned function to move it."""
    current = [T0]
    monkeypatch.setattr(product_repository, "utcnow", lambda: current[0])

    def set_time(value: datetime) -> None:
        current[0] = value

    return set_time


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class TestProductRepository:
    """Test suite for ProductRepository."""

    def test_create_sets_status_and_timestamps(self, db_session: Session, payload: ProductPayload) -> None:
        """Test a new row is active with equal created/updated timestamps."""
        repo = ProductRepository(db_session)

        product = repo.create(payload)

        assert product.id is not None
        assert product.status is True
        assert product.created_at == product.updated_at
        assert product.product_name == "Widget"
        assert product.price == 999

    def test_find_matches_asin_and_status(self, db_session: Session, payload: ProductPayload) -> None:
        """Test a row with the right ASIN but wrong status is treated as absent."""
        repo = ProductRepository(db_session)
        repo.create(payload)

        assert repo.find("AB12345678", active=True) is not None
        assert repo.find("AB12345678", active=False) is None
        assert repo.find("ZZ99999999", active=True) is None

    def test_unique_index_rejects_second_active_row(self, db_session: Session, payload: ProductPayload) -> None:
        """Test the store itself refuses two active rows with one ASIN."""
        repo = ProductRepository(db_session)
        repo.create(payload)

        with pytest.raises(IntegrityError):
            repo.create(payload)

        # Session is usable again after the rollback
        assert repo.find("AB12345678", active=True) is not None

    def test_inactive_rows_may_share_asin(self, db_session: Session, payload: ProductPayload) -> None:
        """Test soft-deleted rows do not block a new active row."""
        repo = ProductRepository(db_session)
        first = repo.create(payload)
        repo.set_status(first, active=False)

        second = repo.create(payload)
        repo.set_status(second, active=False)
        third = repo.create(payload)

        rows = db_session.scalars(select(Product).where(Product.asin == "AB12345678")).all()
        assert len(rows) == 3
        assert [r.status for r in rows].count(True) == 1
        assert repo.find("AB12345678", active=True).id == third.id

    def test_find_inactive_returns_latest(self, db_session: Session, payload: ProductPayload) -> None:
        """Test the most recently inserted deleted row wins."""
        repo = ProductRepository(db_session)
        first = repo.create(payload)
        repo.set_status(first, active=False)
        second = repo.create(payload.model_copy(update={"product_name": "Widget v2"}))
        repo.set_status(second, active=False)

        found = repo.find("AB12345678", active=False)

        assert found.id == second.id
        assert found.product_name == "Widget v2"

    def test_replace_keeps_status_and_created_at(
        self, db_session: Session, payload: ProductPayload, clock: Callable[[datetime], None]
    ) -> None:
        """Test a full update rewrites fields and moves only updated_at forward."""
        repo = ProductRepository(db_session)
        product = repo.create(payload)
        later = T0 + timedelta(minutes=5)
        clock(later)

        repo.replace(product, payload.model_copy(update={"maker_name": "Globex", "price": 1200}))
        db_session.expire_all()

        stored = repo.find("AB12345678", active=True)
        assert stored.maker_name == "Globex"
        assert stored.price == 1200
        assert stored.status is True
        assert as_utc(stored.created_at) == T0
        assert as_utc(stored.updated_at) == later
        assert stored.updated_at > stored.created_at

    def test_patch_writes_only_given_columns(self, db_session: Session, payload: ProductPayload) -> None:
        """Test columns missing from the change set keep their values."""
        repo = ProductRepository(db_session)
        product = repo.create(payload)

        updated = repo.patch(product, {"reason": "birthday"})

        assert updated.reason == "birthday"
        assert updated.product_name == "Widget"
        assert updated.maker_name == "Acme"
        assert updated.price == 999
        assert updated.url == "http://x.com/w"

    def test_patch_moves_updated_at_forward(
        self, db_session: Session, payload: ProductPayload, clock: Callable[[datetime], None]
    ) -> None:
        """Test a partial update stamps updated_at and leaves created_at alone."""
        repo = ProductRepository(db_session)
        product = repo.create(payload)
        later = T0 + timedelta(seconds=1)
        clock(later)

        repo.patch(product, {"price": 1500})
        db_session.expire_all()

        stored = repo.find("AB12345678", active=True)
        assert as_utc(stored.created_at) == T0
        assert as_utc(stored.updated_at) == later
        assert stored.updated_at > stored.created_at

    def test_repeated_patches_keep_advancing(
        self, db_session: Session, payload: ProductPayload, clock: Callable[[datetime], None]
    ) -> None:
        """Test each write stamps its own time while created_at stays fixed."""
        repo = ProductRepository(db_session)
        product = repo.create(payload)

        stamps = []
        for minutes in (1, 2, 3):
            clock(T0 + timedelta(minutes=minutes))
            product = repo.patch(product, {"reason": f"reason {minutes}"})
            stamps.append(as_utc(product.updated_at))

        assert stamps == sorted(set(stamps))
        assert as_utc(product.created_at) == T0

    def test_set_status_does_not_touch_timestamps(self, db_session: Session, payload: ProductPayload) -> None:
        """Test soft delete only flips the flag."""
        repo = ProductRepository(db_session)
        product = repo.create(payload)
        updated_at = product.updated_at

        repo.set_status(product, active=False)
        db_session.expire_all()

        stored = repo.find("AB12345678", active=False)
        assert stored is not None
        assert stored.updated_at == updated_at

    def test_reactivation_conflicts_with_active_duplicate(
        self, db_session: Session, payload: ProductPayload
    ) -> None:
        """Test restoring a row fails while another active row holds the ASIN."""
        repo = ProductRepository(db_session)
        old = repo.create(payload)
        repo.set_status(old, active=False)
        repo.create(payload)

        deleted = repo.find("AB12345678", active=False)
        with pytest.raises(IntegrityError):
            repo.set_status(deleted, active=True)
