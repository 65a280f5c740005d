"""Tests for the conditional stock decrement in the product repository."""

from unittest.mock import patch

import pytest
from marketplace.exceptions import InsufficientStock, PersistenceFailure, StockConflict
from marketplace.product.product import Product
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain


def _repo():
    return current_domain.repository_for(Product)


class TestDecrementStock:
    def test_returns_new_quantity(self, list_product):
        product = list_product(quantity=50)
        assert _repo().decrement_stock(product.id, 2) == 48
        assert _repo().get(product.id).quantity == 48

    def test_to_zero(self, list_product):
        product = list_product(quantity=3)
        assert _repo().decrement_stock(product.id, 3) == 0

    def test_insufficient_stock_writes_nothing(self, list_product):
        product = list_product(quantity=3)
        with pytest.raises(InsufficientStock) as exc:
            _repo().decrement_stock(product.id, 4)

        assert exc.value.available == 3
        assert exc.value.requested == 4
        assert _repo().get(product.id).quantity == 3

    def test_amount_must_be_positive(self, list_product):
        product = list_product(quantity=3)
        with pytest.raises(ValidationError):
            _repo().decrement_stock(product.id, 0)
        assert _repo().get(product.id).quantity == 3

    def test_sequential_decrements_never_go_negative(self, list_product):
        product = list_product(quantity=5)
        repo = _repo()

        repo.decrement_stock(product.id, 3)
        with pytest.raises(InsufficientStock):
            repo.decrement_stock(product.id, 3)

        assert repo.get(product.id).quantity == 2


class TestLostRace:
    """A read that is stale by the time the conditional update runs."""

    def test_retries_from_a_fresh_read(self, list_product):
        product = list_product(quantity=5)
        repo = _repo()
        stale = repo.get(product.id)
        repo.decrement_stock(product.id, 3)
        fresh = repo.get(product.id)

        with patch.object(repo, "get", side_effect=[stale, fresh]):
            remaining = repo.decrement_stock(product.id, 2)

        assert remaining == 0
        assert _repo().get(product.id).quantity == 0

    def test_fresh_read_short_of_stock_raises(self, list_product):
        product = list_product(quantity=5)
        repo = _repo()
        stale = repo.get(product.id)
        repo.decrement_stock(product.id, 3)
        fresh = repo.get(product.id)

        with patch.object(repo, "get", side_effect=[stale, fresh]):
            with pytest.raises(InsufficientStock) as exc:
                repo.decrement_stock(product.id, 3)

        assert exc.value.available == 2
        assert _repo().get(product.id).quantity == 2

    def test_gives_up_after_configured_retries(self, list_product):
        product = list_product(quantity=5)
        repo = _repo()
        stale = repo.get(product.id)
        repo.decrement_stock(product.id, 1)

        with patch.object(repo, "get", return_value=stale) as get:
            with pytest.raises(StockConflict) as exc:
                repo.decrement_stock(product.id, 1)

        retries = current_domain.config["custom"]["STOCK_CONFLICT_RETRIES"]
        assert get.call_count == retries + 1
        assert isinstance(exc.value, PersistenceFailure)
        assert _repo().get(product.id).quantity == 4
