"""Unit tests for the Product repository stock mutations."""

import uuid

import pytest

from modules.products.repositories import ProductDjangoRepository

pytestmark = pytest.mark.unit


@pytest.fixture()
def repo():
    return ProductDjangoRepository()


class TestDecrementStock:
    def test_decrements_when_enough(self, repo, make_product):
        product = make_product(stock=5)

        assert repo.decrement_stock(product.id, 3) is True

        product.refresh_from_db()
        assert product.stock_quantity == 2

    def test_can_take_the_last_unit(self, repo, make_product):
        product = make_product(stock=1)

        assert repo.decrement_stock(product.id, 1) is True

        product.refresh_from_db()
        assert product.stock_quantity == 0

    def test_refuses_to_go_negative(self, repo, make_product):
        product = make_product(stock=2)

        assert repo.decrement_stock(product.id, 3) is False

        product.refresh_from_db()
        assert product.stock_quantity == 2

    def test_unknown_product(self, repo):
        assert repo.decrement_stock(uuid.uuid4(), 1) is False


class TestReleaseStock:
    def test_adds_back(self, repo, make_product):
        product = make_product(stock=2)

        repo.release_stock(product.id, 3)

        product.refresh_from_db()
        assert product.stock_quantity == 5


class TestLookups:
    def test_get_for_update(self, repo, make_product):
        product = make_product()
        assert repo.get_for_update(product.id) == product

    def test_invalid_id_returns_none(self, repo):
        assert repo.get_by_id("nope") is None
        assert repo.get_for_update("nope") is None
