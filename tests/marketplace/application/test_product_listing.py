"""Application tests for seller listing commands."""

import pytest
from marketplace.cart.items import add_to_cart, cart_for
from marketplace.checkout.placement import place_order
from marketplace.exceptions import NotAuthenticated, Unauthorized
from marketplace.order.order import Order
from marketplace.product.listing import (
    AddProduct,
    add_product,
    change_product_price,
    delete_product,
    list_products,
)
from marketplace.product.product import Product
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain


class TestAddProduct:
    def test_seller_lists_product(self, seller, list_product):
        product = list_product(description="Nitrogen 46%", image_url="https://cdn.example.com/urea.jpg")

        stored = current_domain.repository_for(Product).get(product.id)
        assert stored.name == "Urea 45kg"
        assert stored.description == "Nitrogen 46%"
        assert str(stored.seller_id) == seller.user_id
        assert stored.seller == seller.name
        assert stored.quantity == 50

    def test_buyer_cannot_list(self, buyer, list_product):
        with pytest.raises(Unauthorized):
            list_product(identity=buyer)

    def test_requires_identity(self):
        with pytest.raises(NotAuthenticated):
            add_product(None, name="Urea", category="fertilizers", price=1.0, quantity=1)

    def test_invalid_category(self, list_product):
        with pytest.raises(ValidationError):
            list_product(category="tractors")

    def test_command_returns_id(self, seller):
        product_id = current_domain.process(
            AddProduct(
                seller_id=seller.user_id,
                seller=seller.name,
                name="Mineral Mix",
                category="cow-food",
                price=12.0,
                quantity=20,
            ),
            asynchronous=False,
        )
        assert current_domain.repository_for(Product).get(product_id).category == "cow-food"


class TestListProducts:
    def test_newest_first(self, list_product):
        first = list_product(name="First")
        second = list_product(name="Second")
        assert [p.name for p in list_products()] == [second.name, first.name]

    def test_filter_by_category(self, list_product):
        list_product(name="Urea")
        neem = list_product(name="Neem Oil", category="pesticides")
        assert [str(p.id) for p in list_products(category="pesticides")] == [str(neem.id)]


class TestDeleteProduct:
    def test_owner_deletes(self, seller, list_product):
        product = list_product()
        delete_product(seller, product.id)

        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(Product).get(product.id)

    def test_other_seller_rejected(self, other_seller, list_product):
        product = list_product()
        with pytest.raises(Unauthorized):
            delete_product(other_seller, product.id)
        assert current_domain.repository_for(Product).get(product.id) is not None

    def test_purges_product_from_carts(self, seller, buyer, list_product):
        from marketplace.shared.identity import Identity

        other_buyer = Identity(user_id="buyer-002")
        doomed = list_product(name="Old Stock")
        kept = list_product(name="Fresh Stock")
        add_to_cart(buyer, doomed.id, 2)
        add_to_cart(buyer, kept.id)
        add_to_cart(other_buyer, doomed.id)

        delete_product(seller, doomed.id)

        assert cart_for(buyer) == [{"product_id": str(kept.id), "quantity": 1}]
        assert cart_for(other_buyer) == []

    def test_orders_keep_their_snapshot(self, seller, buyer, list_product):
        product = list_product(name="Discontinued Feed", price=15.0)
        order = place_order(buyer, [{"product_id": product.id, "quantity": 2}], "cash", "Nashik")

        delete_product(seller, product.id)

        reloaded = current_domain.repository_for(Order).get(order.id)
        assert reloaded.items[0].product_name == "Discontinued Feed"
        assert reloaded.total_amount == 30.0


class TestChangePrice:
    def test_owner_changes_price(self, seller, list_product):
        product = list_product(price=10.0)
        updated = change_product_price(seller, product.id, 12.5)
        assert updated.price == 12.5

    def test_other_seller_rejected(self, other_seller, list_product):
        product = list_product(price=10.0)
        with pytest.raises(Unauthorized):
            change_product_price(other_seller, product.id, 1.0)
        assert current_domain.repository_for(Product).get(product.id).price == 10.0
