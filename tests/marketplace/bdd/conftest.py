"""Shared BDD fixtures and step definitions for the Marketplace domain."""

import pytest
from marketplace.cart.items import add_to_cart
from marketplace.checkout.placement import checkout_cart
from pytest_bdd import given, parsers


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def context():
    """Scenario state: listed products by name, the last order and any error."""
    return {"products": {}, "order": None, "error": None, "attempts": []}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.parse('a seller has listed "{name}" at {price:f} with {quantity:d} in stock'))
def listed_product(context, list_product, name, price, quantity):
    context["products"][name] = list_product(name=name, price=price, quantity=quantity)


@given(parsers.parse('the buyer has {quantity:d} of "{name}" in their cart'))
def product_in_cart(context, buyer, name, quantity):
    add_to_cart(buyer, context["products"][name].id, quantity)


@given("the buyer has checked out")
def checked_out(context, buyer):
    context["order"] = checkout_cart(buyer, payment_method="cash", delivery_address="Plot 12, Nashik")
