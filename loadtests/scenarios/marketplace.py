"""Marketplace load test journeys.

Stateful SequentialTaskSet journeys for the two sides of the marketplace.
Steps execute in order; each depends on the previous step succeeding.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import buyer_headers, checkout_data, new_price, product_data, seller_headers
from loadtests.helpers.response import extract_error_detail, is_stock_conflict
from loadtests.helpers.state import BuyerState, SellerState


class SellerJourney(SequentialTaskSet):
    """List products -> Reprice one -> Check received orders -> Delist one."""

    def on_start(self):
        self.state = SellerState(headers=seller_headers())

    @task
    def list_products(self):
        for _ in range(3):
            with self.client.post(
                "/products",
                json=product_data(),
                headers=self.state.headers,
                catch_response=True,
                name="POST /products",
            ) as resp:
                if resp.status_code == 201:
                    self.state.product_ids.append(resp.json()["id"])
                else:
                    resp.failure(f"List product failed: {extract_error_detail(resp)}")
                    self.interrupt()

    @task
    def reprice(self):
        product_id = random.choice(self.state.product_ids)
        with self.client.put(
            f"/products/{product_id}/price",
            json=new_price(),
            headers=self.state.headers,
            catch_response=True,
            name="PUT /products/{id}/price",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Reprice failed: {extract_error_detail(resp)}")

    @task
    def received_orders(self):
        with self.client.get(
            "/orders/received",
            headers=self.state.headers,
            catch_response=True,
            name="GET /orders/received",
        ) as resp:
            if resp.status_code == 200:
                self.state.order_ids = [order["id"] for order in resp.json()]
            else:
                resp.failure(f"Received orders failed: {extract_error_detail(resp)}")

    @task
    def delist(self):
        product_id = self.state.product_ids.pop()
        with self.client.delete(
            f"/products/{product_id}",
            headers=self.state.headers,
            catch_response=True,
            name="DELETE /products/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Delist failed: {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class ShopperJourney(SequentialTaskSet):
    """Browse -> Add to cart (x2) -> Checkout -> View orders."""

    def on_start(self):
        self.state = BuyerState(headers=buyer_headers())

    @task
    def browse(self):
        with self.client.get("/products", catch_response=True, name="GET /products") as resp:
            if resp.status_code != 200:
                resp.failure(f"Browse failed: {extract_error_detail(resp)}")
                self.interrupt()
            products = [p for p in resp.json() if p["quantity"] > 0]
            if not products:
                self.interrupt()
            picks = random.sample(products, k=min(2, len(products)))
            self.state.cart_product_ids = [p["id"] for p in picks]

    @task
    def add_to_cart(self):
        for product_id in self.state.cart_product_ids:
            with self.client.post(
                "/cart/items",
                json={"product_id": product_id, "quantity": random.randint(1, 3)},
                headers=self.state.headers,
                catch_response=True,
                name="POST /cart/items",
            ) as resp:
                # The product may have been delisted since browsing
                if resp.status_code == 404:
                    resp.success()
                elif resp.status_code != 201:
                    resp.failure(f"Add to cart failed: {extract_error_detail(resp)}")

    @task
    def checkout(self):
        with self.client.post(
            "/orders/checkout",
            json=checkout_data(),
            headers=self.state.headers,
            catch_response=True,
            name="POST /orders/checkout",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_ids.append(resp.json()["id"])
            elif is_stock_conflict(resp):
                resp.success()
            else:
                resp.failure(f"Checkout failed: {extract_error_detail(resp)}")

    @task
    def view_orders(self):
        self.client.get("/orders/placed", headers=self.state.headers, name="GET /orders/placed")

    @task
    def done(self):
        self.interrupt()


class MarketplaceUser(HttpUser):
    """Realistic traffic: many more shoppers than sellers."""

    wait_time = between(0.5, 2)
    tasks = {ShopperJourney: 4, SellerJourney: 1}
