"""Stock contention scenario.

Every StockRushUser tries to buy the same scarce product at once. The
conditional stock decrement must let exactly `SCARCE_STOCK / UNITS_PER_ORDER`
orders through and refuse the rest with 409; stock must end at zero, never
below. The final stock level is checked when the test stops.
"""

import logging

import requests
from locust import HttpUser, constant_pacing, events, task

from loadtests.data_generators import buyer_headers, checkout_data, product_data, seller_headers
from loadtests.helpers.response import extract_error_detail, is_stock_conflict

logger = logging.getLogger("loadtest")

SCARCE_STOCK = 30
UNITS_PER_ORDER = 3

_scarce = {"product_id": None, "orders": 0, "rejected": 0}


@events.test_start.add_listener
def list_scarce_product(environment, **_kwargs):
    resp = requests.post(
        f"{environment.host}/products",
        json=product_data(quantity=SCARCE_STOCK),
        headers=seller_headers(),
        timeout=10,
    )
    resp.raise_for_status()
    _scarce["product_id"] = resp.json()["id"]
    logger.info("Scarce product %s listed with %s units", _scarce["product_id"], SCARCE_STOCK)


@events.test_stop.add_listener
def verify_stock(environment, **_kwargs):
    if _scarce["product_id"] is None:
        return
    products = requests.get(f"{environment.host}/products", timeout=10).json()
    remaining = next((p["quantity"] for p in products if p["id"] == _scarce["product_id"]), None)
    print(
        f"\n[CONTENTION] orders={_scarce['orders']} rejected={_scarce['rejected']} "
        f"remaining={remaining} expected_orders={SCARCE_STOCK // UNITS_PER_ORDER}"
    )
    if remaining is not None and remaining < 0:
        logger.error("[CONTENTION] Stock went negative: %s", remaining)
        environment.process_exit_code = 1


class StockRushUser(HttpUser):
    """Buyers hammering one product until it sells out."""

    wait_time = constant_pacing(0.1)

    def on_start(self):
        self.headers = buyer_headers()

    @task
    def buy_scarce_product(self):
        with self.client.post(
            "/orders",
            json={
                "items": [{"product_id": _scarce["product_id"], "quantity": UNITS_PER_ORDER}],
                **checkout_data(),
            },
            headers=self.headers,
            catch_response=True,
            name="[RUSH] POST /orders",
        ) as resp:
            if resp.status_code == 201:
                _scarce["orders"] += 1
            elif is_stock_conflict(resp):
                _scarce["rejected"] += 1
                resp.success()
            else:
                resp.failure(f"Order failed: {extract_error_detail(resp)}")
