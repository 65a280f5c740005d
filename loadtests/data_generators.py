"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the domain's validation rules and
match the field names expected by the API's Pydantic request schemas.
"""

import random
import uuid

from faker import Faker

fake = Faker()

CATEGORIES = ["fertilizers", "pesticides", "cow-food"]
PAYMENT_METHODS = ["cash", "card", "upi", "bank"]

_PRODUCT_NAMES = {
    "fertilizers": ["Urea", "DAP", "Potash", "Vermicompost", "NPK 19:19:19"],
    "pesticides": ["Neem Oil", "Chlorpyrifos", "Imidacloprid", "Mancozeb"],
    "cow-food": ["Cattle Feed Pellets", "Mineral Mixture", "Cotton Seed Cake", "Maize Bran"],
}


def seller_headers() -> dict:
    """Headers for a fresh signed-in seller."""
    return {
        "X-User-Id": f"seller-lt-{uuid.uuid4().hex[:8]}",
        "X-User-Name": fake.company()[:255],
        "X-User-Email": fake.company_email(),
        "X-User-Role": "seller",
    }


def buyer_headers() -> dict:
    """Headers for a fresh signed-in buyer."""
    return {
        "X-User-Id": f"buyer-lt-{uuid.uuid4().hex[:8]}",
        "X-User-Name": fake.name()[:255],
        "X-User-Email": fake.email(),
        "X-User-Role": "buyer",
    }


def product_data(quantity: int | None = None) -> dict:
    """Generate an AddProductRequest payload."""
    category = random.choice(CATEGORIES)
    name = random.choice(_PRODUCT_NAMES[category])
    return {
        "name": f"{name} {random.choice([1, 5, 25, 45, 50])}kg",
        "description": fake.sentence(nb_words=10),
        "category": category,
        "price": round(random.uniform(5, 2500), 2),
        "quantity": quantity if quantity is not None else random.randint(20, 500),
        "rating": round(random.uniform(0, 5), 1),
    }


def new_price() -> dict:
    return {"price": round(random.uniform(5, 2500), 2)}


def checkout_data() -> dict:
    """Generate a CheckoutRequest payload."""
    return {
        "payment_method": random.choice(PAYMENT_METHODS),
        "delivery_address": fake.address().replace("\n", ", ")[:500],
        "delivery_time": "Within 1 hour",
    }
