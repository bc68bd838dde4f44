"""Checkout load test scenarios.

CheckoutUser races other shoppers for the same size option. A 400 carrying
an insufficient-stock error is the expected outcome once stock runs out.
ShippingBrowserUser reads the public shipping endpoints.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import COUNTRIES, checkout_data, idempotency_key
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import CheckoutState


class CheckoutJourney(SequentialTaskSet):
    """Check shipping rate -> Place order -> Retry with the same idempotency key."""

    def on_start(self):
        self.state = CheckoutState()
        self.country = random.choice(COUNTRIES)
        self.key = None

    @task
    def check_rate(self):
        with self.client.get(
            f"/shipping/rates/{self.country}",
            catch_response=True,
            name="GET /shipping/rates/{country}",
        ) as resp:
            if resp.status_code == 404:
                # Not every sampled country is seeded
                resp.success()
                self.country = "US"

    @task
    def place_order(self):
        self.key = idempotency_key()
        with self.client.post(
            "/orders",
            json=checkout_data(country=self.country),
            headers={"Idempotency-Key": self.key},
            catch_response=True,
            name="POST /orders",
        ) as resp:
            if resp.status_code == 201:
                body = resp.json()
                self.state.order_ids.append(body["id"])
                self.state.units_bought += sum(item["quantity"] for item in body["items"])
            elif resp.status_code == 400 and "Insufficient stock" in extract_error_detail(resp):
                self.state.sold_out += 1
                self.key = None
                resp.success()
            else:
                resp.failure(f"Checkout failed: {resp.status_code} {extract_error_detail(resp)}")
                self.key = None

    @task
    def replay_order(self):
        if not self.key:
            self.interrupt()
            return
        with self.client.post(
            "/orders",
            json=checkout_data(country=self.country),
            headers={"Idempotency-Key": self.key},
            catch_response=True,
            name="POST /orders (replay)",
        ) as resp:
            if resp.status_code != 201 or resp.json()["id"] != self.state.order_ids[-1]:
                resp.failure(f"Replay created a new order: {resp.status_code} {extract_error_detail(resp)}")
        self.interrupt()


class CheckoutUser(HttpUser):
    tasks = [CheckoutJourney]
    wait_time = between(0.1, 0.5)


class ShippingBrowserUser(HttpUser):
    wait_time = between(1, 3)

    @task(3)
    def countries(self):
        self.client.get("/shipping/countries", name="GET /shipping/countries")

    @task(1)
    def rate(self):
        with self.client.get(
            f"/shipping/rates/{random.choice(COUNTRIES)}",
            catch_response=True,
            name="GET /shipping/rates/{country}",
        ) as resp:
            if resp.status_code == 404:
                resp.success()
