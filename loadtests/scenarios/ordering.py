"""Ordering load test scenarios.

CustomerUser walks the menu-to-checkout journey; StaffUser works the order
board, moving orders through their statuses and editing items.
"""

import random
import uuid

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.helpers.response import extract_error_detail

LEVELS = [0, 30, 50, 70, 100]


def _selection(menu_item):
    payload = {"menu_item_id": menu_item["id"], "quantity": random.randint(1, 3)}
    if menu_item["has_customization"]:
        payload.update(
            sugar=random.choice(LEVELS),
            ice=random.choice(LEVELS),
            topping=random.random() < 0.3,
        )
    return payload


class CheckoutJourney(SequentialTaskSet):
    """Menu -> Create Cart -> Add Items -> Update Quantity -> Checkout."""

    def on_start(self):
        self.menu = []
        self.cart_id = None
        self.item_ids = []

    @task
    def load_menu(self):
        with self.client.get("/menu", catch_response=True, name="GET /menu") as resp:
            if resp.status_code == 200:
                self.menu = resp.json()
            else:
                resp.failure(f"Menu failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def create_cart(self):
        with self.client.post(
            "/carts",
            json={"session_id": f"load-{uuid.uuid4().hex[:12]}"},
            catch_response=True,
            name="POST /carts",
        ) as resp:
            if resp.status_code == 201:
                self.cart_id = resp.json()["cart_id"]
            else:
                resp.failure(f"Create cart failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def add_items(self):
        for menu_item in random.sample(self.menu, k=min(len(self.menu), random.randint(1, 3))):
            with self.client.post(
                f"/carts/{self.cart_id}/items",
                json=_selection(menu_item),
                catch_response=True,
                name="POST /carts/{id}/items",
            ) as resp:
                if resp.status_code == 201:
                    self.item_ids.append(resp.json()["item_id"])
                else:
                    resp.failure(f"Add cart item failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def update_quantity(self):
        if not self.item_ids:
            self.interrupt()
            return
        with self.client.put(
            f"/carts/{self.cart_id}/items/{self.item_ids[0]}",
            json={"new_quantity": random.randint(1, 4)},
            catch_response=True,
            name="PUT /carts/{id}/items/{item_id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Update quantity failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def checkout(self):
        with self.client.post(
            f"/carts/{self.cart_id}/checkout",
            catch_response=True,
            name="POST /carts/{id}/checkout",
        ) as resp:
            if resp.status_code != 201:
                resp.failure(f"Checkout failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class BoardJourney(SequentialTaskSet):
    """List pending orders -> start the oldest -> complete it."""

    def on_start(self):
        self.order_id = None

    @task
    def list_new_orders(self):
        with self.client.get(
            "/orders",
            params={"status": "new"},
            catch_response=True,
            name="GET /orders?status=new",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"List orders failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()
                return
            orders = resp.json()
            if not orders:
                self.interrupt()
                return
            self.order_id = orders[-1]["id"]

    @task
    def start_processing(self):
        self._move("processing")

    @task
    def complete(self):
        self._move("completed")

    @task
    def done(self):
        self.interrupt()

    def _move(self, status):
        with self.client.put(
            f"/orders/{self.order_id}/status",
            json={"status": status},
            catch_response=True,
            name="PUT /orders/{id}/status",
        ) as resp:
            # Another staff user may have moved the order first
            if resp.status_code not in (200, 400):
                resp.failure(f"Status change failed: {resp.status_code} — {extract_error_detail(resp)}")


class CustomerUser(HttpUser):
    wait_time = between(1, 3)
    tasks = [CheckoutJourney]


class StaffUser(HttpUser):
    wait_time = between(2, 5)
    tasks = [BoardJourney]
