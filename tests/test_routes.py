######################################################################
# Copyright 2016, 2024 John J. Rofrano. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
######################################################################

"""
Cart API Service Test Suite
"""

# pylint: disable=duplicate-code
import os
import logging
from unittest import TestCase
from unittest.mock import patch
from wsgi import app
from service.common import status
from service.models import db, Cart, CartItem
from service.cart_cache import cart_cache, cart_key, cart_list_key
from service.common.rate_limiter import TieredRateLimiter, rate_limiter

DATABASE_URI = os.getenv("DATABASE_URI", "sqlite:///:memory:")
BASE_URL = "/api/carts"

FROZEN_TIME = 1_700_000_000.0

LAPTOP = {
    "productId": 123,
    "productName": "Laptop",
    "price": 999.99,
    "quantity": 2,
    "category": "Electronics",
    "sku": "LAP-001",
}


######################################################################
#  T E S T   C A S E S
######################################################################
# pylint: disable=too-many-public-methods
class TestCartService(TestCase):
    """REST API Server Tests"""

    @classmethod
    def setUpClass(cls):
        """Run once before all tests"""
        app.config["TESTING"] = True
        app.config["DEBUG"] = False
        # Set up the test database
        app.config["SQLALCHEMY_DATABASE_URI"] = DATABASE_URI
        app.logger.setLevel(logging.CRITICAL)
        app.app_context().push()

    @classmethod
    def tearDownClass(cls):
        """Run once after all tests"""
        db.session.close()

    def setUp(self):
        """Runs before each test"""
        self.client = app.test_client()
        self.tiers = rate_limiter.tiers
        rate_limiter.reset()
        cart_cache.clear()
        db.session.query(CartItem).delete()  # clean up items first
        db.session.query(Cart).delete()  # clean up the last tests
        db.session.commit()

    def tearDown(self):
        """This runs after each test"""
        rate_limiter.tiers = self.tiers
        rate_limiter.reset()
        db.session.remove()

    ############################################################
    # Utility functions
    ############################################################
    def _create_carts(self, count: int = 1) -> list:
        """Create carts through the API and return their bodies"""
        carts = []
        for _ in range(count):
            response = self.client.post(BASE_URL)
            self.assertEqual(
                response.status_code,
                status.HTTP_201_CREATED,
                "Could not create test cart",
            )
            carts.append(response.get_json())
        return carts

    def _add_item(self, cart_id: str, payload: dict = None) -> dict:
        """Add an item through the API and return the cart body"""
        response = self.client.post(
            f"{BASE_URL}/{cart_id}/items", json=payload or LAPTOP
        )
        self.assertEqual(
            response.status_code, status.HTTP_201_CREATED, response.get_json()
        )
        return response.get_json()

    def _use_limits(self, **limits):
        """Swap in tiers with the given limits and a stopped clock"""
        rate_limiter.tiers = TieredRateLimiter.build_tiers(limits, lambda: FROZEN_TIME)

    ######################################################################
    #  P L A C E   T E S T   C A S E S   H E R E
    ######################################################################

    def test_health_check(self):
        """It should return health status without rate limit headers"""
        resp = self.client.get("/health")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.get_json(), {"status": "OK"})
        self.assertNotIn("X-RateLimit-Limit", resp.headers)

    def test_index(self):
        """It should return service metadata at the root URL"""
        resp = self.client.get("/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        data = resp.get_json()
        self.assertEqual(data["name"], "Cart REST API Service")
        self.assertEqual(data["version"], "1.0.0")
        self.assertEqual(data["paths"]["carts"], BASE_URL)

    # ----------------------------------------------------------
    # TEST CREATE
    # ----------------------------------------------------------
    def test_create_cart(self):
        """It should Create a new, empty Cart"""
        response = self.client.post(BASE_URL)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        new_cart = response.get_json()
        self.assertIsNotNone(new_cart["id"])
        self.assertEqual(new_cart["items"], [])
        self.assertEqual(new_cart["total"], 0.0)
        self.assertIsNotNone(new_cart["createdAt"])

        # Make sure location header is set and works
        location = response.headers.get("Location", None)
        self.assertIsNotNone(location)
        response = self.client.get(location)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.get_json()["id"], new_cart["id"])

    # ----------------------------------------------------------
    # TEST READ
    # ----------------------------------------------------------
    def test_get_cart(self):
        """It should Read a single Cart with its items"""
        cart = self._create_carts()[0]
        self._add_item(cart["id"])
        response = self.client.get(f"{BASE_URL}/{cart['id']}")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.get_json()
        self.assertEqual(data["id"], cart["id"])
        self.assertEqual(len(data["items"]), 1)
        self.assertEqual(data["total"], 1999.98)

    def test_get_cart_not_found(self):
        """It should not Read a Cart that is not found"""
        response = self.client.get(f"{BASE_URL}/550e8400-e29b-41d4-a716-446655440000")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        data = response.get_json()
        self.assertEqual(data["status"], 404)
        self.assertEqual(data["code"], "CART_NOT_FOUND")
        self.assertEqual(data["message"], "Cart not found")
        self.assertEqual(len(cart_cache.cache), 0)

    def test_get_cart_with_list_key_id(self):
        """It should not serve a cached list page as a Cart"""
        self._create_carts()
        self.client.get(BASE_URL)
        self.assertIn(cart_list_key(1, 9999), cart_cache.cache)
        response = self.client.get(f"{BASE_URL}/list_1_9999")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.get_json()["code"], "CART_NOT_FOUND")

    # ----------------------------------------------------------
    # TEST LIST
    # ----------------------------------------------------------
    def test_list_carts(self):
        """It should Get a list of Cart summaries"""
        carts = self._create_carts(3)
        self._add_item(carts[0]["id"])
        response = self.client.get(BASE_URL)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.get_json()
        self.assertEqual(len(data), 3)
        for summary in data:
            self.assertNotIn("items", summary)
            self.assertIn("total", summary)
        totals = {summary["id"]: summary["total"] for summary in data}
        self.assertEqual(totals[carts[0]["id"]], 1999.98)

    def test_list_carts_with_items(self):
        """It should include items when asked to expand them"""
        carts = self._create_carts(2)
        self._add_item(carts[1]["id"])
        self.client.get(BASE_URL)
        response = self.client.get(f"{BASE_URL}?expand=items")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.get_json()
        self.assertTrue(all("items" in cart for cart in data))
        items = {cart["id"]: cart["items"] for cart in data}
        self.assertEqual(items[carts[1]["id"]][0]["productName"], "Laptop")

    def test_list_carts_paginated(self):
        """It should return one page of Carts"""
        self._create_carts(5)
        response = self.client.get(f"{BASE_URL}?page=2&limit=2")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.get_json()), 2)
        response = self.client.get(f"{BASE_URL}?page=3&limit=2")
        self.assertEqual(len(response.get_json()), 1)
        self.assertIn(cart_list_key(2, 2), cart_cache.cache)
        self.assertIn(cart_list_key(3, 2), cart_cache.cache)

    def test_list_carts_bad_page(self):
        """It should reject pages and limits that are not positive integers"""
        for query in ("page=0", "page=abc", "limit=0", "limit=-5"):
            response = self.client.get(f"{BASE_URL}?{query}")
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, query)
            self.assertEqual(response.get_json()["code"], "BAD_REQUEST")

    # ----------------------------------------------------------
    # TEST ADD ITEM
    # ----------------------------------------------------------
    def test_add_item(self):
        """It should add an Item and return the Cart"""
        cart = self._create_carts()[0]
        data = self._add_item(cart["id"])
        self.assertEqual(data["id"], cart["id"])
        self.assertEqual(data["total"], 1999.98)
        item = data["items"][0]
        self.assertEqual(item["productId"], 123)
        self.assertEqual(item["productName"], "Laptop")
        self.assertEqual(item["category"], "Electronics")
        self.assertEqual(item["sku"], "LAP-001")
        self.assertEqual(item["price"], 999.99)
        self.assertEqual(item["quantity"], 2)
        self.assertEqual(item["subtotal"], 1999.98)
        self.assertIsNotNone(item["addedAt"])
        self.assertIsNotNone(data["updatedAt"])

    def test_add_item_to_missing_cart(self):
        """It should not add an Item to a Cart that does not exist"""
        response = self.client.post(f"{BASE_URL}/missing/items", json=LAPTOP)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.get_json()["code"], "CART_NOT_FOUND")

    def test_add_item_missing_fields(self):
        """It should name every missing field"""
        cart = self._create_carts()[0]
        response = self.client.post(
            f"{BASE_URL}/{cart['id']}/items",
            json={"productName": "Laptop", "quantity": 1},
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        data = response.get_json()
        self.assertEqual(data["code"], "PRODUCTID_REQUIRED|PRICE_REQUIRED")
        self.assertEqual(data["message"], "ProductId required | Price required")

    def test_add_item_wrong_types(self):
        """It should report fields with the wrong JSON type"""
        cart = self._create_carts()[0]
        payload = dict(LAPTOP, productId="123", price="cheap")
        response = self.client.post(f"{BASE_URL}/{cart['id']}/items", json=payload)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        data = response.get_json()
        self.assertEqual(data["code"], "VALIDATION_ERROR")
        self.assertEqual(
            data["details"]["productId"],
            {"message": 'The type must be "int", "string" given.', "code": "INVALID_TYPE"},
        )
        self.assertEqual(data["details"]["price"]["code"], "INVALID_TYPE")

    def test_add_item_invalid_values(self):
        """It should reject a zero quantity and a negative price"""
        cart = self._create_carts()[0]
        payload = dict(LAPTOP, quantity=0, price=-10.00)
        response = self.client.post(f"{BASE_URL}/{cart['id']}/items", json=payload)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        data = response.get_json()
        self.assertEqual(data["code"], "VALIDATION_ERROR")
        self.assertEqual(
            data["details"]["quantity"],
            {"message": "Quantity must be greater than 0", "code": "INVALID_VALUE"},
        )
        self.assertEqual(data["details"]["price"]["message"], "Price cannot be negative")
        self.assertEqual(len(Cart.find(cart["id"]).items), 0)

    def test_add_item_out_of_range_price(self):
        """It should answer 400 for infinite and oversized prices"""
        cart = self._create_carts()[0]
        for price in (1e30, float("inf")):
            payload = dict(LAPTOP, price=price)
            response = self.client.post(f"{BASE_URL}/{cart['id']}/items", json=payload)
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
            data = response.get_json()
            self.assertEqual(data["code"], "VALIDATION_ERROR")
            self.assertIn("price", data["details"])
        self.assertEqual(len(Cart.find(cart["id"]).items), 0)

    def test_add_item_not_an_object(self):
        """It should reject a JSON body that is not an object"""
        cart = self._create_carts()[0]
        response = self.client.post(
            f"{BASE_URL}/{cart['id']}/items",
            data="[1, 2]",
            content_type="application/json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        data = response.get_json()
        self.assertEqual(data["code"], "BAD_REQUEST")
        self.assertEqual(data["message"], "Request body must be a JSON object")

    def test_add_item_bad_json(self):
        """It should reject a body that is not JSON"""
        cart = self._create_carts()[0]
        response = self.client.post(
            f"{BASE_URL}/{cart['id']}/items",
            data="{not json",
            content_type="application/json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.get_json()["code"], "BAD_REQUEST")

    def test_add_item_wrong_content_type(self):
        """It should not add an Item with the wrong Content-Type"""
        cart = self._create_carts()[0]
        response = self.client.post(
            f"{BASE_URL}/{cart['id']}/items", data="hello", content_type="text/html"
        )
        self.assertEqual(response.status_code, status.HTTP_415_UNSUPPORTED_MEDIA_TYPE)
        data = response.get_json()
        self.assertEqual(data["code"], "UNSUPPORTED_MEDIA_TYPE")
        self.assertEqual(data["message"], "Content-Type must be application/json")

    def test_add_item_no_content_type(self):
        """It should not add an Item without a Content-Type"""
        cart = self._create_carts()[0]
        response = self.client.post(f"{BASE_URL}/{cart['id']}/items")
        self.assertEqual(response.status_code, status.HTTP_415_UNSUPPORTED_MEDIA_TYPE)

    # ----------------------------------------------------------
    # TEST UPDATE ITEM
    # ----------------------------------------------------------
    def test_update_item(self):
        """It should change the quantity of an Item"""
        cart = self._create_carts()[0]
        item = self._add_item(cart["id"])["items"][0]
        response = self.client.patch(
            f"{BASE_URL}/{cart['id']}/items/{item['id']}", json={"quantity": 5}
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.get_json()
        self.assertEqual(data["id"], item["id"])
        self.assertEqual(data["quantity"], 5)
        self.assertEqual(data["price"], 999.99)
        self.assertEqual(data["subtotal"], 4999.95)
        self.assertIsNotNone(data["updatedAt"])

    def test_update_item_missing_quantity(self):
        """It should require a quantity"""
        cart = self._create_carts()[0]
        item = self._add_item(cart["id"])["items"][0]
        response = self.client.patch(
            f"{BASE_URL}/{cart['id']}/items/{item['id']}", json={}
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        data = response.get_json()
        self.assertEqual(data["code"], "QUANTITY_REQUIRED")
        self.assertEqual(data["message"], "Quantity required")

    def test_update_item_bad_quantity(self):
        """It should reject zero and non-integer quantities"""
        cart = self._create_carts()[0]
        item = self._add_item(cart["id"])["items"][0]
        url = f"{BASE_URL}/{cart['id']}/items/{item['id']}"
        response = self.client.patch(url, json={"quantity": 0})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.get_json()["code"], "VALIDATION_ERROR")
        response = self.client.patch(url, json={"quantity": "many"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(
            response.get_json()["details"]["quantity"]["code"], "INVALID_TYPE"
        )
        self.assertEqual(CartItem.find(item["id"]).quantity, 2)

    def test_update_item_not_found(self):
        """It should not update an Item that is not in the Cart"""
        cart = self._create_carts()[0]
        response = self.client.patch(
            f"{BASE_URL}/{cart['id']}/items/missing", json={"quantity": 2}
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.get_json()["code"], "ITEM_NOT_FOUND")

        # validation comes before the item lookup
        response = self.client.patch(
            f"{BASE_URL}/{cart['id']}/items/missing", json={"quantity": 0}
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_item_of_other_cart(self):
        """It should not update an Item through another Cart"""
        first, second = self._create_carts(2)
        item = self._add_item(first["id"])["items"][0]
        response = self.client.patch(
            f"{BASE_URL}/{second['id']}/items/{item['id']}", json={"quantity": 3}
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.get_json()["code"], "ITEM_NOT_FOUND")

    # ----------------------------------------------------------
    # TEST DELETE ITEM
    # ----------------------------------------------------------
    def test_delete_item(self):
        """It should Delete an Item"""
        cart = self._create_carts()[0]
        item = self._add_item(cart["id"])["items"][0]
        url = f"{BASE_URL}/{cart['id']}/items/{item['id']}"
        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(len(response.data), 0)
        self.assertIsNone(CartItem.find(item["id"]))

        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.get_json()["code"], "ITEM_NOT_FOUND")

    def test_delete_item_missing_cart(self):
        """It should not Delete an Item of a missing Cart"""
        response = self.client.delete(f"{BASE_URL}/missing/items/1")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.get_json()["code"], "CART_NOT_FOUND")

    def test_laptop_totals(self):
        """It should follow the cart total through add, update and delete"""
        cart_id = self._create_carts()[0]["id"]
        url = f"{BASE_URL}/{cart_id}"
        item_id = self._add_item(cart_id)["items"][0]["id"]
        self.assertEqual(self.client.get(url).get_json()["total"], 1999.98)

        self.client.patch(f"{url}/items/{item_id}", json={"quantity": 5})
        self.assertEqual(self.client.get(url).get_json()["total"], 4999.95)

        self.client.delete(f"{url}/items/{item_id}")
        data = self.client.get(url).get_json()
        self.assertEqual(data["total"], 0.0)
        self.assertEqual(data["items"], [])

    # ----------------------------------------------------------
    # TEST CACHING
    # ----------------------------------------------------------
    def test_reads_are_cached(self):
        """It should serve repeated reads from the cache"""
        cart = self._create_carts()[0]
        self.client.get(f"{BASE_URL}/{cart['id']}")
        self.assertIn(cart_key(cart["id"]), cart_cache.cache)
        with patch("service.resources.carts.Cart.find") as find_mock:
            response = self.client.get(f"{BASE_URL}/{cart['id']}")
            find_mock.assert_not_called()
        self.assertEqual(response.get_json()["id"], cart["id"])

    def test_create_cart_invalidates_lists(self):
        """It should drop cached list pages when a Cart is created"""
        self._create_carts()
        self.assertEqual(len(self.client.get(BASE_URL).get_json()), 1)
        self.assertIn(cart_list_key(1, 9999), cart_cache.cache)
        self._create_carts()
        self.assertNotIn(cart_list_key(1, 9999), cart_cache.cache)
        self.assertEqual(len(self.client.get(BASE_URL).get_json()), 2)

    def test_item_writes_invalidate_cart(self):
        """It should drop the cached Cart and lists after item writes"""
        first, second = self._create_carts(2)
        self.client.get(f"{BASE_URL}/{first['id']}")
        self.client.get(f"{BASE_URL}/{second['id']}")
        self.client.get(BASE_URL)

        self._add_item(first["id"])
        self.assertNotIn(cart_key(first["id"]), cart_cache.cache)
        self.assertIn(cart_key(second["id"]), cart_cache.cache)
        self.assertNotIn(cart_list_key(1, 9999), cart_cache.cache)

        data = self.client.get(f"{BASE_URL}/{first['id']}").get_json()
        self.assertEqual(len(data["items"]), 1)

    @patch("service.resources.carts.Cart.all_paginated")
    def test_list_failure_not_cached(self, paginated_mock):
        """It should return 500 and cache nothing when the query fails"""
        paginated_mock.side_effect = RuntimeError("database is gone")
        response = self.client.get(BASE_URL)
        self.assertEqual(
            response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR
        )
        data = response.get_json()
        self.assertEqual(data["code"], "INTERNAL_SERVER_ERROR")
        self.assertEqual(data["message"], "An unexpected error occurred.")
        self.assertNotIn(cart_list_key(1, 9999), cart_cache.cache)

    # ----------------------------------------------------------
    # TEST RATE LIMITING
    # ----------------------------------------------------------
    def test_rate_limit_headers(self):
        """It should report the global tier on every API response"""
        self._use_limits()
        response = self.client.get(BASE_URL)
        self.assertEqual(response.headers["X-RateLimit-Limit"], "100")
        self.assertEqual(response.headers["X-RateLimit-Remaining"], "99")
        self.assertIn("X-RateLimit-Reset", response.headers)
        response = self.client.post(BASE_URL)
        self.assertEqual(response.headers["X-RateLimit-Remaining"], "98")

    def test_write_limit_exceeded(self):
        """It should answer 429 once the write tier is used up"""
        self._use_limits(RATE_LIMIT_WRITE="2/60")
        self._create_carts(2)
        response = self.client.post(BASE_URL)
        self.assertEqual(response.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
        data = response.get_json()
        self.assertEqual(data["status"], 429)
        self.assertEqual(data["code"], "RATE_LIMIT_EXCEEDED")
        self.assertEqual(
            data["message"], "Write API rate limit exceeded. Please try again later."
        )
        # headers still describe the global tier
        self.assertEqual(response.headers["X-RateLimit-Limit"], "100")
        self.assertEqual(response.headers["X-RateLimit-Remaining"], "97")
        self.assertIn("Retry-After", response.headers)
        self.assertEqual(len(Cart.all()), 2)

        # reads use a different tier
        response = self.client.get(BASE_URL)
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_cart_modify_limit_exceeded(self):
        """It should limit item writes separately from cart writes"""
        self._use_limits(RATE_LIMIT_CART_MODIFY="1/60")
        cart = self._create_carts()[0]
        self._add_item(cart["id"])
        response = self.client.post(f"{BASE_URL}/{cart['id']}/items", json=LAPTOP)
        self.assertEqual(response.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
        self.assertEqual(
            response.get_json()["message"],
            "Cart modification rate limit exceeded. Please slow down.",
        )
        self.assertEqual(len(Cart.find(cart["id"]).items), 1)
        # creating a cart is not an item write
        self._create_carts()

    def test_global_limit_exceeded(self):
        """It should report the global reset time on a global rejection"""
        self._use_limits(RATE_LIMIT_GLOBAL="1/60")
        self.client.get(BASE_URL)
        response = self.client.get(BASE_URL)
        self.assertEqual(response.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
        self.assertEqual(response.headers["X-RateLimit-Limit"], "1")
        self.assertEqual(response.headers["X-RateLimit-Remaining"], "0")
        self.assertEqual(
            response.headers["Retry-After"], response.headers["X-RateLimit-Reset"]
        )
        # the health check is never limited
        self.assertEqual(self.client.get("/health").status_code, status.HTTP_200_OK)

    def test_rate_limit_disabled(self):
        """It should not limit anything when disabled"""
        self._use_limits(RATE_LIMIT_GLOBAL="1/60")
        response = self.client.get(BASE_URL)
        self.assertIn("X-RateLimit-Limit", response.headers)
        rate_limiter.enabled = False
        try:
            for _ in range(3):
                response = self.client.get(BASE_URL)
                self.assertEqual(response.status_code, status.HTTP_200_OK)
                self.assertNotIn("X-RateLimit-Limit", response.headers)
        finally:
            rate_limiter.enabled = True

    # ----------------------------------------------------------
    # TEST ERRORS
    # ----------------------------------------------------------
    def test_method_not_allowed(self):
        """It should not allow an illegal method call"""
        response = self.client.put(BASE_URL, json={})
        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
        self.assertEqual(response.get_json()["code"], "METHOD_NOT_ALLOWED")

    def test_unknown_route(self):
        """It should answer unknown URLs with a JSON 404"""
        response = self.client.get("/no/such/page")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.get_json()["code"], "NOT_FOUND")
