"""Step definitions for cart API BDD scenarios."""

# pylint: disable=no-member,not-callable
# The behave decorators (@given, @when, @then) are not recognized by pylint
# but they work correctly at runtime

from __future__ import annotations
from decimal import Decimal

from behave import given, when, then

from features.environment import WAIT_TIMEOUT, create_cart_via_api, _api_url

RATE_LIMIT_HEADERS = ("X-RateLimit-Limit", "X-RateLimit-Remaining", "X-RateLimit-Reset")


def cart_url(context, cart_id: str | None = None) -> str:
    return _api_url(context, f"carts/{cart_id or context.cart['id']}")


def as_money(value) -> Decimal:
    return Decimal(str(value)).quantize(Decimal("0.01"))


@given("the cart service is running")
def step_service_running(context):
    response = context.session.get(context.base_url + "/health", timeout=WAIT_TIMEOUT)
    assert response.status_code == 200, response.text
    assert response.json()["status"] == "OK"


@given("an empty cart")
def step_empty_cart(context):
    context.cart = create_cart_via_api(context)


@when("I create a new cart")
def step_create_cart(context):
    context.response = context.session.post(_api_url(context, "carts"), timeout=WAIT_TIMEOUT)
    context.cart = context.response.json()


@when('I add "{quantity:d}" of product "{product_id:d}" named "{name}" at "{price}"')
def step_add_item(context, quantity, product_id, name, price):
    payload = {
        "productId": product_id,
        "productName": name,
        "price": float(price),
        "quantity": quantity,
    }
    context.response = context.session.post(
        cart_url(context) + "/items", json=payload, timeout=WAIT_TIMEOUT
    )
    if context.response.status_code == 201:
        context.cart = context.response.json()
        context.item = context.cart["items"][-1]


@when('I change the quantity of that item to "{quantity:d}"')
def step_update_item(context, quantity):
    context.response = context.session.patch(
        f"{cart_url(context)}/items/{context.item['id']}",
        json={"quantity": quantity},
        timeout=WAIT_TIMEOUT,
    )


@when("I remove that item")
def step_remove_item(context):
    context.response = context.session.delete(
        f"{cart_url(context)}/items/{context.item['id']}", timeout=WAIT_TIMEOUT
    )


@when('I read the cart "{cart_id}"')
def step_read_cart(context, cart_id):
    context.response = context.session.get(cart_url(context, cart_id), timeout=WAIT_TIMEOUT)


@when("I list the carts")
def step_list_carts(context):
    context.response = context.session.get(_api_url(context, "carts"), timeout=WAIT_TIMEOUT)


@then('the response status should be "{code:d}"')
def step_status(context, code):
    assert context.response.status_code == code, (
        f"Expected {code}, got {context.response.status_code}: {context.response.text}"
    )


@then('the cart should have "{count:d}" items')
def step_item_count(context, count):
    assert len(context.cart["items"]) == count


@then('the cart total should be "{total}"')
def step_cart_total(context, total):
    assert as_money(context.cart["total"]) == as_money(total), context.cart


@then('reading the cart shows a total of "{total}"')
def step_read_total(context, total):
    response = context.session.get(cart_url(context), timeout=WAIT_TIMEOUT)
    assert response.status_code == 200, response.text
    assert as_money(response.json()["total"]) == as_money(total), response.json()


@then('the error code should be "{code}"')
def step_error_code(context, code):
    assert context.response.json()["code"] == code, context.response.text


@then("the response should carry rate limit headers")
def step_rate_limit_headers(context):
    for header in RATE_LIMIT_HEADERS:
        assert header in context.response.headers, f"missing {header}"
