"""Shared BDD fixtures and step definitions for the commerce domain."""

import asyncio

import pytest
from commerce.shared.exceptions import TransactionFailure
from pytest_bdd import given, parsers, then, when


@pytest.fixture()
def outcome():
    """Container for results captured by When steps."""
    return {}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("an empty cart")
def empty_cart(cart):
    assert cart.is_empty()


@given(parsers.cfparse('the cart holds a line for "{product_id}" priced {price:d}'))
def cart_holds_line(cart, make_line, product_id, price):
    cart.add_item(make_line(product_id, price=price))


@given("the customer is signed in")
def customer_signed_in(session):
    session.login("customer@kalakart.demo", "customer123")


@given(parsers.cfparse("the artist is signed in with earnings {earnings:d} and pending payout {pending:d}"))
def artist_signed_in(session, earnings, pending):
    user = session.login("artist@kalakart.demo", "artist123")
    assert user.earnings == earnings
    assert user.pending_payout == pending


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse("the {who} pays with failure simulation {flag}"))
def pay(orchestrator, address, outcome, who, flag):
    try:
        outcome["transaction_id"] = asyncio.run(orchestrator.checkout(address, simulate_failure=flag == "on"))
    except TransactionFailure as exc:
        outcome["failure"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the cart total is {total:d}"))
def cart_total_is(cart, total):
    assert cart.get_total().total == total


@then(parsers.cfparse("the cart has {count:d} line"))
def cart_has_n_lines_singular(cart, count):
    assert len(cart.items) == count


@then(parsers.cfparse("the cart has {count:d} lines"))
def cart_has_n_lines(cart, count):
    assert len(cart.items) == count
