"""
Tests for extracting payer and capture details from PayPal order payloads.
"""

from payments.paypal_models import (
    Order,
    last_capture,
    payer_email,
    payer_name,
    truncate,
)


def test_payer_fields_from_full_payload():
    order = Order.model_validate(
        {
            "id": "ORDER1",
            "status": "COMPLETED",
            "payment_source": {
                "paypal": {
                    "email_address": "buyer@example.com",
                    "name": {"given_name": "Jane", "surname": "Buyer"},
                    "account_id": "QYR5Z8XDVJNXQ",
                }
            },
        }
    )
    assert payer_email(order) == "buyer@example.com"
    assert payer_name(order) == "Jane Buyer"


def test_payer_name_skips_missing_parts():
    only_given = Order.model_validate(
        {"payment_source": {"paypal": {"name": {"given_name": "Jane"}}}}
    )
    only_surname = Order.model_validate(
        {"payment_source": {"paypal": {"name": {"given_name": "", "surname": "Buyer"}}}}
    )
    assert payer_name(only_given) == "Jane"
    assert payer_name(only_surname) == "Buyer"


def test_payer_fields_absent_without_paypal_source():
    card_order = Order.model_validate({"payment_source": {"card": {"last_digits": "1111"}}})
    bare = Order.model_validate({"id": "X"})
    for order in (card_order, bare):
        assert payer_email(order) == ""
        assert payer_name(order) == ""


def test_last_capture_wins_across_units():
    order = Order.model_validate(
        {
            "purchase_units": [
                {
                    "payments": {
                        "captures": [
                            {"id": "CAP1", "amount": {"currency_code": "USD", "value": "1.00"}},
                            {"id": "CAP2", "amount": {"currency_code": "USD", "value": "2.00"}},
                        ]
                    }
                },
                {"payments": None},
                {
                    "payments": {
                        "captures": [
                            {"id": "CAP3", "amount": {"currency_code": "EUR", "value": "3.00"}}
                        ]
                    }
                },
            ]
        }
    )
    assert last_capture(order) == ("CAP3", "3.00", "EUR")


def test_last_capture_keeps_earlier_amount_when_later_capture_has_none():
    order = Order.model_validate(
        {
            "purchase_units": [
                {
                    "payments": {
                        "captures": [
                            {"id": "CAP1", "amount": {"currency_code": "USD", "value": "5.00"}},
                            {"id": "CAP2"},
                        ]
                    }
                }
            ]
        }
    )
    assert last_capture(order) == ("CAP2", "5.00", "USD")


def test_last_capture_empty_when_no_captures():
    assert last_capture(Order(id="X", status="PENDING")) == ("", "", "")


def test_truncate_bounds_to_paypal_limit():
    assert truncate("x" * 200) == "x" * 127
    assert truncate(None) == ""
    assert truncate("short") == "short"
