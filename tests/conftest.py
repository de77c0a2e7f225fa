"""Shared fixtures for rule engine tests."""

import pytest

from nested_rules.config import Settings


HOMEWORK = {"payload": "doing homework", "effort": "im getting sick"}
BOOK = {"payload": "lets help someone", "effort": "finding the book"}


@pytest.fixture
def settings():
    """Settings independent of the process environment."""
    return Settings(_env_file=None, default_key="default", trace_enabled=True, settle_awaitables=True)


@pytest.fixture
def human_rules():
    """Rules from the basic usage example."""
    return {
        "is_human": {
            "is_kind": "book",
            "is_smart": "homework",
        },
        "default": "homework",
    }


@pytest.fixture
def human_functions():
    """Predicates and actions for human_rules."""
    return {
        "default": lambda _: True,
        "is_human": lambda inputs: inputs["type"] == "human",
        "is_kind": lambda inputs: inputs["kindness"] > 300,
        "is_smart": lambda inputs: inputs["intelligence"] > 5,
        "book": lambda _: dict(BOOK),
        "homework": lambda _: dict(HOMEWORK),
    }


@pytest.fixture
def access_rules():
    """Deeply nested access rules."""
    return {
        "is_customer": {
            "has_account": {
                "account_active": {
                    "has_subscription": "premium_content",
                    "default": "basic_content",
                },
                "account_suspended": "account_reactivation",
                "account_closed": "signup_offer",
            },
            "is_guest": "guest_content",
        },
        "is_admin": {
            "has_full_access": "admin_dashboard",
            "has_limited_access": "limited_dashboard",
        },
        "is_system": "system_operations",
        "default": "public_content",
    }


@pytest.fixture
def access_functions():
    """Predicates and actions for access_rules."""
    return {
        "default": lambda _: True,
        "is_customer": lambda i: i.get("user_type") == "customer",
        "is_admin": lambda i: i.get("user_type") == "admin",
        "is_system": lambda i: i.get("user_type") == "system",
        "has_account": lambda i: i.get("has_account") is True,
        "is_guest": lambda i: i.get("has_account") is False,
        "account_active": lambda i: i.get("account_status") == "active",
        "account_suspended": lambda i: i.get("account_status") == "suspended",
        "account_closed": lambda i: i.get("account_status") == "closed",
        "has_subscription": lambda i: i.get("subscription_level") == "premium",
        "has_full_access": lambda i: i.get("access_level") == "full",
        "has_limited_access": lambda i: i.get("access_level") == "limited",
        "premium_content": lambda _: {"content": "premium", "features": ["streaming", "downloads", "exclusive"]},
        "basic_content": lambda _: {"content": "basic", "features": ["streaming"]},
        "guest_content": lambda _: {"content": "guest", "features": ["previews"]},
        "account_reactivation": lambda _: {"content": "reactivation", "action": "reactivate"},
        "signup_offer": lambda _: {"content": "signup", "action": "offer"},
        "admin_dashboard": lambda _: {"content": "admin", "access": "full"},
        "limited_dashboard": lambda _: {"content": "admin", "access": "limited"},
        "system_operations": lambda _: {"content": "system", "operations": ["maintenance", "backup"]},
        "public_content": lambda _: {"content": "public", "features": []},
    }
