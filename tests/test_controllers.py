"""Tests for controllers and the controller registry."""

import pytest

from smartdispatch import Controller, ControllerRegistry, RoutedClass, Router, action, route
from smartdispatch.http.controllers import controller_key


class Users(Controller):
    controller_name = "User"

    @action()
    def show(self, ctx):
        return "show"

    @action(name="list")
    def list_all(self, ctx):
        return "list"

    def helper(self):
        return "not an action"


class Reports(Controller):
    @action()
    def daily(self, ctx):
        return "daily"


class Plain(RoutedClass):
    def __init__(self):
        self.api = Router(self, name="api")

    @route("api")
    def show(self, ctx):
        return "plain"


def test_controller_discovers_marked_actions_only():
    users = Users()
    assert set(users.actions.names()) == {"show", "list"}
    assert "helper" not in users.actions


def test_controller_prefix_is_stripped():
    class Admin(Controller):
        @action()
        def do_reset(self, ctx):
            return "reset"

    admin = Admin(prefix="do_")
    assert admin.actions.names() == ("reset",)


def test_controller_plugins_are_attached():
    users = Users(plugins=["logging", ("pydantic", {"enabled": False})])
    assert [p.name for p in users.actions.plugins] == ["logging", "pydantic"]
    assert users.actions.pydantic.configuration() == {"enabled": False}


def test_registry_names_default_to_controller_name_then_singular_class_name():
    registry = ControllerRegistry([Users(), Reports()])
    assert registry.names() == ("User", "Report")
    assert "User" in registry
    assert len(registry) == 2


def test_registry_explicit_name():
    registry = ControllerRegistry()
    reports = registry.add(Reports(), name="Daily")
    assert registry.get("Daily") is reports
    assert registry.get("Report") is None


def test_registry_rejects_non_routed_objects():
    with pytest.raises(TypeError):
        ControllerRegistry().add(object())


def test_registry_rejects_name_collisions():
    registry = ControllerRegistry()
    first = Users()
    registry.add(first)
    registry.add(first)
    with pytest.raises(ValueError):
        registry.add(Users())


def test_resolve_and_has_action():
    registry = ControllerRegistry([Users()])
    assert registry.has_action("User", "show")
    assert not registry.has_action("User", "helper")
    assert not registry.has_action("Nobody", "show")
    assert registry.resolve("User", "list")(None) == "list"
    assert registry.resolve("User", "missing") is None
    assert registry.resolve("Nobody", "show") is None


def test_routed_class_without_actions_router_has_no_actions():
    registry = ControllerRegistry([Plain()])
    assert not registry.has_action("Plain", "show")
    assert registry.resolve("Plain", "show") is None


def test_singular_and_plural_class_names_share_a_key():
    class Invoice(Controller):
        pass

    class Invoices(Controller):
        pass

    assert controller_key(Invoice()) == controller_key(Invoices()) == "Invoice"
    with pytest.raises(ValueError):
        ControllerRegistry([Invoice(), Invoices()])


def test_controller_actions_are_overridable_in_subclasses():
    class Admins(Users):
        controller_name = None

        @action()
        def show(self, ctx):
            return "admin show"

    registry = ControllerRegistry([Admins()])
    assert registry.resolve("Admin", "show")(None) == "admin show"
    assert registry.resolve("Admin", "list")(None) == "list"
