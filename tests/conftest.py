"""Fixtures for testing mediaplayerctl without a session bus."""

import logging

import pytest

from mediaplayerctl.lib import config

DBUS_INTERFACE = "org.freedesktop.DBus"
PROPERTIES_INTERFACE = "org.freedesktop.DBus.Properties"
PLAYER_INTERFACE = "org.mpris.MediaPlayer2.Player"


@pytest.fixture(name="caplog")
def caplog_fixture(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """Set log level to debug for tests using the caplog fixture."""
    caplog.set_level(logging.DEBUG)
    return caplog


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the config search at an empty home so no real config leaks in."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("MEDIAPLAYERCTL_CONFIG", raising=False)
    config._config = None
    yield tmp_path
    config._config = None


class FakeObject:
    """Stands in for a dbus-python ProxyObject: hands out bound methods."""

    def __init__(self, bus, name):
        self.bus = bus
        self.name = name

    def get_dbus_method(self, member, dbus_interface=None):
        def method(*args, **kwargs):
            self.bus.calls.append((self.name, dbus_interface, member, args, kwargs))
            return self.bus.handle(self.name, dbus_interface, member, args)
        return method


class FakeBus:
    """Minimal session bus.

    *players* maps a bus name to its PlaybackStatus reply.  A reply that is an
    exception instance is raised from Get instead.
    """

    def __init__(self, players=None, *, others=(), list_error=None,
                 unreachable=(), failing=(), gone=()):
        from dbus.exceptions import DBusException

        self.DBusException = DBusException
        self.players = dict(players or {})
        self.others = list(others)
        self.list_error = list_error
        self.unreachable = set(unreachable)
        self.gone = set(gone)
        self.owners = {f":1.{i}": name for i, name in enumerate(self.players, start=100)}
        self.failing = set(failing)
        self.calls = []
        self.requested = []
        self.sent = []

    def get_name_owner(self, name):
        if name in self.gone:
            raise self.DBusException(
                f"Could not get owner of name '{name}': no such name",
                name="org.freedesktop.DBus.Error.NameHasNoOwner")
        for owner, player in self.owners.items():
            if player == name:
                return owner
        raise AssertionError(f"unexpected owner lookup for {name}")

    def get_object(self, name, path, introspect=True):
        self.requested.append(name)
        name = self.owners.get(name, name)
        if name in self.unreachable:
            raise self.DBusException(f"Failed to create proxy for {name}")
        return FakeObject(self, name)

    def handle(self, name, interface, member, args):
        if interface == DBUS_INTERFACE and member == "ListNames":
            if self.list_error:
                raise self.DBusException(self.list_error)
            return [DBUS_INTERFACE, ":1.42", *self.others, *self.players]
        if interface == PROPERTIES_INTERFACE and member == "Get":
            assert args == (PLAYER_INTERFACE, "PlaybackStatus")
            reply = self.players[name]
            if isinstance(reply, Exception):
                raise reply
            return reply
        if interface == PLAYER_INTERFACE:
            if (name, member) in self.failing:
                raise self.DBusException(f"{member} failed")
            self.sent.append((name, member))
            return None
        raise AssertionError(f"unexpected call {interface}.{member} on {name}")


@pytest.fixture
def make_bus():
    """Factory for FakeBus instances (needs dbus-python for its exceptions)."""
    pytest.importorskip("dbus")
    return FakeBus
