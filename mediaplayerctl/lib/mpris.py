# mediaplayerctl
# SPDX-License-Identifier: GPL-3.0-or-later

"""
MprisBus: session bus plumbing for talking to MPRIS media players.

Three blocking steps, each one bus round trip per item:

    bus = MprisBus.connect()
    players = bus.list_players()        # org.mpris.MediaPlayer2.* names
    states  = bus.get_states(players)   # {name: PlaybackState}
    bus.dispatch({name: "Pause"})       # call org.mpris.MediaPlayer2.Player.Pause

Failing to build a proxy is fatal for the step that needed it and raises
ProxyError carrying the exit status for that step.  A failing call, or a
player that left the bus since discovery, only costs that one player: it is
logged and skipped.  Player names are resolved to their unique owner before
the proxy is built, so a player that quit is never activated again.
"""

import logging

import dbus
from dbus.exceptions import DBusException

from .actions import PlaybackState

log = logging.getLogger(__name__)

DBUS_NAME = "org.freedesktop.DBus"
DBUS_PATH = "/org/freedesktop/DBus"
DBUS_INTERFACE = "org.freedesktop.DBus"
PROPERTIES_INTERFACE = "org.freedesktop.DBus.Properties"

MPRIS_PREFIX = "org.mpris.MediaPlayer2."
MPRIS_PATH = "/org/mpris/MediaPlayer2"
PLAYER_INTERFACE = "org.mpris.MediaPlayer2.Player"

# A player that quit after ListNames answers with one of these
NAME_GONE_ERRORS = {
    "org.freedesktop.DBus.Error.NameHasNoOwner",
    "org.freedesktop.DBus.Error.ServiceUnknown",
}

# Exit statuses, one per fatal condition
EXIT_BUS_UNAVAILABLE = 1
EXIT_PROXY_DISCOVERY = 2
EXIT_PROXY_STATE = 3
EXIT_PROXY_DISPATCH = 4


class MediaPlayerCtlError(Exception):
    """Fatal error; ``exit_code`` is the process exit status to use."""

    exit_code = 1


class BusUnavailableError(MediaPlayerCtlError):
    exit_code = EXIT_BUS_UNAVAILABLE


class ProxyError(MediaPlayerCtlError):
    """A proxy to the bus daemon or to a player could not be created."""

    def __init__(self, message: str, exit_code: int):
        super().__init__(message)
        self.exit_code = exit_code


def _status_text(reply) -> str | None:
    """Extract the single status string from a PlaybackStatus reply."""
    if isinstance(reply, str):
        return str(reply)
    if isinstance(reply, (list, tuple)):
        if len(reply) != 1 or not isinstance(reply[0], str):
            return None
        return str(reply[0])
    return None


class MprisBus:
    """Blocking MPRIS client over a dbus-python session bus connection."""

    def __init__(self, bus, timeout: float | None = None):
        self.bus = bus
        # dbus-python rejects timeout=None; omit it to keep the library default
        self._call_kwargs = {"timeout": float(timeout)} if timeout else {}

    @classmethod
    def connect(cls, timeout: float | None = None) -> "MprisBus":
        """Connect to the user's session bus."""
        try:
            bus = dbus.SessionBus()
        except DBusException as e:
            raise BusUnavailableError(
                f"The user's session bus is not available: {e}") from e
        return cls(bus, timeout=timeout)

    def _proxy(self, name: str, path: str, interface: str, exit_code: int):
        try:
            obj = self.bus.get_object(name, path, introspect=False)
            return dbus.Interface(obj, dbus_interface=interface)
        except DBusException as e:
            raise ProxyError(
                f"The proxy to {name} was not successfully created: {e}",
                exit_code) from e

    def _player_proxy(self, player: str, interface: str, exit_code: int):
        """Proxy to *player*'s MPRIS object, addressed by its unique name.

        Raises DBusException with a NAME_GONE_ERRORS name if the player has
        left the bus, ProxyError for any other failure.
        """
        try:
            owner = self.bus.get_name_owner(player)
        except DBusException as e:
            if e.get_dbus_name() in NAME_GONE_ERRORS:
                raise
            raise ProxyError(
                f"The proxy to {player} was not successfully created: {e}",
                exit_code) from e
        return self._proxy(str(owner), MPRIS_PATH, interface, exit_code)

    # ── Discovery ──

    def list_players(self) -> set[str]:
        """Return the bus names of all running MPRIS players.

        A failing ListNames call is reported and treated as "no players".
        """
        daemon = self._proxy(DBUS_NAME, DBUS_PATH, DBUS_INTERFACE,
                             EXIT_PROXY_DISCOVERY)
        try:
            names = daemon.ListNames(**self._call_kwargs)
        except DBusException as e:
            log.error("Got an error: '%s'.", e)
            return set()

        players = {str(name) for name in names if name.startswith(MPRIS_PREFIX)}
        log.debug("Found %d player(s): %s", len(players), ", ".join(sorted(players)))
        return players

    # ── State collection ──

    def get_state(self, player: str) -> PlaybackState | None:
        """Query PlaybackStatus of one player, None if it can't be determined."""
        try:
            props = self._player_proxy(player, PROPERTIES_INTERFACE,
                                       EXIT_PROXY_STATE)
            reply = props.Get(PLAYER_INTERFACE, "PlaybackStatus",
                              **self._call_kwargs)
        except DBusException as e:
            log.error("Got an error: '%s'.", e)
            return None

        text = _status_text(reply)
        if text is None:
            log.warning("Unable to determine state of %s", player)
            return None
        state = PlaybackState.parse(text)
        if state is None:
            log.warning("Unknown state %s of %s", text, player)
            return None
        log.debug("%s is %s", player, state.value)
        return state

    def get_states(self, players) -> dict[str, PlaybackState]:
        """Return ``{player: state}`` for every player whose state is known."""
        states = {}
        for player in players:
            state = self.get_state(player)
            if state is not None:
                states[player] = state
        return states

    # ── Dispatch ──

    def call(self, player: str, method: str) -> bool:
        """Invoke *method* on the player interface. False if the call failed."""
        try:
            iface = self._player_proxy(player, PLAYER_INTERFACE,
                                       EXIT_PROXY_DISPATCH)
            iface.get_dbus_method(method)(**self._call_kwargs)
        except DBusException as e:
            log.error("Got an error: '%s'.", e)
            return False
        log.info("%s -> %s", method, player)
        return True

    def dispatch(self, actions: dict[str, str]) -> int:
        """Send every non-empty command. Returns how many calls succeeded."""
        sent = 0
        for player, method in actions.items():
            if not method:
                continue
            if self.call(player, method):
                sent += 1
        log.debug("Dispatched %d of %d command(s)", sent, len(actions))
        return sent
