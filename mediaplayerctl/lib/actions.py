"""
Action selection: turns a requested transport action plus the observed
playback state of every player into the commands to send.

Pure functions only: no bus access, no logging side effects.  The result maps
a player's bus name to the MPRIS method name to invoke on it.

    play       start one player if none is playing (paused preferred over stopped)
    pause      pause every playing player
    playpause  play if nothing is playing, otherwise pause
    stop       stop every playing or paused player
    next       skip forward on one playing player
    prev       skip back on one playing player

When more than one player qualifies for a single-target action the
lexicographically smallest bus name wins, so repeated runs against the same
set of players always pick the same one.
"""

from enum import Enum


class PlaybackState(Enum):
    STOPPED = "Stopped"
    PAUSED = "Paused"
    PLAYING = "Playing"

    @classmethod
    def parse(cls, text: str) -> "PlaybackState | None":
        """Map a PlaybackStatus string to a state, None if unrecognised."""
        for state in cls:
            if state.value == text:
                return state
        return None


ACTIONS = ("play", "pause", "playpause", "stop", "next", "prev")

PLAY = "Play"
PAUSE = "Pause"
STOP = "Stop"
NEXT = "Next"
PREVIOUS = "Previous"


class UsageError(ValueError):
    """Raised for an action name the tool does not know."""


def find_players(states: dict[str, PlaybackState], wanted) -> list[str]:
    """Return the players whose state is in *wanted*, sorted by bus name."""
    wanted = set(wanted)
    return sorted(player for player, state in states.items() if state in wanted)


def _pick_to_start(states: dict[str, PlaybackState]) -> str | None:
    candidates = find_players(states, {PlaybackState.PAUSED})
    if not candidates:
        candidates = find_players(states, {PlaybackState.STOPPED})
    return candidates[0] if candidates else None


def _play(states, playing):
    if playing:
        return {}
    player = _pick_to_start(states)
    return {player: PLAY} if player is not None else {}


def _pause(states, playing):
    return {player: PAUSE for player in playing}


def _playpause(states, playing):
    if playing:
        return _pause(states, playing)
    return _play(states, playing)


def _stop(states, playing):
    players = find_players(states, {PlaybackState.PLAYING, PlaybackState.PAUSED})
    return {player: STOP for player in players}


def _next(states, playing):
    return {playing[0]: NEXT} if playing else {}


def _prev(states, playing):
    return {playing[0]: PREVIOUS} if playing else {}


_RULES = {
    "play": _play,
    "pause": _pause,
    "playpause": _playpause,
    "stop": _stop,
    "next": _next,
    "prev": _prev,
}


def decide(action: str, states: dict[str, PlaybackState]) -> dict[str, str]:
    """Compute ``{player: method}`` for *action* given the observed *states*.

    Players missing from *states* are of unknown state and never targeted.
    Raises UsageError if *action* is not one of ACTIONS.
    """
    rule = _RULES.get(action)
    if rule is None:
        raise UsageError(f"Unknown method {action}")
    playing = find_players(states, {PlaybackState.PLAYING})
    return rule(states, playing)
