# mediaplayerctl
# SPDX-License-Identifier: GPL-3.0-or-later

"""
mediaplayerctl: send one transport command to the right MPRIS player.

Finds every media player registered on the session bus under
org.mpris.MediaPlayer2.*, reads each one's PlaybackStatus, and picks what to
do from that:

    mediaplayerctl play        # resume a paused player (or start a stopped one)
    mediaplayerctl pause       # pause everything that is playing
    mediaplayerctl playpause   # either of the above
    mediaplayerctl stop        # stop everything playing or paused
    mediaplayerctl next|prev   # skip on the playing player

Exit status:
    0    done (also when no player is running or nothing needed doing)
    1    session bus not available
    2-4  proxy creation failed (discovery / state query / command)
    127  usage error
"""

import argparse
import logging
import os
import sys

from .lib.actions import ACTIONS, UsageError, decide
from .lib.config import LOG_LEVELS, cfg
from .lib.mpris import MediaPlayerCtlError, MprisBus

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 127

DEFAULT_PROGNAME = "mediaplayerctl"


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports bad invocations with EXIT_USAGE."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_USAGE, f"{self.prog}: error: {message}\n")


def build_parser(progname: str) -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog=progname,
        add_help=False,
        usage=f"%(prog)s <{'|'.join(ACTIONS)}>",
        description="Control the most appropriate running MPRIS media player.",
    )
    parser.add_argument("action", choices=ACTIONS, metavar="ACTION",
                        help="transport command to send")
    return parser


def usage(progname: str, file=None):
    """Print the one-line usage for *progname* (stderr by default)."""
    build_parser(progname).print_usage(file or sys.stderr)


def parse_args(argv: list[str]) -> tuple[str, str]:
    """Return ``(progname, action)``. Exits with EXIT_USAGE on a bad invocation."""
    progname = os.path.basename(argv[0]) if argv else DEFAULT_PROGNAME
    args = build_parser(progname).parse_args(argv[1:])
    return progname, args.action


def setup_logging():
    logging.basicConfig(level=logging.WARNING, format="[%(levelname)s] %(message)s")
    level = str(cfg("log", "level", default="WARNING")).upper()
    if level in LOG_LEVELS:
        logging.getLogger().setLevel(level)


def bus_timeout() -> float | None:
    """Configured per-call timeout in seconds, None for the library default."""
    timeout = cfg("dbus", "timeout")
    if isinstance(timeout, (int, float)) and not isinstance(timeout, bool) and timeout > 0:
        return float(timeout)
    return None


def run(action: str, bus: MprisBus) -> int:
    """Discover players, read their state, send the chosen commands."""
    players = bus.list_players()
    if not players:
        print("no player found.")
        return EXIT_OK

    states = bus.get_states(players)
    actions = decide(action, states)
    if not actions:
        logger.info("Nothing to do for '%s'", action)
        return EXIT_OK

    bus.dispatch(actions)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv
    progname, action = parse_args(argv)
    setup_logging()

    try:
        bus = MprisBus.connect(timeout=bus_timeout())
        return run(action, bus)
    except UsageError as e:
        logger.error("%s", e)
        usage(progname)
        return EXIT_USAGE
    except MediaPlayerCtlError as e:
        logger.error("%s", e)
        return e.exit_code


if __name__ == "__main__":
    sys.exit(main())
