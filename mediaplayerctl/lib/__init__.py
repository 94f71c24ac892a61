"""
Shared plumbing for mediaplayerctl.

  actions.py  PlaybackState and the pure action-selection rules
  mpris.py    MprisBus: discovery, state collection and dispatch over D-Bus
  config.py   optional JSON configuration (log level, bus call timeout)
"""
