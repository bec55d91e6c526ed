"""
nowplaying - read now-playing song info from a running music player.

Song metadata is pulled straight out of the player's process memory via
configured pointer chains; nothing is injected and nothing is written to
the target.
"""

__version__ = "1.0.0"
