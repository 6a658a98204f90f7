"""bsexport - Export Beat Saber favorites and votes to playlists.

Reads votedSongs.json or PlayerData.dat, resolves the maps on BeatSaver and
writes a .bplist playlist the game can load.
"""

from .cli import main

__all__ = ["main"]
