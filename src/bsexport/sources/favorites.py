"""Player data source: favorite custom levels from PlayerData.dat."""

from pathlib import Path
from typing import Any, Callable

from pydantic import ValidationError

from ..errors import (
    MalformedRecordError,
    NoPlayersError,
    PlayerSelectionError,
    describe_validation_error,
)
from ..logging import get_logger
from ..models import LocalPlayer, PlayerProfile
from . import BaseHashSource

logger = get_logger(__name__)

# Receives the local players and returns the index entered by the user.
PlayerChooser = Callable[[list[LocalPlayer]], str]


def select_player(players: list[LocalPlayer], choose_player: PlayerChooser) -> LocalPlayer:
    """Pick the player whose favorites are exported.

    A single player is selected without asking.

    Raises:
        NoPlayersError: If there are no players
        PlayerSelectionError: If the chosen index is not a valid integer in range
    """
    if not players:
        raise NoPlayersError()
    if len(players) == 1:
        return players[0]

    answer = choose_player(players)
    try:
        index = int(answer.strip())
    except (ValueError, AttributeError) as e:
        raise PlayerSelectionError(str(answer), len(players)) from e
    if not 0 <= index < len(players):
        raise PlayerSelectionError(str(answer), len(players))
    return players[index]


class PlayerDataSource(BaseHashSource):
    """Reads the favorite custom levels of one local player."""

    def __init__(self, path: Path, choose_player: PlayerChooser):
        """Initialize the player data source.

        Args:
            path: Path to PlayerData.dat
            choose_player: Callback asked for a player index when the file
                holds more than one player
        """
        super().__init__(path)
        self.choose_player = choose_player

    @property
    def name(self) -> str:
        return "favorites"

    def parse_profile(self, document: Any) -> PlayerProfile:
        try:
            return PlayerProfile.model_validate(document)
        except ValidationError as e:
            raise MalformedRecordError(str(self.path), describe_validation_error(e)) from e

    def _collect_hashes(self, document: Any) -> list[str]:
        profile = self.parse_profile(document)
        player = select_player(profile.local_players, self.choose_player)
        logger.info(
            "player_selected",
            player_id=player.player_id,
            player_name=player.player_name,
            favorites=len(player.favorites_level_ids),
        )

        hashes = player.custom_level_hashes()
        builtin = len(player.favorites_level_ids) - len(hashes)
        if builtin:
            logger.debug("builtin_favorites_skipped", count=builtin)
        return hashes
