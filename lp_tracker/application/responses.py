"""Rendering of command results into user facing messages."""

from typing import List

from ..core.entities import Player
from ..core.enums import ErrorKind

MAX_LISTED_PLAYERS = 20

ADD_PLAYER_TIMEOUT_MESSAGE = "❌ Request timed out. Please try again later."
LIST_PLAYERS_TIMEOUT_MESSAGE = "❌ Request timed out"
NO_PLAYERS_MESSAGE = "📭 No players tracked yet!\nUse `/add_player` to start tracking."


def _rank_info(player: Player, bold: bool) -> str:
    if not player.is_ranked:
        return "🆕 **Unranked**" if bold else "🆕 Unranked"
    if bold:
        return f"🏆 **{player.tier} {player.rank}** • {player.league_points} LP"
    return f"🏆 {player.tier} {player.rank} {player.league_points} LP"


def render_add_player_success(player: Player) -> str:
    return (
        f"✅ Successfully added **{player.riot_id}** ({player.server.upper()})\n"
        f"📊 **Level:** {player.summoner_level}\n"
        f"{_rank_info(player, bold=True)}"
    )


def render_add_player_failure(
    kind: ErrorKind, error: BaseException, game_name: str, tag_line: str, server: str
) -> str:
    """Message for a failed add_player, one distinct text per error kind."""
    if kind == ErrorKind.ALREADY_TRACKED:
        return f"❌ Player **{game_name}#{tag_line}** ({server.upper()}) is already being tracked!"
    if kind == ErrorKind.NOT_FOUND:
        return (
            f"❌ Player **{game_name}#{tag_line}** not found on server **{server.upper()}**\n\n"
            "💡 **Tips:**\n"
            "• Check the spelling of the name and tagline\n"
            "• Make sure the server is correct\n"
            "• The player might not exist or have never played ranked"
        )
    return f"❌ Failed to add player **{game_name}#{tag_line}**\n\n**Error:** {error}"


def render_players_list(players: List[Player]) -> str:
    """Summary of the tracked players, capped at MAX_LISTED_PLAYERS entries."""
    if not players:
        return NO_PLAYERS_MESSAGE

    lines = [f"📋 **Tracked Players ({len(players)})**\n\n"]
    for player in players[:MAX_LISTED_PLAYERS]:
        lines.append(
            f"👤 **{player.riot_id}** ({player.server.upper()})\n"
            f"   📊 Level {player.summoner_level} • {_rank_info(player, bold=False)}\n\n"
        )
    if len(players) > MAX_LISTED_PLAYERS:
        lines.append(f"... and {len(players) - MAX_LISTED_PLAYERS} more players\n")
    return "".join(lines)


def render_list_players_failure(error: BaseException) -> str:
    return f"❌ Failed to fetch players from database: {error}"
