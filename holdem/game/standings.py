"""Calculate player standings (+/-)."""
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from holdem.game.table import Table


@dataclass
class PlayerStanding:
    """A player's standing at a table."""
    player_id: str
    buy_ins: int
    stack: int
    net: int
    active: bool

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "player_id": self.player_id,
            "buy_ins": self.buy_ins,
            "stack": self.stack,
            "net": self.net,
            "active": self.active,
        }


def calculate_standings(table: "Table") -> list[PlayerStanding]:
    """Calculate standings for every player the table knows about.

    Chips committed to an unfinished round count as lost until it settles.

    Args:
        table: The table.

    Returns:
        List of player standings sorted by net (descending).
    """
    standings = [
        PlayerStanding(
            player_id=p.player_id,
            buy_ins=p.total_buy_in,
            stack=p.chips,
            net=p.chips - p.total_buy_in,
            active=active,
        )
        for players, active in ((table.active_players, True), (table.inactive_players, False))
        for p in players
    ]
    standings.sort(key=lambda s: s.net, reverse=True)
    return standings


def format_standings_table(standings: list[PlayerStanding]) -> str:
    """Format standings as a text table.

    Args:
        standings: List of player standings.

    Returns:
        Formatted table string.
    """
    if not standings:
        return "No players at the table."

    lines = [
        "| Player     | Buy-ins |   Stack | Net (+/-) |",
        "|------------|---------|---------|-----------|",
    ]

    for s in standings:
        net_str = f"+{s.net}" if s.net >= 0 else str(s.net)
        name = s.player_id if s.active else f"{s.player_id}*"
        lines.append(
            f"| {name:<10} | {s.buy_ins:>7} | {s.stack:>7} | {net_str:>9} |"
        )

    return "\n".join(lines)
