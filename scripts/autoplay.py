#!/usr/bin/env python3
"""
Auto-play random rounds against the rules engine (no server needed).

Usage:
    python scripts/autoplay.py [rounds] [seed]

Every player picks a random legal-looking move. After each action the chip
total on the table must be unchanged, otherwise the script stops.
"""
import random
import sys
from typing import Optional

from holdem.game.blinds import BlindSchedule
from holdem.game.table import Table

PLAYERS = ["alice", "bob", "carol", "dave"]
BUY_IN = 1000
SMALL_BLIND = 10


def pick_action(table: Table, rng: random.Random) -> tuple[str, Optional[int]]:
    """Choose a move for the current player."""
    player = table.current_player
    to_call = table.current_bet - player.current_bet
    roll = rng.random()

    if roll < 0.1:
        return "fold", None
    if roll < 0.2:
        return "all_in", None
    if roll < 0.4:
        target = table.current_bet + max(table.last_raise, table.big_blind) * rng.randint(1, 3)
        return "bet", target
    if to_call == 0:
        return "check", None
    return "call", None


def play_round(table: Table, rng: random.Random, starter: str) -> int:
    """Play one round to completion and return the number of actions taken."""
    expected = table.chips_in_play()
    result = table.start_round(starter)
    if not result.ok:
        print(f"  ✗ Could not start: {result.message}")
        return 0

    actions = 0
    while table.is_active:
        player_id = table.current_player.player_id
        action, amount = pick_action(table, rng)
        result = table.bet(player_id, amount) if action == "bet" else getattr(table, action)(player_id)
        if not result.ok:
            # fall back to something always legal
            result = table.call_or_check(player_id)
        actions += 1

        total = table.chips_in_play()
        if total != expected:
            raise AssertionError(f"Chip total changed from {expected} to {total} after {player_id} {action}")

    for event in table.drain_events():
        if not event.ephemeral and "wins" in event.description:
            print(f"  🏆 {event.description}")
    return actions


def main():
    rounds = int(sys.argv[1]) if len(sys.argv) > 1 else 50
    seed = int(sys.argv[2]) if len(sys.argv) > 2 else 1

    print("=" * 50)
    print("Hold'em Auto-Play")
    print("=" * 50)

    rng = random.Random(seed)
    table = Table("autoplay", rng=random.Random(seed), blind_schedule=BlindSchedule.fixed(SMALL_BLIND))
    for player_id in PLAYERS:
        table.buy_in(player_id, BUY_IN)
    table.drain_events()

    for number in range(1, rounds + 1):
        seated = [p.player_id for p in table.active_players if p.chips > 0]
        if len(seated) < 2:
            print("\nOnly one player has chips left")
            break
        print(f"\n[Round {number}]")
        actions = play_round(table, rng, seated[0])
        print(f"  {actions} actions, chips in play {table.chips_in_play()}")

    print("\n--- Stacks ---")
    for player in table.active_players + table.inactive_players:
        print(f"  {player.player_id}: {player.chips}")


if __name__ == "__main__":
    main()
