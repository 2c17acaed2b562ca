"""Pot and side-pot settlement."""
from dataclasses import dataclass, field

from holdem.game.deck import Card
from holdem.game.hand_eval import HandEvaluator, HandValue, best_hands
from holdem.game.player import Player
from holdem.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class SidePot:
    """One pot tier and the players who can win it."""
    amount: int
    eligible_players: list[str]  # player ids, table order
    ceiling: int = 0  # all-in level capping this tier, 0 for the top tier

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "amount": self.amount,
            "eligible_players": self.eligible_players,
            "ceiling": self.ceiling,
        }


@dataclass
class PotAward:
    """Winners and payouts of one tier."""
    pot: SidePot
    winners: list[str]
    payouts: dict[str, int]
    label: str


@dataclass
class Settlement:
    """Everything decided when a round's pots are settled."""
    awards: list[PotAward] = field(default_factory=list)
    hands: dict[str, HandValue] = field(default_factory=dict)
    uncontested: bool = False

    @property
    def winnings(self) -> dict[str, int]:
        """player_id -> total chips won across tiers."""
        totals: dict[str, int] = {}
        for award in self.awards:
            for player_id, amount in award.payouts.items():
                totals[player_id] = totals.get(player_id, 0) + amount
        return totals


def build_side_pots(players: list[Player], folded: set[str], pot_total: int) -> list[SidePot]:
    """Split the round's pot into tiers.

    Args:
        players: Every seated player in table order, folded ones included.
        folded: Ids of folded players.
        pot_total: Chips in the pot.

    Returns:
        Pot tiers, lowest all-in ceiling first. A single tier when no all-in
        player put in less than someone else still in the hand.
    """
    contenders = [p for p in players if p.player_id not in folded]
    contender_ids = [p.player_id for p in contenders]

    if len(contenders) <= 1:
        return [SidePot(amount=pot_total, eligible_players=contender_ids)]

    all_ins = sorted((p for p in contenders if p.is_all_in), key=lambda p: p.total_bet)
    if not all_ins or all(p.total_bet <= all_ins[0].total_bet for p in contenders):
        return [SidePot(amount=pot_total, eligible_players=contender_ids)]

    pots: list[SidePot] = []
    previous = 0
    distributed = 0
    for level in sorted({p.total_bet for p in all_ins}):
        amount = 0
        for p in players:
            if p.total_bet >= level:
                amount += level - previous
            elif p.player_id in folded and p.total_bet > previous:
                # folded players never contribute beyond what they bet
                amount += min(level, p.total_bet) - previous

        eligible = [p.player_id for p in contenders if p.total_bet >= level]
        pots.append(SidePot(amount=amount, eligible_players=eligible, ceiling=level))
        logger.debug(f"Pot tier up to {level}: {amount} chips, eligible {eligible}")
        distributed += amount
        previous = level

    remaining = pot_total - distributed
    if remaining > 0:
        eligible = [p.player_id for p in contenders if not p.is_all_in]
        if not eligible:
            eligible = list(pots[-1].eligible_players)
        pots.append(SidePot(amount=remaining, eligible_players=eligible))
        logger.debug(f"Top tier: {remaining} chips, eligible {eligible}")

    return pots


def calculate_winnings(
    side_pots: list[SidePot],
    winners_by_pot: dict[int, list[str]]
) -> dict[int, dict[str, int]]:
    """Calculate how much each winner takes from each pot.

    Args:
        side_pots: List of side pots.
        winners_by_pot: Dict of pot_index -> list of winner ids, table order.

    Returns:
        Dict of pot_index -> {player_id: amount}. Odd chips go one each to
        the earliest winners.
    """
    winnings: dict[int, dict[str, int]] = {}

    for pot_idx, pot in enumerate(side_pots):
        winners = winners_by_pot.get(pot_idx)
        if not winners:
            continue

        share = pot.amount // len(winners)
        remainder = pot.amount % len(winners)

        payouts: dict[str, int] = {}
        for i, winner in enumerate(winners):
            payouts[winner] = payouts.get(winner, 0) + share + (1 if i < remainder else 0)
        winnings[pot_idx] = payouts

    return winnings


def _pot_label(index: int, pots: list[SidePot]) -> str:
    if len(pots) == 1:
        return "Pot"
    if index == 0:
        return "Main pot"
    return "Side pot" if len(pots) == 2 else f"Side pot {index}"


def resolve_pots(
    players: list[Player],
    folded: set[str],
    pot_total: int,
    community_cards: list[Card],
    evaluator: HandEvaluator,
) -> Settlement:
    """Decide who wins every tier of a finished round.

    Args:
        players: Every seated player in table order.
        folded: Ids of folded players.
        pot_total: Chips in the pot.
        community_cards: The board; must hold 5 cards unless uncontested.
        evaluator: Hand ranking oracle.

    Returns:
        The settlement. Chips are not moved; the caller applies payouts.
    """
    contenders = [p for p in players if p.player_id not in folded]
    pots = build_side_pots(players, folded, pot_total)

    if len(contenders) == 1:
        only = contenders[0].player_id
        pot = pots[0]
        return Settlement(
            awards=[PotAward(pot=pot, winners=[only], payouts={only: pot.amount}, label="Pot")],
            uncontested=True,
        )

    hands = {
        p.player_id: evaluator.evaluate(list(p.hole_cards) + list(community_cards))
        for p in contenders
    }

    winners_by_pot = {
        idx: best_hands({pid: hands[pid] for pid in pot.eligible_players})
        for idx, pot in enumerate(pots)
        if pot.amount > 0
    }
    payouts = calculate_winnings(pots, winners_by_pot)

    settlement = Settlement(hands=hands)
    for idx, pot in enumerate(pots):
        if idx not in payouts:
            continue
        settlement.awards.append(PotAward(
            pot=pot,
            winners=winners_by_pot[idx],
            payouts=payouts[idx],
            label=_pot_label(idx, pots),
        ))
    return settlement
