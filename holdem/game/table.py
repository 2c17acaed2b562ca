"""Table state machine for Texas Hold'em."""
import json
import random
from enum import Enum
from dataclasses import dataclass
from typing import Callable, Optional

from holdem.game.betting import (
    ActionError,
    ActionResult,
    PendingAction,
    PendingMove,
    max_winnable,
    min_raise,
    round_chips,
)
from holdem.game.blinds import BlindSchedule
from holdem.game.deck import Card, Deck
from holdem.game.events import EventLog, GameEvent
from holdem.game.hand_eval import HandEvaluator, TreysEvaluator
from holdem.game.player import Player
from holdem.game.pot import Settlement, resolve_pots
from holdem.config import config
from holdem.utils.logger import get_logger

logger = get_logger(__name__)


class GameState(str, Enum):
    """Round states."""
    WAITING_FOR_PLAYERS = "waiting_for_players"
    PRE_FLOP = "pre_flop"
    FLOP = "flop"
    TURN = "turn"
    RIVER = "river"

    @property
    def label(self) -> str:
        return {
            GameState.WAITING_FOR_PLAYERS: "Waiting for players",
            GameState.PRE_FLOP: "Pre-flop",
            GameState.FLOP: "Flop",
            GameState.TURN: "Turn",
            GameState.RIVER: "River",
        }[self]


# street -> (next street, community cards dealt after the burn)
_NEXT_STREET = {
    GameState.PRE_FLOP: (GameState.FLOP, 3),
    GameState.FLOP: (GameState.TURN, 1),
    GameState.TURN: (GameState.RIVER, 1),
}


@dataclass
class SeatView:
    """One seat as shown in action order."""
    player_id: str
    position: str  # "D", "SB", "BB" or a "+" combination, empty otherwise
    chips: int
    current_bet: int
    total_bet: int
    last_action: str
    is_current: bool
    folded: bool


class Table:
    """A poker table running rounds of Texas Hold'em.

    Every public action runs to completion before returning: it validates,
    mutates state, appends events and then drives the round forward until a
    player decision is needed or the round is over. Callers own the event
    log and drain it after each action.
    """

    def __init__(
        self,
        table_id: str = "default",
        rng: Optional[random.Random] = None,
        evaluator: Optional[HandEvaluator] = None,
        blind_schedule: Optional[BlindSchedule] = None,
        max_players: Optional[int] = None,
        min_players: Optional[int] = None,
    ):
        """Initialize an empty table.

        Args:
            table_id: Unique table identifier.
            rng: Random source for shuffling; pass a seeded one for repeatable deals.
            evaluator: Hand ranking oracle. Defaults to TreysEvaluator.
            blind_schedule: Blind lookup. Defaults to the configured weekday schedule.
            max_players: Seat cap. Defaults to config.
            min_players: Players needed to start a round. Defaults to config.
        """
        self.table_id = table_id
        self.evaluator: HandEvaluator = evaluator or TreysEvaluator()
        self.blind_schedule = blind_schedule or BlindSchedule()
        self.max_players = max_players or config.max_players
        self.min_players = min_players or config.min_players

        self.state = GameState.WAITING_FOR_PLAYERS
        self.deck = Deck(rng=rng)
        self._community_cards: list[Card] = []
        self._active: list[Player] = []
        self._inactive: list[Player] = []
        self._folded: set[str] = set()

        self.pot = 0
        self.dealer_position = 0
        self.small_blind = 0
        self.big_blind = 0
        self.current_player_index = 0
        self.current_bet = 0
        self.last_raise = 0
        self.pre_deal_id: Optional[str] = None

        self.events = EventLog()

    # Read-only views

    @property
    def active_players(self) -> list[Player]:
        """Seated players in table order."""
        return list(self._active)

    @property
    def inactive_players(self) -> list[Player]:
        """Players who bought out, were evicted or are waiting to join."""
        return list(self._inactive)

    @property
    def folded_players(self) -> list[str]:
        """Ids folded this round, sorted."""
        return sorted(self._folded)

    @property
    def community_cards(self) -> list[Card]:
        return list(self._community_cards)

    @property
    def blinds(self) -> tuple[int, int]:
        return self.small_blind, self.big_blind

    @property
    def is_active(self) -> bool:
        """True while a round is being played."""
        return self.state != GameState.WAITING_FOR_PLAYERS

    @property
    def current_player(self) -> Optional[Player]:
        """Player whose decision the table is waiting on."""
        if not self.is_active or not self._active:
            return None
        return self._active[self.current_player_index % len(self._active)]

    def get_player(self, player_id: str) -> Optional[Player]:
        """Get a seated player by id."""
        for player in self._active:
            if player.player_id == player_id:
                return player
        return None

    def _get_inactive(self, player_id: str) -> Optional[Player]:
        for player in self._inactive:
            if player.player_id == player_id:
                return player
        return None

    def _non_folded(self) -> list[Player]:
        return [p for p in self._active if p.player_id not in self._folded]

    def chips_in_play(self) -> int:
        """Chips on the table: every stack plus the pot."""
        return sum(p.chips for p in self._active + self._inactive) + self.pot

    def drain_events(self) -> list[GameEvent]:
        """Return and clear everything logged since the last drain."""
        return self.events.drain()

    def _reject(self, player_id: str, error: ActionError, message: str) -> ActionResult:
        logger.debug(f"Table {self.table_id}: rejected {player_id}: {message}")
        self.events.add(f"{player_id}: {message}")
        return ActionResult.rejected(error, message)

    # Seating

    def add_player(self, player_id: str) -> ActionResult:
        """Seat a player, or queue the seat until the round ends.

        Args:
            player_id: Player to seat.

        Returns:
            Success, or a rejection if already seated or the table is full.
        """
        seated = self.get_player(player_id)
        if seated is not None:
            if seated.wants_to_leave:
                seated.wants_to_leave = False
                self.events.add(f"{player_id} is staying at the table")
                return ActionResult.success(f"{player_id} is staying")
            return self._reject(player_id, ActionError.ALREADY_SEATED, f"{player_id} is already at the table")

        waiting = self._get_inactive(player_id)
        if waiting is not None and waiting.wants_to_join:
            return self._reject(player_id, ActionError.ALREADY_SEATED, f"{player_id} is already joining")

        joining = sum(1 for p in self._inactive if p.wants_to_join)
        if len(self._active) + joining >= self.max_players:
            return self._reject(
                player_id, ActionError.TABLE_FULL, f"Table is full ({self.max_players} players)"
            )

        if self.is_active:
            if waiting is None:
                waiting = Player(player_id=player_id)
                self._inactive.append(waiting)
            waiting.wants_to_join = True
            self.events.add(f"{player_id} will join the table after this round")
            logger.info(f"{player_id} queued to join table {self.table_id}")
            return ActionResult.success(f"{player_id} will join after this round")

        if waiting is not None:
            self._inactive.remove(waiting)
            player = waiting
        else:
            player = Player(player_id=player_id)
        self._seat(player)
        return ActionResult.success(f"{player_id} joined")

    def remove_player(self, player_id: str) -> ActionResult:
        """Unseat a player, or queue the departure until the round ends."""
        player = self.get_player(player_id)
        if player is None:
            waiting = self._get_inactive(player_id)
            if waiting is not None and waiting.wants_to_join:
                waiting.wants_to_join = False
                self.events.add(f"{player_id} will no longer join the table")
                return ActionResult.success(f"{player_id} cancelled joining")
            return self._reject(player_id, ActionError.PLAYER_NOT_FOUND, f"{player_id} is not at the table")

        if self.is_active:
            player.wants_to_leave = True
            self.events.add(f"{player_id} will leave the table after this round")
            logger.info(f"{player_id} queued to leave table {self.table_id}")
            return ActionResult.success(f"{player_id} will leave after this round")

        self._unseat(player)
        return ActionResult.success(f"{player_id} left")

    def _seat(self, player: Player) -> None:
        player.wants_to_join = False
        self._active.append(player)
        self.events.add(f"{player.player_id} joined the table")
        logger.info(f"{player.player_id} joined table {self.table_id}")

    def _unseat(self, player: Player) -> None:
        index = self._active.index(player)
        self._active.pop(index)
        if index < self.dealer_position:
            self.dealer_position -= 1
        player.wants_to_leave = False
        self._inactive.append(player)
        self.events.add(f"{player.player_id} left the table")
        logger.info(f"{player.player_id} left table {self.table_id}")

    def buy_in(self, player_id: str, amount: float) -> ActionResult:
        """Add chips to a player's stack, seating them if needed.

        Args:
            player_id: Player buying in.
            amount: Chips to add; rounded to a whole chip.

        Returns:
            Success, or a rejection during a round or for a non-positive amount.
        """
        if self.is_active:
            return self._reject(player_id, ActionError.GAME_ALREADY_ACTIVE, "Can only buy in between rounds")

        chips = round_chips(amount)
        if chips <= 0:
            return self._reject(player_id, ActionError.INVALID_AMOUNT, "Buy-in amount must be positive")

        if self.get_player(player_id) is None:
            joined = self.add_player(player_id)
            if not joined.ok:
                return joined
        player = self.get_player(player_id)

        player.add_chips(chips)
        player.total_buy_in += chips
        self.events.add(f"{player_id} bought in for {chips}")
        logger.info(f"{player_id} bought in for {chips} at table {self.table_id}")
        return ActionResult.success(f"Bought in for {chips}")

    def cash_out(self, player_id: str) -> ActionResult:
        """Take a player's whole stack off the table."""
        if self.is_active:
            return self._reject(player_id, ActionError.GAME_ALREADY_ACTIVE, "Can only cash out between rounds")

        player = self.get_player(player_id) or self._get_inactive(player_id)
        if player is None:
            return self._reject(player_id, ActionError.PLAYER_NOT_FOUND, f"{player_id} is not at the table")
        if player.chips <= 0:
            return self._reject(player_id, ActionError.NO_CHIPS, "No chips to cash out")

        amount = player.chips
        player.chips = 0
        player.total_buy_in = 0
        self.events.add(f"{player_id} cashed out {amount} chips")
        logger.info(f"{player_id} cashed out {amount} at table {self.table_id}")
        return ActionResult.success(f"Cashed out {amount}")

    # Round flow

    def start_round(self, player_id: str) -> ActionResult:
        """Deal a new round.

        Args:
            player_id: Requesting player; must be seated.

        Returns:
            Success, or a rejection if a round is running, the requester is
            not seated, or fewer than the minimum players have chips.
        """
        result = self._start_round(player_id)
        if result.ok:
            self._progress()
        return result

    def _start_round(self, player_id: str) -> ActionResult:
        if self.is_active:
            return self._reject(player_id, ActionError.GAME_ALREADY_ACTIVE, "A round is already in progress")
        if self.get_player(player_id) is None:
            return self._reject(player_id, ActionError.PLAYER_NOT_FOUND, f"{player_id} is not at the table")

        for player in self._active:
            player.reset_for_new_round()
        for player in [p for p in self._active if p.chips <= 0]:
            self.events.add(f"{player.player_id} has no chips and sits out")
            self._unseat(player)

        if len(self._active) < self.min_players:
            return self._reject(player_id, ActionError.NOT_ENOUGH_PLAYERS, "Not enough players to start a round")
        if self.dealer_position >= len(self._active):
            self.dealer_position = 0

        self._community_cards = []
        self._folded.clear()
        self.pot = 0
        self.current_bet = 0
        self.last_raise = 0
        self.deck.reset()
        self.deck.shuffle()
        self.small_blind, self.big_blind = self.blind_schedule.current()
        self.state = GameState.PRE_FLOP

        n = len(self._active)
        dealer = self._active[self.dealer_position]
        logger.info(
            f"Table {self.table_id}: round started with {n} players, "
            f"dealer {dealer.player_id}, blinds {self.small_blind}/{self.big_blind}"
        )
        self.events.add(
            f"New round: {dealer.player_id} has the button, blinds are {self.small_blind}/{self.big_blind}"
        )

        for _ in range(2):
            for player in self._active:
                card = self.deck.draw()
                if card is not None:
                    player.receive_card(card)
        for player in self._active:
            self.events.private(player.player_id, "Your cards:", player.hole_cards)

        self._post_blind(self._active[(self.dealer_position + 1) % n], self.small_blind, "small")
        self._post_blind(self._active[(self.dealer_position + 2) % n], self.big_blind, "big")
        self.current_bet = self.big_blind

        # first to act is the seat after the big blind
        self.current_player_index = (self.dealer_position + 2) % n
        self._advance_turn()
        return ActionResult.success("Round started")

    def _post_blind(self, player: Player, amount: int, name: str) -> None:
        posted = player.remove_chips(amount)
        player.current_bet += posted
        self.pot += posted
        suffix = " and is all-in" if player.is_all_in else ""
        self.events.add(f"{player.player_id} posts the {name} blind of {posted}{suffix}")

    def _advance_turn(self) -> None:
        """Move to the next seat that can act; stay put if there is none."""
        n = len(self._active)
        start = self.current_player_index
        for step in range(1, n):
            index = (start + step) % n
            player = self._active[index]
            if player.player_id in self._folded or player.is_all_in:
                continue
            self.current_player_index = index
            logger.debug(f"Table {self.table_id}: {player.player_id} to act")
            self.events.turn(player.player_id)
            return

    def _is_betting_round_complete(self) -> bool:
        contenders = self._non_folded()
        if len(contenders) <= 1:
            return True
        if all(p.is_all_in for p in contenders):
            return True
        if not all(p.is_all_in or p.current_bet == self.current_bet for p in contenders):
            return False
        can_act = [p for p in contenders if not p.is_all_in]
        if len(can_act) <= 1:
            return True
        return all(p.had_turn for p in can_act)

    def _progress(self) -> None:
        """Drive the round forward until a player decision is needed."""
        while self.is_active:
            if len(self._non_folded()) <= 1:
                self._end_round()
                continue

            if self._is_betting_round_complete():
                if self.state == GameState.RIVER:
                    self._end_round()
                else:
                    self._next_street()
                continue

            player = self.current_player
            if player is None or player.pending_action is None:
                return
            self._run_pending(player)

    def _next_street(self) -> None:
        next_state, count = _NEXT_STREET[self.state]
        self.state = next_state
        dealt = self.deck.burn_and_deal(count)
        self._community_cards.extend(dealt)

        logger.info(f"Table {self.table_id}: {next_state.label}, board {' '.join(map(str, self._community_cards))}")
        self.events.add(f"{next_state.label}:", self._community_cards)

        for player in self._active:
            player.reset_for_new_street()
        self.current_bet = 0
        self.last_raise = 0

        for player in self._non_folded():
            description = self.evaluator.describe(player.hole_cards + self._community_cards)
            self.events.private(player.player_id, f"You have {description}")

        self.current_player_index = self.dealer_position
        if not self._is_betting_round_complete():
            self._advance_turn()

    def _end_round(self) -> None:
        settlement = resolve_pots(
            self._active, self._folded, self.pot, self._community_cards, self.evaluator
        )
        self._pay_out(settlement)

        if len(self._community_cards) < 5:
            would_have_been = list(self._community_cards)
            while len(would_have_been) < 5:
                would_have_been.extend(self.deck.burn_and_deal(3 if not would_have_been else 1))
            self.events.add("Community cards would have been:", would_have_been)

        for player in self._active:
            if player.sign_off:
                self.events.add(f"{player.player_id} says :{player.sign_off}:")
                player.sign_off = None

        self.pot = 0
        self.current_bet = 0
        self.last_raise = 0
        self.state = GameState.WAITING_FOR_PLAYERS
        for player in self._active:
            player.pending_action = None
        if self._active:
            self.dealer_position = (self.dealer_position + 1) % len(self._active)
        logger.info(f"Table {self.table_id}: round over")

        for player in [p for p in self._inactive if p.wants_to_join]:
            self._inactive.remove(player)
            self._seat(player)
        for player in [p for p in self._active if p.wants_to_leave]:
            self._unseat(player)

        if self.pre_deal_id is not None:
            requester, self.pre_deal_id = self.pre_deal_id, None
            self._start_round(requester)

    def _pay_out(self, settlement: Settlement) -> None:
        for player_id, value in settlement.hands.items():
            player = self.get_player(player_id)
            self.events.add(f"{player_id} had {value.description}", player.hole_cards)

        for award in settlement.awards:
            if not settlement.uncontested:
                self.events.add(f"{award.label} of {award.pot.amount} won by: {', '.join(award.winners)}")
            for player_id, amount in award.payouts.items():
                self.get_player(player_id).add_chips(amount)
            logger.info(f"Table {self.table_id}: {award.label} of {award.pot.amount} to {award.winners}")

        for player_id, amount in settlement.winnings.items():
            self.events.add(f"{player_id} wins {amount} chips!")

    # Betting

    def _check_turn(self, player_id: str) -> Optional[ActionResult]:
        if not self.is_active:
            return self._reject(player_id, ActionError.GAME_NOT_ACTIVE, "No round in progress")
        if self.get_player(player_id) is None:
            return self._reject(player_id, ActionError.PLAYER_NOT_FOUND, f"{player_id} is not at the table")
        current = self.current_player
        if current is None or current.player_id != player_id:
            waiting_on = current.player_id if current else "nobody"
            return self._reject(player_id, ActionError.NOT_YOUR_TURN, f"It's not your turn, waiting on {waiting_on}")
        return None

    def _act(self, player_id: str, action: Callable[[Player], ActionResult]) -> ActionResult:
        rejection = self._check_turn(player_id)
        if rejection is not None:
            return rejection
        result = action(self.get_player(player_id))
        if result.ok:
            self._progress()
        return result

    def fold(self, player_id: str) -> ActionResult:
        """Fold. Returns a round-ended result when one player is left."""
        return self._act(player_id, self._fold)

    def check(self, player_id: str) -> ActionResult:
        """Check; only legal when the player has matched the current bet."""
        return self._act(player_id, self._check)

    def call(self, player_id: str) -> ActionResult:
        """Call the current bet, all-in for less if the stack is short."""
        return self._act(player_id, self._call)

    def bet(self, player_id: str, amount: float) -> ActionResult:
        """Bet or raise to a total for this street.

        Args:
            player_id: Acting player.
            amount: Street total to bet to; rounded to a whole chip.

        Returns:
            "Bet N" for an opening bet, "Raised to N" for a raise, or a
            rejection naming the broken limit.
        """
        return self._act(player_id, lambda player: self._bet(player, amount))

    def all_in(self, player_id: str) -> ActionResult:
        """Push the whole stack, or as much of it as anyone can match.

        A push capped at the deepest opponent's stack puts that opponent
        all-in, so like a full-stack shove it is exempt from the minimum
        raise.
        """
        rejection = self._check_turn(player_id)
        if rejection is not None:
            return rejection
        player = self.get_player(player_id)
        opponents = [p for p in self._non_folded() if p is not player]
        total = min(player.chips + player.current_bet, max_winnable(opponents))
        if total <= self.current_bet:
            return self.call_or_check(player_id)
        return self._act(player_id, lambda p: self._bet(p, total, covers_table=True))

    def call_or_check(self, player_id: str) -> ActionResult:
        """Check when matched, call otherwise."""
        rejection = self._check_turn(player_id)
        if rejection is not None:
            return rejection
        if self.get_player(player_id).current_bet == self.current_bet:
            return self.check(player_id)
        return self.call(player_id)

    def _fold(self, player: Player) -> ActionResult:
        self._folded.add(player.player_id)
        player.had_turn = True
        player.pending_action = None
        self.events.add(f"{player.player_id} folds")
        if len(self._non_folded()) <= 1:
            return ActionResult.round_ended()
        self._advance_turn()
        return ActionResult.success("Folded")

    def _check(self, player: Player) -> ActionResult:
        if player.current_bet != self.current_bet:
            outstanding = self.current_bet - player.current_bet
            return self._reject(
                player.player_id,
                ActionError.OUTSTANDING_BET,
                f"Cannot check, there are active bets ({outstanding} chips)",
            )
        player.had_turn = True
        self.events.add(f"{player.player_id} checks")
        self._advance_turn()
        return ActionResult.success("Checked")

    def _call(self, player: Player) -> ActionResult:
        if self.current_bet == 0:
            return self._reject(player.player_id, ActionError.NOTHING_TO_CALL, "No active bets to call, check instead")
        gap = self.current_bet - player.current_bet
        if gap <= 0:
            return self._reject(
                player.player_id, ActionError.ALREADY_MATCHED, "No need to call - already matched the current bet"
            )

        called = player.remove_chips(gap)
        player.current_bet += called
        self.pot += called
        player.had_turn = True

        if player.is_all_in:
            self.events.add(f"{player.player_id} calls {called} and is all-in")
            result = ActionResult.all_in()
        else:
            self.events.add(f"{player.player_id} calls {called}")
            result = ActionResult.success(f"Called {called}")
        self._advance_turn()
        return result

    def _bet(self, player: Player, amount: float, covers_table: bool = False) -> ActionResult:
        total = round_chips(amount)
        if total <= 0:
            return self._reject(player.player_id, ActionError.INVALID_AMOUNT, "Bet amount must be positive")

        raising = self.current_bet > 0
        increment = total - player.current_bet if raising else total
        if increment > player.chips:
            return self._reject(
                player.player_id,
                ActionError.INSUFFICIENT_CHIPS,
                f"Not enough chips to bet {total} (you have {player.chips})",
            )

        shoving = increment == player.chips
        if shoving and total <= self.current_bet:
            return self._call(player)

        if not shoving and not covers_table:
            minimum = min_raise(self.last_raise, self.big_blind)
            if total - self.current_bet < minimum:
                return self._reject(
                    player.player_id,
                    ActionError.BELOW_MIN_RAISE,
                    f"Raise must be at least {minimum} (to {self.current_bet + minimum})",
                )

        ceiling = max_winnable([p for p in self._non_folded() if p is not player])
        if total > ceiling:
            return self._reject(
                player.player_id, ActionError.ABOVE_MAX_WINNABLE, f"No reason to bet more than {ceiling}"
            )

        removed = player.remove_chips(increment)
        player.current_bet += removed
        player.last_raise = increment
        player.had_turn = True
        self.pot += removed
        self.current_bet = total
        self.last_raise = increment

        message = f"Raised to {total}" if raising else f"Bet {total}"
        verb = f"raises to {total}" if raising else f"bets {total}"
        if player.is_all_in:
            self.events.add(f"{player.player_id} {verb} and is all-in")
            result = ActionResult.all_in(message)
        else:
            self.events.add(f"{player.player_id} {verb}")
            result = ActionResult.success(message)
        self._advance_turn()
        return result

    # Queued moves

    def pre_check(self, player_id: str) -> ActionResult:
        """Check automatically when the turn comes up."""
        return self._queue(player_id, PendingAction(PendingMove.CHECK), "pre-checked!", self.check)

    def pre_fold(self, player_id: str) -> ActionResult:
        """Fold automatically when the turn comes up."""
        return self._queue(player_id, PendingAction(PendingMove.FOLD), "pre-folded!", self.fold)

    def pre_call(self, player_id: str) -> ActionResult:
        """Call the current bet when the turn comes up, unless it changes first."""
        return self._queue(
            player_id, PendingAction(PendingMove.CALL, self.current_bet), "pre-called!", self.call
        )

    def pre_bet(self, player_id: str, amount: float) -> ActionResult:
        """Bet to ``amount`` when the turn comes up."""
        total = round_chips(amount)
        return self._queue(
            player_id,
            PendingAction(PendingMove.BET, total),
            f"pre-bet {total}!",
            lambda pid: self.bet(pid, total),
        )

    def _queue(
        self,
        player_id: str,
        pending: PendingAction,
        announcement: str,
        execute: Callable[[str], ActionResult],
    ) -> ActionResult:
        if not self.is_active:
            return self._reject(player_id, ActionError.GAME_NOT_ACTIVE, "No round in progress")
        player = self.get_player(player_id)
        if player is None:
            return self._reject(player_id, ActionError.PLAYER_NOT_FOUND, f"{player_id} is not at the table")
        if player_id in self._folded:
            return self._reject(player_id, ActionError.ALREADY_FOLDED, "You have already folded")

        current = self.current_player
        if current is None or current.player_id == player_id:
            return execute(player_id)

        player.pending_action = pending
        self.events.add(f"{player_id} {announcement}")
        return ActionResult.success(announcement)

    def _run_pending(self, player: Player) -> None:
        pending = player.pending_action
        player.pending_action = None
        logger.debug(f"Table {self.table_id}: running queued {pending.move.value} for {player.player_id}")

        if pending.move == PendingMove.CHECK:
            self._check(player)
        elif pending.move == PendingMove.FOLD:
            self._fold(player)
        elif pending.move == PendingMove.CALL:
            if pending.amount != self.current_bet:
                self.events.add(
                    f"{player.player_id}'s pre-call was cancelled, the bet is now {self.current_bet}"
                )
                return
            if player.current_bet == self.current_bet:
                self._check(player)
            else:
                self._call(player)
        elif pending.move == PendingMove.BET:
            self._bet(player, pending.amount)

    def pre_deal(self, player_id: str) -> ActionResult:
        """Start a round now, or as soon as the current one ends."""
        if not self.is_active:
            return self.start_round(player_id)
        if self.get_player(player_id) is None:
            return self._reject(player_id, ActionError.PLAYER_NOT_FOUND, f"{player_id} is not at the table")
        self.pre_deal_id = player_id
        self.events.add(f"{player_id} pre-dealt! The next round starts when this one ends")
        return ActionResult.success("Pre-dealt")

    def pre_nh(self, player_id: str) -> ActionResult:
        """Say "nh" (nice hand) to the table when the round ends."""
        return self._queue_sign_off(player_id, "nh")

    def pre_ah(self, player_id: str) -> ActionResult:
        """Say "ah" to the table when the round ends."""
        return self._queue_sign_off(player_id, "ah")

    def _queue_sign_off(self, player_id: str, word: str) -> ActionResult:
        if not self.is_active:
            return self._reject(player_id, ActionError.GAME_NOT_ACTIVE, "No round in progress")
        player = self.get_player(player_id)
        if player is None:
            return self._reject(player_id, ActionError.PLAYER_NOT_FOUND, f"{player_id} is not at the table")
        # a later sign-off replaces an earlier one
        player.sign_off = word
        self.events.add(f"{player_id} pre-{word}!")
        return ActionResult.success(f"pre-{word}!")

    # Showing and summaries

    def show_cards(self, player_id: str, reveal: bool = False) -> ActionResult:
        """Show a player their hole cards, or reveal them to the table."""
        player = self.get_player(player_id)
        if player is None:
            return self._reject(player_id, ActionError.PLAYER_NOT_FOUND, f"{player_id} is not at the table")
        if not player.hole_cards:
            return self._reject(player_id, ActionError.NO_CARDS, "No cards to show")

        description = f"{player_id}'s cards"
        if len(self._community_cards) >= 3:
            hand = self.evaluator.describe(player.hole_cards + self._community_cards)
            description = f"{player_id} has {hand}"
        if reveal:
            self.events.add(description, player.hole_cards)
        else:
            self.events.private(player_id, description, player.hole_cards)
        return ActionResult.success(description)

    def status_event(self) -> GameEvent:
        """Append a public summary of the table."""
        lines = [
            f"State: {self.state.label}",
            f"Pot: {self.pot}",
            f"Current bet: {self.current_bet}",
            f"Blinds: {self.small_blind}/{self.big_blind}",
        ]
        current = self.current_player
        for player in self._active:
            line = (
                f"{player.player_id}: {player.chips} chips, {player.total_bet} in this round, "
                f"bought in for {player.total_buy_in}"
            )
            if player.is_all_in:
                line += " (all-in)"
            if player.player_id in self._folded:
                line += " (folded)"
            if player is current:
                line += " <- to act"
            lines.append(line)
        for player in self._inactive:
            lines.append(f"{player.player_id}: {player.chips} chips (away)")
        return self.events.add("\n".join(lines), self._community_cards)

    def position_label(self, index: int) -> str:
        """Button and blind markers for a seat index, "+" joined."""
        n = len(self._active)
        if n == 0:
            return ""
        markers = []
        if index == self.dealer_position % n:
            markers.append("D")
        if index == (self.dealer_position + 1) % n:
            markers.append("SB")
        if index == (self.dealer_position + 2) % n:
            markers.append("BB")
        return "+".join(markers)

    def players_in_table_order(self) -> list[SeatView]:
        """Seats in the order they act on the current street."""
        n = len(self._active)
        if n == 0:
            return []
        offset = 3 if self.state == GameState.PRE_FLOP else 1
        first = (self.dealer_position + offset) % n
        current = self.current_player
        views = []
        for step in range(n):
            index = (first + step) % n
            player = self._active[index]
            views.append(SeatView(
                player_id=player.player_id,
                position=self.position_label(index),
                chips=player.chips,
                current_bet=player.current_bet,
                total_bet=player.total_bet,
                last_action=self._last_action(player),
                is_current=player is current,
                folded=player.player_id in self._folded,
            ))
        return views

    def _last_action(self, player: Player) -> str:
        if player.player_id in self._folded:
            return "Folded"
        if player.is_all_in:
            return "All-in"
        if not player.had_turn:
            return ""
        if player.current_bet == 0:
            return "Checked"
        return f"In for {player.current_bet}"

    # Snapshots

    def to_dict(self) -> dict:
        """Convert to a plain structural snapshot."""
        return {
            "table_id": self.table_id,
            "state": self.state.value,
            "deck": self.deck.to_dict(),
            "community_cards": [c.to_dict() for c in self._community_cards],
            "active_players": [p.to_dict() for p in self._active],
            "inactive_players": [p.to_dict() for p in self._inactive],
            "pot": self.pot,
            "dealer_position": self.dealer_position,
            "small_blind": self.small_blind,
            "big_blind": self.big_blind,
            "current_player_index": self.current_player_index,
            "folded_players": sorted(self._folded),
            "current_bet": self.current_bet,
            "last_raise": self.last_raise,
            "pre_deal_id": self.pre_deal_id,
        }

    @classmethod
    def from_dict(
        cls,
        data: dict,
        rng: Optional[random.Random] = None,
        evaluator: Optional[HandEvaluator] = None,
        blind_schedule: Optional[BlindSchedule] = None,
        max_players: Optional[int] = None,
        min_players: Optional[int] = None,
    ) -> "Table":
        """Restore a table from a snapshot.

        Collaborators are not part of the snapshot and are passed again.

        Raises:
            KeyError: If a required field is missing.
            ValueError: If a field holds an unknown enum value or card.
        """
        table = cls(
            table_id=data["table_id"],
            rng=rng,
            evaluator=evaluator,
            blind_schedule=blind_schedule,
            max_players=max_players,
            min_players=min_players,
        )
        table.state = GameState(data["state"])
        table.deck = Deck.from_dict(data["deck"], rng=rng)
        table._community_cards = [Card.from_dict(c) for c in data["community_cards"]]
        table._active = [Player.from_dict(p) for p in data["active_players"]]
        table._inactive = [Player.from_dict(p) for p in data["inactive_players"]]
        table.pot = data["pot"]
        table.dealer_position = data["dealer_position"]
        table.small_blind = data["small_blind"]
        table.big_blind = data["big_blind"]
        table.current_player_index = data["current_player_index"]
        table._folded = set(data["folded_players"])
        table.current_bet = data["current_bet"]
        table.last_raise = data["last_raise"]
        table.pre_deal_id = data.get("pre_deal_id")
        return table

    def to_json(self) -> str:
        """Encode the snapshot as JSON."""
        return json.dumps(self.to_dict(), sort_keys=True)

    @classmethod
    def from_json(cls, raw: str, **kwargs) -> "Table":
        """Decode a snapshot produced by ``to_json``."""
        return cls.from_dict(json.loads(raw), **kwargs)
