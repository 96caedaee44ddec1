"""Tests for the orchestrator: phase transitions, rejections, provider fallback, stale responses."""
import asyncio

from pitch.errors import IllegalBid, IllegalCard, NotYourTurn, StaleResponse, WrongPhase
from pitch.game import Phase
from pitch.orchestrator import PitchConfig, PitchOrchestrator


class BrokenPolicy:
    def act(self, obs, legal_actions_mask):
        raise RuntimeError("model unavailable")


class IllegalPolicy:
    def act(self, obs, legal_actions_mask):
        return len(legal_actions_mask) + 5


class AsyncFirstLegalPolicy:
    def __init__(self):
        self.calls = 0

    async def act(self, obs, legal_actions_mask):
        self.calls += 1
        await asyncio.sleep(0)
        return next(i for i, ok in enumerate(legal_actions_mask) if ok)


def _bots_only(**kwargs) -> PitchOrchestrator:
    return PitchOrchestrator(PitchConfig(human_seats=(), seed=11), **kwargs)


def test_new_game_deals_and_opens_bidding():
    orch = PitchOrchestrator(PitchConfig(seed=1))
    assert orch.phase == Phase.WAITING
    assert orch.current_seat() is None

    result = orch.new_game()
    assert result.accepted
    snap = result.snapshot
    assert snap.phase == Phase.BIDDING
    assert snap.generation == 1
    assert snap.round is not None
    assert all(len(h) == 6 for h in snap.round.hands)
    assert snap.round.current_player == (snap.dealer + 1) % 4


def test_rejections_leave_snapshot_unchanged():
    orch = PitchOrchestrator(PitchConfig(human_seats=(0, 1, 2, 3), seed=2, randomize_dealer=False))
    orch.new_game()
    before = orch.snapshot()
    assert before.round is not None
    card = before.round.hands[1][0]

    wrong_phase = orch.submit_play(card, seat=1)
    assert not wrong_phase.accepted
    assert isinstance(wrong_phase.error, WrongPhase)
    assert wrong_phase.snapshot == before

    not_turn = orch.submit_bid(2, seat=3)
    assert isinstance(not_turn.error, NotYourTurn)
    assert not_turn.reason

    assert orch.submit_bid(3, seat=1).accepted
    low = orch.submit_bid(2, seat=2)
    assert isinstance(low.error, IllegalBid)
    bogus = orch.submit_bid(7, seat=2)
    assert isinstance(bogus.error, IllegalBid)
    assert orch.snapshot().round.current_player == 2

    assert orch.continue_round().error is not None


def test_card_strings_and_illegal_cards():
    orch = PitchOrchestrator(PitchConfig(human_seats=(0, 1, 2, 3), seed=4, randomize_dealer=False))
    orch.new_game()
    for seat in (1, 2, 3, 0):
        assert orch.submit_bid(0, seat=seat).accepted
    snap = orch.snapshot()
    assert snap.phase == Phase.PLAYING
    assert snap.round.bid_winner == 0
    assert snap.round.dealer_stuck

    garbled = orch.submit_play("ZZ", seat=0)
    assert isinstance(garbled.error, IllegalCard)
    held = {str(c) for c in snap.round.hands[0]}
    missing = next(f"{r}{s}" for r in "23456789TJQKA" for s in "CDHS" if f"{r}{s}" not in held)
    assert isinstance(orch.submit_play(missing, seat=0).error, IllegalCard)

    lead = str(snap.round.hands[0][0])
    assert orch.submit_play(lead, seat=0).accepted
    assert orch.snapshot().round.trump is not None


def test_human_seat_stops_the_bots():
    orch = PitchOrchestrator(PitchConfig(human_seats=(0,), seed=5, randomize_dealer=False))
    orch.new_game()
    snap = asyncio.run(orch.run_until_human())
    assert snap.phase == Phase.BIDDING
    assert orch.current_seat() == 0
    assert asyncio.run(orch.step_bot()) is None
    assert orch.submit_bid(0).accepted
    assert orch.phase == Phase.PLAYING


def test_full_bot_game_reaches_game_over():
    orch = _bots_only()
    orch.new_game()
    snap = asyncio.run(orch.run_until_human())
    assert snap.phase == Phase.GAME_OVER
    assert snap.winner in (0, 1)
    assert snap.scores[snap.winner] >= 11
    assert orch.current_seat() is None


def test_stale_response_is_discarded():
    orch = _bots_only()
    orch.new_game()
    pending = asyncio.run(orch.request_bot_action())
    assert pending is not None
    orch.reset()
    result = orch.apply_bot_action(pending)
    assert not result.accepted
    assert isinstance(result.error, StaleResponse)
    assert result.snapshot.phase == Phase.WAITING

    orch.new_game()
    pending = asyncio.run(orch.request_bot_action())
    orch.new_game()
    assert isinstance(orch.apply_bot_action(pending).error, StaleResponse)
    fresh = asyncio.run(orch.request_bot_action())
    assert orch.apply_bot_action(fresh).accepted


def test_provider_failure_falls_back_to_random():
    orch = _bots_only(bid_policy=BrokenPolicy(), play_policy=IllegalPolicy())
    orch.new_game()
    bot = asyncio.run(orch.request_bot_action())
    assert bot.phase == Phase.BIDDING
    assert bot.fallback
    assert orch.apply_bot_action(bot).accepted

    snap = asyncio.run(orch.run_until_human())
    assert snap.phase == Phase.GAME_OVER


def test_async_policy_is_awaited():
    policy = AsyncFirstLegalPolicy()
    orch = _bots_only(bid_policy=policy)
    orch.new_game()
    bot = asyncio.run(orch.request_bot_action())
    assert not bot.fallback
    assert bot.action == 0  # Pass is always the first legal action
    assert policy.calls == 1


def test_manual_continue_between_rounds():
    transitions = []
    orch = PitchOrchestrator(
        PitchConfig(human_seats=(), seed=9, auto_continue=False),
        on_transition=transitions.append,
    )
    orch.new_game()
    dealer = orch.snapshot().dealer
    generation = orch.generation

    snap = asyncio.run(orch.run_until_human())
    assert snap.phase == Phase.ROUND_SETTLED
    assert snap.last_settlement is not None
    assert snap.round.settlement == snap.last_settlement
    assert transitions[-1].phase == Phase.ROUND_SETTLED

    result = orch.continue_round()
    assert result.accepted
    assert result.snapshot.phase == Phase.BIDDING
    assert result.snapshot.dealer == (dealer + 1) % 4
    assert result.snapshot.round_number == 2
    assert orch.generation == generation + 1
    assert transitions[-1] == result.snapshot


def test_transitions_are_emitted_for_each_accepted_action():
    transitions = []
    orch = PitchOrchestrator(PitchConfig(human_seats=(0, 1, 2, 3), seed=3), on_transition=transitions.append)
    orch.new_game()
    assert [s.phase for s in transitions] == [Phase.BIDDING]
    orch.submit_bid(0, seat=(orch.snapshot().dealer + 2) % 4)  # out of turn
    assert len(transitions) == 1
    orch.submit_bid(0, seat=orch.current_seat())
    assert len(transitions) == 2
    orch.reset()
    assert transitions[-1].phase == Phase.WAITING


def test_autoplay_drives_human_seats():
    orch = PitchOrchestrator(PitchConfig(human_seats=(0, 1, 2, 3), seed=8, winning_score=5))
    orch.new_game()
    snap = asyncio.run(orch.run_until_human(autoplay=True))
    assert snap.phase == Phase.GAME_OVER


def test_think_delay_and_trump_fixed_for_the_round(monkeypatch):
    delays = []
    real_sleep = asyncio.sleep

    async def recording_sleep(delay, *args, **kwargs):
        delays.append(delay)
        return await real_sleep(delay, *args, **kwargs)

    monkeypatch.setattr(asyncio, "sleep", recording_sleep)
    transitions = []
    orch = PitchOrchestrator(
        PitchConfig(human_seats=(), seed=12, think_delay=0.001, auto_continue=False),
        on_transition=transitions.append,
    )
    orch.new_game()
    snap = asyncio.run(orch.run_until_human())
    assert snap.phase == Phase.ROUND_SETTLED

    # one pause per bot action: four bids and 24 cards
    assert delays.count(0.001) == 4 + 24
    trumps = [s.round.trump for s in transitions if s.round is not None and s.round.trump is not None]
    assert len(trumps) == 24
    assert len(set(trumps)) == 1


def test_answer_for_an_earlier_move_is_discarded():
    orch = _bots_only()
    orch.new_game()
    bot = asyncio.run(orch.request_bot_action())
    assert orch.apply_bot_action(bot).accepted
    again = orch.apply_bot_action(bot)
    assert not again.accepted
    assert isinstance(again.error, StaleResponse)
    assert again.snapshot.generation == bot.generation


def test_manual_move_makes_pending_autoplay_answer_stale():
    orch = PitchOrchestrator(PitchConfig(human_seats=(0, 1, 2, 3), seed=6, randomize_dealer=False))
    orch.new_game()
    pending = asyncio.run(orch.request_bot_action(autoplay=True))
    assert pending.seat == 1
    assert orch.submit_bid(0, seat=1).accepted
    before = orch.snapshot()
    result = orch.apply_bot_action(pending)
    assert isinstance(result.error, StaleResponse)
    assert result.snapshot == before
