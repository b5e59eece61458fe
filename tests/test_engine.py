"""OrderEngine tests — reactive recomputation over a live answer set.

Covers the necklace end-to-end flow (select → gift allowance unlocked →
deselect → gifts trimmed), listener notification, the selection-time
guard in toggle_option, and evaluate() purity.
"""

import pytest

from giftform_rules.engine import OrderEngine, evaluate
from giftform_rules.models.order import GiftStatus

NECKLACE = "question_neck"
GIFT = "question_gift"


@pytest.fixture
def engine(necklace_index):
    return OrderEngine(necklace_index)


# =====================================================================
# End-to-end
# =====================================================================

def test_necklace_unlocks_and_revokes_gift(engine):
    assert engine.total == 0
    assert engine.max_selections("gift") == 0

    state = engine.set_answer(NECKLACE, "$1000 necklace")
    assert state.total == 1000
    assert engine.max_selections("gift") == 1

    engine.toggle_option("gift", "A")
    assert engine.answers[GIFT] == ["A"]

    state = engine.clear_answer(NECKLACE)
    assert state.total == 0
    assert engine.max_selections("gift") == 0
    assert engine.answers[GIFT] == []
    assert state.section("gift").selections == []


def test_gift_section_price_never_counted(engine):
    # The gift title carries "$999"; gift picks must not add to the total
    engine.set_answer(NECKLACE, "$1000 necklace")
    engine.toggle_option("gift", "A")
    assert engine.total == 1000


def test_initial_answers_are_enforced(necklace_index):
    engine = OrderEngine(necklace_index, {NECKLACE: "$1000 necklace", GIFT: ["A", "B", "C"]})
    assert engine.answers[GIFT] == ["A"]
    assert engine.state.section("gift").status is GiftStatus.ACTIVE


def test_replace_answers_trims_over_selection(engine):
    state = engine.replace_answers({GIFT: ["C", "B"]})
    assert state.total == 0
    assert engine.answers[GIFT] == []


# =====================================================================
# toggle_option guard
# =====================================================================

def test_toggle_refuses_option_past_limit(engine):
    engine.set_answer(NECKLACE, "$1000 necklace")
    engine.toggle_option("gift", "A")

    assert engine.is_option_selectable("gift", "B") is False
    state = engine.toggle_option("gift", "B")

    assert engine.answers[GIFT] == ["A"]
    assert state.section("gift").disabled_options == ["B", "C"]


def test_toggle_removes_selected_option_at_limit(engine):
    engine.set_answer(NECKLACE, "$1000 necklace")
    engine.toggle_option("gift", "A")
    engine.toggle_option("gift", "A")
    assert engine.answers[GIFT] == []


def test_toggle_on_regular_question(engine):
    engine.toggle_option("neck", "$1000 necklace")
    assert engine.answers[NECKLACE] == ["$1000 necklace"]
    assert engine.total == 1000


def test_max_selections_unknown_section(engine):
    with pytest.raises(KeyError):
        engine.max_selections("neck")


def test_non_gift_option_always_selectable(engine):
    assert engine.is_option_selectable("neck", "$1000 necklace") is True


# =====================================================================
# Listeners
# =====================================================================

def test_listener_receives_each_state(engine):
    seen = []
    engine.subscribe(lambda s: seen.append(s.total))

    engine.set_answer(NECKLACE, "$1000 necklace")
    engine.clear_answer(NECKLACE)

    assert seen == [1000, 0]


def test_unsubscribe_stops_notifications(engine):
    seen = []
    unsubscribe = engine.subscribe(lambda s: seen.append(s.total))
    engine.set_answer(NECKLACE, "$1000 necklace")
    unsubscribe()
    engine.clear_answer(NECKLACE)

    assert seen == [1000]


def test_refused_toggle_does_not_notify(engine):
    seen = []
    engine.subscribe(lambda s: seen.append(s.total))
    engine.toggle_option("gift", "A")
    assert seen == []


# =====================================================================
# evaluate()
# =====================================================================

def test_evaluate_does_not_mutate_input(necklace_index):
    answers = {GIFT: ["A", "B"]}
    state, enforced = evaluate(necklace_index, answers)

    assert answers == {GIFT: ["A", "B"]}
    assert enforced[GIFT] == []
    assert state.section("gift").status is GiftStatus.BELOW_FIRST_TIER


def test_evaluate_is_idempotent(necklace_index):
    answers = {NECKLACE: "$1000 necklace", GIFT: ["B"]}
    first, _ = evaluate(necklace_index, answers)
    second, _ = evaluate(necklace_index, answers)
    assert first == second


def test_selected_items_count_excludes_gifts(necklace_index):
    state, _ = evaluate(necklace_index, {NECKLACE: "$1000 necklace", GIFT: ["A"]})
    assert state.selected_items_count == 1


def test_state_section_unknown_id(necklace_index):
    state, _ = evaluate(necklace_index, {})
    with pytest.raises(KeyError):
        state.section("neck")
