from __future__ import annotations

import random

import pytest

from auticare.engine.config import get_scoring_config
from auticare.engine.contributors import rank
from auticare.engine.normalizer import AnswerValue, answers_from_mapping, normalize, round_half_up
from auticare.engine.scoring import AdjustmentFlags, aggregate, family_history_flag
from auticare.engine.severity import SeverityLevel, classify
from auticare.errors import InsufficientDataError, InvalidAnswerError, OutOfRangeError


LABELS = [v.value for v in AnswerValue]


# -------------------------
# NORMALIZER
# -------------------------
def test_normalize_scale_is_strictly_increasing():
    values = [normalize(label) for label in LABELS]
    assert values == [0, 1, 2, 3, 4]


def test_normalize_accepts_enum_and_loose_labels():
    assert normalize(AnswerValue.OFTEN) == 3
    assert normalize(" Always ") == 4


@pytest.mark.parametrize("bad", ["", "sometime", "yes", 3, None])
def test_normalize_rejects_values_outside_vocabulary(bad):
    with pytest.raises(InvalidAnswerError):
        normalize(bad)


def test_answers_from_mapping_names_the_bad_question():
    with pytest.raises(InvalidAnswerError) as exc:
        answers_from_mapping({"q1": "never", "q2": "maybe"})
    assert exc.value.question_id == "q2"


def test_round_half_up_does_not_use_bankers_rounding():
    assert round_half_up(12.5) == 13
    assert round_half_up(0.5) == 1
    assert round_half_up(2.4999) == 2


# -------------------------
# AGGREGATOR
# -------------------------
def test_aggregate_half_and_half(two_question_config):
    weights = two_question_config.role("individual").weights
    answers = answers_from_mapping({"q1": "always", "q2": "never"})
    assert aggregate(answers, weights) == 50


def test_aggregate_excludes_unanswered_from_denominator(two_question_config):
    weights = two_question_config.role("individual").weights
    answers = answers_from_mapping({"q1": "always"})
    assert aggregate(answers, weights) == 100


def test_aggregate_rounds_half_up(two_question_config):
    weights = two_question_config.role("individual").weights
    # (1 + 0) / 2 / 4 * 100 = 12.5
    answers = answers_from_mapping({"q1": "rarely", "q2": "never"})
    assert aggregate(answers, weights) == 13


def test_aggregate_uses_weights(config_factory):
    weights = config_factory({"q1": 3, "q2": 1}).role("individual").weights
    # (4*3 + 0*1) / 4 / 4 * 100 = 75
    answers = answers_from_mapping({"q1": "always", "q2": "never"})
    assert aggregate(answers, weights) == 75


def test_aggregate_empty_set_is_not_zero(two_question_config):
    with pytest.raises(InsufficientDataError):
        aggregate([], two_question_config.role("individual").weights)


def test_aggregate_rejects_role_mismatch(two_question_config):
    answers = answers_from_mapping({"q1": "often", "par_1": "often"})
    with pytest.raises(InsufficientDataError):
        aggregate(answers, two_question_config.role("individual").weights)


def test_family_history_boost_is_additive_then_clamped(config_factory):
    cfg = config_factory({"p1": 1, "p2": 1}, family="p2", boost=10)
    weights = cfg.role("parent").weights

    answers = answers_from_mapping({"p1": "never", "p2": "always"})
    assert aggregate(answers, weights) == 50
    assert aggregate(answers, weights, AdjustmentFlags(family_history=True), 10) == 60

    maxed = answers_from_mapping({"p1": "always", "p2": "always"})
    assert aggregate(maxed, weights, AdjustmentFlags(family_history=True), 10) == 100


def test_family_history_flag_only_fires_on_configured_answer(config_factory):
    cfg = config_factory({"p1": 1, "p2": 1}, family="p2")
    parent = cfg.role("parent")

    assert family_history_flag(parent, answers_from_mapping({"p2": "always"})) is True
    assert family_history_flag(parent, answers_from_mapping({"p2": "often"})) is False
    assert family_history_flag(parent, answers_from_mapping({"p1": "always"})) is False
    # individual role has no trigger configured
    assert family_history_flag(cfg.role("individual"), answers_from_mapping({"p2": "always"})) is False


def test_builtin_parent_table_triggers_on_par_20():
    parent = get_scoring_config().role("parent")
    assert family_history_flag(parent, answers_from_mapping({"par_20": "always"})) is True


@pytest.mark.parametrize("role", ["individual", "parent", "clinician"])
def test_aggregate_stays_in_range_for_random_answer_sets(role):
    cfg = get_scoring_config()
    role_cfg = cfg.role(role)
    ids = [q.id for q in role_cfg.questions]
    rng = random.Random(f"range-{role}")

    for _ in range(200):
        picked = rng.sample(ids, rng.randint(1, len(ids)))
        answers = answers_from_mapping({qid: rng.choice(LABELS) for qid in picked})
        flags = AdjustmentFlags(family_history=rng.random() < 0.5)
        score = aggregate(answers, role_cfg.weights, flags, cfg.family_history_boost)
        assert isinstance(score, int)
        assert 0 <= score <= 100


def test_omitting_a_question_sits_between_never_and_always():
    role_cfg = get_scoring_config().role("individual")
    ids = [q.id for q in role_cfg.questions]
    rng = random.Random("omit")

    for _ in range(50):
        base = {qid: rng.choice(LABELS) for qid in ids}
        target = rng.choice(ids)
        omitted = {k: v for k, v in base.items() if k != target}

        s_omit = aggregate(answers_from_mapping(omitted), role_cfg.weights)
        s_never = aggregate(answers_from_mapping({**omitted, target: "never"}), role_cfg.weights)
        s_always = aggregate(answers_from_mapping({**omitted, target: "always"}), role_cfg.weights)

        assert s_never <= s_omit <= s_always


def test_aggregate_is_deterministic():
    role_cfg = get_scoring_config().role("parent")
    answers = answers_from_mapping({q.id: "often" for q in role_cfg.questions[:7]})
    assert len({aggregate(answers, role_cfg.weights) for _ in range(5)}) == 1


# -------------------------
# CONTRIBUTOR RANKER
# -------------------------
def test_rank_orders_by_contribution_with_stable_ties(config_factory):
    cfg = config_factory(
        {"q1": 1, "q2": 2, "q3": 1, "q4": 1},
        categories={"q1": "sensory", "q2": "routine", "q3": "attention", "q4": "development"},
    )
    role_cfg = cfg.role("individual")
    # contributions: q1=4, q2=2*2=4, q3=3, q4=4
    answers = answers_from_mapping({"q4": "always", "q3": "often", "q2": "sometimes", "q1": "always"})

    out = rank(answers, role_cfg, cfg)

    assert [c.question_id for c in out] == ["q1", "q2", "q4"]
    assert [c.contribution for c in out] == [4.0, 4.0, 4.0]
    assert out[0].question == "Question q1"
    assert out[0].action == cfg.actions["sensory"]
    assert out[1].action == cfg.actions["routine"]


def test_rank_caps_at_k_and_is_sorted():
    cfg = get_scoring_config()
    role_cfg = cfg.role("parent")
    rng = random.Random("rank")
    order = role_cfg.order

    for _ in range(50):
        answers = answers_from_mapping({q.id: rng.choice(LABELS) for q in role_cfg.questions})
        out = rank(answers, role_cfg, cfg)
        assert len(out) <= cfg.top_k
        keys = [(-c.contribution, order[c.question_id]) for c in out]
        assert keys == sorted(keys)


def test_rank_skips_never_answers(two_question_config):
    role_cfg = two_question_config.role("individual")
    answers = answers_from_mapping({"q1": "never", "q2": "never"})
    assert rank(answers, role_cfg, two_question_config) == []


def test_rank_falls_back_to_default_action(config_factory):
    cfg = config_factory({"q1": 1}, categories={"q1": "uncatalogued"})
    out = rank(answers_from_mapping({"q1": "often"}), cfg.role("individual"), cfg)
    assert out[0].action == cfg.default_action


def test_rank_does_not_change_the_aggregate(two_question_config):
    role_cfg = two_question_config.role("individual")
    answers = answers_from_mapping({"q1": "often", "q2": "rarely"})
    before = aggregate(answers, role_cfg.weights)
    rank(answers, role_cfg, two_question_config, k=1)
    assert aggregate(answers, role_cfg.weights) == before


# -------------------------
# SEVERITY CLASSIFIER
# -------------------------
@pytest.mark.parametrize(
    "score,level",
    [
        (0, SeverityLevel.LOW),
        (24, SeverityLevel.LOW),
        (25, SeverityLevel.MILD),
        (49, SeverityLevel.MILD),
        (50, SeverityLevel.MODERATE),
        (74, SeverityLevel.MODERATE),
        (75, SeverityLevel.HIGH),
        (100, SeverityLevel.HIGH),
    ],
)
def test_classify_band_boundaries(score, level):
    assert classify(score, get_scoring_config().bands).level == level


def test_classify_is_monotonic_over_whole_domain():
    bands = get_scoring_config().bands
    ranks = [classify(s, bands).level.rank for s in range(101)]
    assert ranks == sorted(ranks)
    assert ranks[0] == 0 and ranks[-1] == 3


def test_classify_carries_label_and_next_steps():
    sev = classify(80, get_scoring_config().bands)
    assert sev.label == "High Indicators"
    assert "Seek clinical assessment immediately" in sev.recommendations
    assert sev.schedule_tasks == 4


def test_classify_reports_band_range():
    bands = get_scoring_config().bands
    assert (classify(30, bands).lower, classify(30, bands).upper) == (25, 49)
    assert (classify(100, bands).lower, classify(100, bands).upper) == (75, 100)
    for s in range(101):
        assert classify(s, bands).contains(s)


@pytest.mark.parametrize("bad", [-1, 101, 50.5, True, None])
def test_classify_rejects_out_of_range(bad):
    with pytest.raises(OutOfRangeError):
        classify(bad, get_scoring_config().bands)
