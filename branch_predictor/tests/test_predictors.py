"""
Tests for the bimodal, gshare and hybrid predictors.
"""

import random

import numpy as np
import pytest

from bpsim import ConfigurationError, PredictorConfig, create_predictor
from bpsim.predictors import (
    PREDICTORS,
    BimodalPredictor,
    GSharePredictor,
    HybridPredictor,
)


def random_trace(length, seed, addresses=32):
    rng = random.Random(seed)
    pcs = [0x400000 + 4 * rng.randrange(1024) for _ in range(addresses)]
    return [(rng.choice(pcs), rng.random() < 0.6) for _ in range(length)]


def table_values(table):
    return [value for _, value in table.contents()]


# ---------------------------------------------------------------------------
# Bimodal
# ---------------------------------------------------------------------------

def test_bimodal_taken_event_strengthens_counter():
    predictor = BimodalPredictor(PredictorConfig.bimodal(2))
    assert table_values(predictor.table) == [2, 2, 2, 2]

    correct = predictor.predict_and_update(0x4, True)

    assert correct is True
    assert table_values(predictor.table) == [2, 3, 2, 2]


def test_bimodal_not_taken_event_is_mispredicted_from_reset():
    predictor = BimodalPredictor(PredictorConfig.bimodal(2))

    correct = predictor.predict_and_update(0x0, False)

    assert correct is False
    assert table_values(predictor.table) == [1, 2, 2, 2]


def test_bimodal_single_global_counter():
    predictor = BimodalPredictor(PredictorConfig.bimodal(0))
    for address in (0x0, 0x4, 0x1000, 0xfffffffc):
        predictor.predict_and_update(address, False)
    assert table_values(predictor.table) == [0]


def test_bimodal_learns_a_biased_branch():
    predictor = BimodalPredictor(PredictorConfig.bimodal(4))
    predictor.predict_and_update(0x10, False)
    predictor.predict_and_update(0x10, False)
    assert predictor.predict(0x10) is False
    assert predictor.predict_and_update(0x10, False) is True


# ---------------------------------------------------------------------------
# GShare
# ---------------------------------------------------------------------------

def test_gshare_first_event():
    predictor = GSharePredictor(PredictorConfig.gshare(2, 2))
    assert predictor.history.value == 0

    correct = predictor.predict_and_update(0x4, True)

    assert correct is True
    assert table_values(predictor.table) == [2, 3, 2, 2]
    assert predictor.history.value == 0b10


def test_gshare_history_fills_with_taken_outcomes():
    predictor = GSharePredictor(PredictorConfig.gshare(8, 5))
    for i in range(5):
        predictor.predict_and_update(0x100 + 4 * i, True)
    assert predictor.history.value == 0b11111

    for i in range(5):
        predictor.predict_and_update(0x100 + 4 * i, False)
    assert predictor.history.value == 0


def test_gshare_history_changes_the_index():
    predictor = GSharePredictor(PredictorConfig.gshare(4, 2))
    before = predictor.index(0x40)
    predictor.predict_and_update(0x0, True)
    assert predictor.index(0x40) != before


def test_gshare_without_history_matches_bimodal():
    trace = random_trace(500, seed=7)
    gshare = GSharePredictor(PredictorConfig.gshare(6, 0))
    bimodal = BimodalPredictor(PredictorConfig.bimodal(6))
    for address, taken in trace:
        assert gshare.predict_and_update(address, taken) == \
            bimodal.predict_and_update(address, taken)
    np.testing.assert_array_equal(gshare.table.snapshot(), bimodal.table.snapshot())


# ---------------------------------------------------------------------------
# Hybrid
# ---------------------------------------------------------------------------

def test_hybrid_initial_state():
    predictor = HybridPredictor(PredictorConfig.hybrid(k=1, m1=2, n=1, m2=1))
    assert table_values(predictor.chooser) == [1, 1]
    assert table_values(predictor.gshare.table) == [2, 2, 2, 2]
    assert table_values(predictor.bimodal.table) == [2, 2]


def test_hybrid_first_event_trains_only_bimodal():
    predictor = HybridPredictor(PredictorConfig.hybrid(k=1, m1=2, n=1, m2=1))
    assert predictor.uses_gshare(0x0) is False

    correct = predictor.predict_and_update(0x0, True)

    assert correct is True
    assert table_values(predictor.bimodal.table) == [3, 2]
    assert table_values(predictor.gshare.table) == [2, 2, 2, 2]
    # Both sub-predictors were right, so the chooser holds
    assert table_values(predictor.chooser) == [1, 1]
    # History is updated even though gshare was not selected
    assert predictor.history.value == 1
    assert predictor.bimodal_selections == 1
    assert predictor.gshare_selections == 0


def test_hybrid_chooser_moves_towards_correct_predictor():
    predictor = HybridPredictor(PredictorConfig.hybrid(k=1, m1=2, n=1, m2=1))
    # Bias bimodal towards not taken so only gshare is right
    predictor.bimodal.table.decrement(0)

    correct = predictor.predict_and_update(0x0, True)

    assert correct is False
    assert table_values(predictor.chooser) == [2, 1]
    assert table_values(predictor.bimodal.table) == [2, 2]
    assert table_values(predictor.gshare.table) == [2, 2, 2, 2]

    # The chooser now selects gshare; history 1 folds into index 2
    assert predictor.uses_gshare(0x0) is True
    correct = predictor.predict_and_update(0x0, True)

    assert correct is True
    assert table_values(predictor.gshare.table) == [2, 2, 3, 2]
    assert table_values(predictor.bimodal.table) == [2, 2]
    assert table_values(predictor.chooser) == [2, 1]


def test_hybrid_chooser_moves_towards_bimodal():
    predictor = HybridPredictor(PredictorConfig.hybrid(k=2, m1=3, n=0, m2=3))
    # Only bimodal predicts not taken for index 0
    predictor.bimodal.table.decrement(0)

    predictor.predict_and_update(0x0, False)

    assert table_values(predictor.chooser) == [0, 1, 1, 1]


def test_hybrid_unselected_table_is_untouched():
    predictor = HybridPredictor(PredictorConfig.hybrid(k=3, m1=6, n=3, m2=5))
    for address, taken in random_trace(2000, seed=11, addresses=16):
        gshare_before = predictor.gshare.table.snapshot()
        bimodal_before = predictor.bimodal.table.snapshot()
        selected_gshare = predictor.uses_gshare(address)

        predictor.predict_and_update(address, taken)

        if selected_gshare:
            np.testing.assert_array_equal(predictor.bimodal.table.snapshot(), bimodal_before)
        else:
            np.testing.assert_array_equal(predictor.gshare.table.snapshot(), gshare_before)

    # The chooser actually selected gshare at some point during the run
    assert predictor.gshare_selections > 0


def test_hybrid_final_contents_order():
    predictor = HybridPredictor(PredictorConfig.hybrid(k=1, m1=2, n=1, m2=1))
    labels = [label for label, _ in predictor.final_contents()]
    assert labels == ['CHOOSER', 'GSHARE', 'BIMODAL']


# ---------------------------------------------------------------------------
# Shared behaviour
# ---------------------------------------------------------------------------

CONFIGS = [
    PredictorConfig.bimodal(6),
    PredictorConfig.gshare(8, 4),
    PredictorConfig.hybrid(k=4, m1=8, n=4, m2=6),
]


@pytest.mark.parametrize("config", CONFIGS, ids=str)
def test_replay_is_deterministic(config):
    trace = random_trace(3000, seed=3)

    first = create_predictor(config)
    second = create_predictor(config)
    for address, taken in trace:
        first.step(address, taken)
        second.step(address, taken)

    assert first.stats.mispredictions == second.stats.mispredictions
    assert first.final_contents() == second.final_contents()


@pytest.mark.parametrize("config", CONFIGS, ids=str)
def test_reset_restores_power_on_state(config):
    fresh = create_predictor(config)
    used = create_predictor(config)
    for address, taken in random_trace(500, seed=5):
        used.step(address, taken)

    used.reset()

    assert used.final_contents() == fresh.final_contents()
    assert used.stats.predictions == 0


@pytest.mark.parametrize("config", CONFIGS, ids=str)
def test_counters_stay_in_range(config):
    predictor = create_predictor(config)
    for address, taken in random_trace(3000, seed=17):
        predictor.step(address, taken)
    for _, contents in predictor.final_contents():
        assert all(0 <= value <= 3 for _, value in contents)


def test_stats_before_any_prediction():
    predictor = create_predictor(PredictorConfig.bimodal(2))
    assert predictor.stats.predictions == 0
    assert predictor.stats.misprediction_rate is None
    assert predictor.stats.accuracy is None
    assert "n/a" in str(predictor.stats)


def test_step_records_statistics():
    predictor = create_predictor(PredictorConfig.bimodal(2))
    predictor.step(0x4, True)
    predictor.step(0x0, False)
    assert predictor.stats.predictions == 2
    assert predictor.stats.mispredictions == 1
    assert predictor.stats.misprediction_rate == pytest.approx(50.0)


def test_hardware_cost():
    predictor = create_predictor(PredictorConfig.hybrid(k=2, m1=4, n=3, m2=3))
    cost = predictor.get_hardware_cost()
    assert cost['chooser_bits'] == 8
    assert cost['gshare_bits'] == 32
    assert cost['bimodal_bits'] == 16
    assert cost['history_bits'] == 3
    assert cost['total_bits'] == 59


def test_registry_covers_every_scheme():
    assert set(PREDICTORS) == {'bimodal', 'gshare', 'hybrid'}
    assert isinstance(create_predictor({'scheme': 'gshare', 'm1': 4, 'n': 2}),
                      GSharePredictor)


@pytest.mark.parametrize("config", [
    PredictorConfig('gshare', m1=2, n=3),
    PredictorConfig('hybrid', k=2, m1=4, n=5, m2=2),
    PredictorConfig('tournament', m1=4),
    PredictorConfig('bimodal'),
    PredictorConfig('bimodal', m2=64),
])
def test_bad_configuration_rejected_at_construction(config):
    with pytest.raises(ConfigurationError):
        create_predictor(config)


def test_predictor_rejects_other_scheme_config():
    with pytest.raises(ConfigurationError):
        BimodalPredictor(PredictorConfig.gshare(4, 2))
