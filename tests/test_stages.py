from sim.stages import STAGES, stage_index, next_stage_need, remaining_growth, stage_label


def test_table_is_ordered_and_starts_at_zero():
    assert STAGES[0].need == 0
    needs = [s.need for s in STAGES]
    assert needs == sorted(set(needs))
    assert [s.name for s in STAGES] == ['Seed', 'Sprout', 'Stem', 'Leaves', 'Bushy', 'Flower']


def test_stage_index_monotonic():
    prev = 0
    g = 0.0
    while g < 300:
        idx = stage_index(g)
        assert idx >= prev
        prev = idx
        g += 0.5


def test_next_stage_need_and_remaining():
    assert next_stage_need(0) == 15
    assert next_stage_need(15) == 45
    assert remaining_growth(40) == 5
    # last stage points at its own threshold
    assert next_stage_need(999) == 230
    assert remaining_growth(999) == 0


def test_stage_label():
    assert stage_label(0) == '1/6 — Seed'
    assert stage_label(5) == '6/6 — Flower'
