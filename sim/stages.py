# sim/stages.py
"""
Stage table for the virtual plant.

Stages are ordered by the growth points needed to reach them. The first
stage needs 0 so every non-negative growth value maps to a stage.
"""

from collections import namedtuple

StageDefinition = namedtuple('StageDefinition', ['name', 'need'])

STAGES = (
    StageDefinition('Seed', 0),
    StageDefinition('Sprout', 15),
    StageDefinition('Stem', 45),
    StageDefinition('Leaves', 90),
    StageDefinition('Bushy', 150),
    StageDefinition('Flower', 230),
)

MAX_STAGE = len(STAGES) - 1


def stage_index(growth, stages=STAGES):
    """Largest index whose threshold is <= growth."""
    idx = 0
    for i, stage in enumerate(stages):
        if growth >= stage.need:
            idx = i
    return idx


def next_stage_need(growth, stages=STAGES):
    """Threshold of the following stage (the last threshold once maxed out)."""
    idx = stage_index(growth, stages)
    return stages[min(idx + 1, len(stages) - 1)].need


def remaining_growth(growth, stages=STAGES):
    return max(0.0, next_stage_need(growth, stages) - growth)


def stage_label(idx, stages=STAGES):
    return f"{idx + 1}/{len(stages)} — {stages[idx].name}"
