# viz/plot_utils.py
"""
Plotting helpers for offline plant runs.

Expects a log dict of lists as produced by `PlantModel.trace`:
    {'time': [...], 'growth': [...], 'hydration': [...], 'health': [...], 'stage': [...]}
"""

import os
import logging

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from sim.stages import STAGES

logger = logging.getLogger(__name__)


def plot_time_series(log, out_path=None, title=None):
    """Resources on the left axis, growth with stage thresholds on the right."""
    time = log.get('time', list(range(len(log.get('growth', [])))))
    growth = log.get('growth', [])
    hydration = log.get('hydration', [])
    health = log.get('health', [])

    fig, ax1 = plt.subplots(figsize=(12, 6))
    ax1.plot(time, hydration, label='Hydration', color='tab:blue')
    ax1.plot(time, health, label='Health', color='tab:red')
    ax1.set_xlabel('Plant time (hours)')
    ax1.set_ylabel('Hydration / Health (%)')
    ax1.set_ylim(0, 105)
    ax1.legend(loc='upper left')

    ax2 = ax1.twinx()
    ax2.plot(time, growth, label='Growth', color='tab:green', linewidth=2)
    for stage in STAGES[1:]:
        ax2.axhline(stage.need, color='tab:green', linestyle=':', linewidth=0.8)
        ax2.annotate(stage.name, (time[0] if time else 0, stage.need), fontsize=8, color='tab:green')
    ax2.set_ylabel('Growth points')
    ax2.legend(loc='upper right')

    if title:
        fig.suptitle(title)

    if out_path:
        folder = os.path.dirname(out_path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        fig.savefig(out_path, dpi=150)
        plt.close(fig)
        logger.info("Saved plot to %s", out_path)
    else:
        plt.show()
    return out_path


def summarize(log):
    """Final values and the hour each stage was first reached."""
    stages = log.get('stage', [])
    time = log.get('time', [])
    reached = {}
    for t, s in zip(time, stages):
        name = STAGES[s].name
        if name not in reached:
            reached[name] = t
    return {
        'final_growth': log['growth'][-1] if log.get('growth') else 0.0,
        'final_hydration': log['hydration'][-1] if log.get('hydration') else 0.0,
        'final_health': log['health'][-1] if log.get('health') else 0.0,
        'stage_reached_at': reached,
    }
