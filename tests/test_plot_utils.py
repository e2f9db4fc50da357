from sim.plant import PlantModel
from viz.plot_utils import plot_time_series, summarize

T0 = 1_700_000_000_000


def test_plot_and_summary(tmp_path):
    model = PlantModel()
    _, log = model.trace(model.new_plant(T0), hours=48, step_hours=1.0, water_every=3)
    out = plot_time_series(log, out_path=str(tmp_path / 'trace.png'), title='test')
    assert (tmp_path / 'trace.png').exists()
    assert out.endswith('trace.png')
    summary = summarize(log)
    assert summary['stage_reached_at']['Seed'] == 0
    assert 'Sprout' in summary['stage_reached_at']
    assert summary['final_growth'] == log['growth'][-1]
