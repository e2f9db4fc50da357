import pytest

from sim.clock import ManualClock
from sim.plant import PlantState, MS_PER_HOUR
from sim.session import PlantSession, format_duration
from sim.storage import MemoryStore, PlantStore
from viz.ascii_render import TextScene
from viz.pixel_render import PixelScene

T0 = 1_700_000_000_000
MINUTE = 60_000


def make(state=None, cfg=None, t=T0):
    store = PlantStore(MemoryStore())
    if state is not None:
        store.save(state)
    clock = ManualClock(t)
    return PlantSession(store, clock=clock, cfg=cfg), store, clock


def test_new_session_plants_a_seed():
    session, store, _ = make()
    assert session.state.growth == 0
    assert session.state.created_at == T0
    assert store.load() is None  # nothing saved until the first change
    session.tick()
    assert store.load() == session.state


def test_session_resumes_saved_plant():
    saved = PlantState(T0 - MS_PER_HOUR, T0 - MS_PER_HOUR, growth=50, hydration=60, health=70)
    session, store, _ = make(saved)
    assert session.state == saved
    session.tick()
    assert session.state.hydration == pytest.approx(52)
    assert session.state.last_tick_at == T0
    assert store.load() == session.state


def test_water_action_then_zero_tick():
    session, store, _ = make(PlantState(T0, T0, growth=3, hydration=40, health=50))
    session.water()
    assert session.state.hydration == 65
    assert session.state.health == 54
    assert session.state.growth == 3
    assert session.message == 'Watered.'
    assert store.load() == session.state


def test_sunlight_action():
    session, _, clock = make(PlantState(T0, T0, hydration=70, health=85))
    session.sunlight()
    assert session.state.sunlight_boost_until == T0 + 30 * MINUTE
    assert session.state.health == 87
    assert session.message == 'Sunlight boost for 30 minutes.'


def test_reset_action():
    session, store, clock = make(PlantState(T0, T0, growth=200, hydration=10, health=20,
                                            sunlight_boost_until=T0 + MS_PER_HOUR))
    clock.advance(5000)
    session.reset()
    s = session.state
    assert (s.growth, s.hydration, s.health) == (0, 70, 85)
    assert s.sunlight_boost_until <= clock.now()
    assert s.created_at == T0 + 5000
    assert store.load() == s
    assert session.message == 'New seed planted.'


def test_dispatch():
    session, _, _ = make(PlantState(T0, T0, hydration=40, health=50))
    session.dispatch('water')
    assert session.state.hydration == 65
    with pytest.raises(ValueError):
        session.dispatch('fertilize')


def test_hourly_ticks_at_real_time():
    session, _, clock = make(PlantState(T0, T0, hydration=70, health=85))
    clock.advance_hours(1)
    session.tick()
    assert session.state.last_tick_at == T0 + MS_PER_HOUR
    assert session.state.hydration == pytest.approx(62)
    clock.advance_hours(0.5)
    session.tick()
    assert session.state.hydration == pytest.approx(58)


def test_fast_mode_scales_time():
    session, _, clock = make(PlantState(T0, T0, hydration=70, health=85))
    session.set_fast_mode(True)
    assert session.time_scale == 60
    clock.advance(MINUTE)
    session.tick()
    assert session.state.hydration == pytest.approx(62)


def test_fast_scale_from_config():
    session, _, _ = make(cfg={'session': {'fast_scale': 120, 'fast_mode': True}})
    assert session.time_scale == 120


def test_ascii_toggle_is_persisted():
    session, store, _ = make()
    assert session.ascii_mode is True
    assert session.toggle_ascii_mode() is False
    assert store.load_ascii_mode() is False
    assert isinstance(session.scene(), PixelScene)
    session.toggle_ascii_mode()
    assert isinstance(session.scene(), TextScene)


def test_status_fields():
    session, _, clock = make()
    clock.advance(90 * MINUTE)
    s = session.status(now=T0)
    assert s['stage'] == '1/6 — Seed'
    assert s['hydration'] == '70%'
    assert s['health'] == '85%'
    assert s['next'] == '2h 51m'
    assert s['age'] == '0s'
    assert session.status()['age'] == '1h 30m'


def test_status_needs_care_and_max():
    session, _, _ = make(PlantState(T0, T0, growth=20, hydration=0, health=3))
    assert session.status()['next'] == '— (needs care)'
    session, _, _ = make(PlantState(T0, T0, growth=240, hydration=70, health=85))
    assert session.status()['next'] == 'Max stage'
    assert session.status()['stage'] == '6/6 — Flower'


def test_run_ticks_on_interval():
    session, _, clock = make(cfg={'session': {'tick_interval_s': 10}})
    seen = []

    def fake_sleep(seconds):
        clock.advance(seconds * 1000)

    session.run(max_ticks=3, on_tick=lambda s: seen.append(s.state.last_tick_at), sleep=fake_sleep)
    assert seen == [T0, T0 + 10_000, T0 + 20_000, T0 + 30_000]


@pytest.mark.parametrize('ms,text', [
    (0, '0s'),
    (59_999, '59s'),
    (60_000, '1m'),
    (3_600_000 + 120_000, '1h 2m'),
    (2 * 86_400_000 + 5 * 3_600_000, '2d 5h'),
    (-5, '0s'),
])
def test_format_duration(ms, text):
    assert format_duration(ms) == text
