"""Tests for the console status printer and the mute signal handler."""
import logging

from main import _StatusPrinter, _toggle_mute
from models import BatteryReading
from workers.engine import AlertEngine

from fakes import FakeSource, fake_resolver


class FlakySource(FakeSource):
    def __init__(self, *readings):
        super().__init__(*readings)
        self.broken = False

    def read(self):
        if self.broken:
            raise RuntimeError("sensor bus reset")
        return super().read()


def test_toggle_mute_flips_engine_state(alert_config, player, clock):
    engine = AlertEngine(alert_config, FakeSource(BatteryReading(10, False)), player, fake_resolver, clock)
    engine.tick()

    _toggle_mute(engine)
    assert engine.muted
    assert not engine.sounds.active

    _toggle_mute(engine)
    assert not engine.muted
    assert engine.sounds.active


def test_toggle_mute_logs_tick_errors(alert_config, player, clock, caplog):
    source = FlakySource(BatteryReading(50, False))
    engine = AlertEngine(alert_config, source, player, fake_resolver, clock)
    _toggle_mute(engine)

    source.broken = True
    with caplog.at_level(logging.ERROR):
        _toggle_mute(engine)   # unmute polls right away

    assert not engine.muted
    assert "Worker battery tick error: sensor bus reset" in caplog.text


def test_status_printer_logs_only_changes(alert_config, player, clock, caplog):
    source = FakeSource(BatteryReading(50, False))
    engine = AlertEngine(alert_config, source, player, fake_resolver, clock)
    engine.add_status_listener(_StatusPrinter())

    with caplog.at_level(logging.DEBUG, logger="battery_monitor.status"):
        engine.tick()
        engine.tick()
        source.set(49, False)
        engine.tick()

    infos = [r.getMessage() for r in caplog.records if r.levelno == logging.INFO]
    debugs = [r.getMessage() for r in caplog.records if r.levelno == logging.DEBUG]
    assert len(infos) == 2
    assert infos[0].startswith("50% | Discharging")
    assert len(debugs) == 3
    assert '"band":"MID_LOW"' in debugs[0]
