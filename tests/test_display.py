"""Tests for display adapters."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from core.config import Settings
from core.errors import ConfigError
from models.events import Status
from services.display import ConsoleDisplay, LcdPlateDisplay, build_display


class FakeLcd:
    """Records what the Adafruit driver would be told."""

    def __init__(self):
        self.color = None
        self.message = None
        self.clears = 0

    def clear(self):
        self.clears += 1
        self.message = None


def test_lcd_busy_is_red_with_message():
    lcd = FakeLcd()
    display = LcdPlateDisplay(lcd=lcd)

    display.render(Status.BUSY)

    assert lcd.color == [100, 0, 0]
    assert lcd.message == "Meeting in\nProgress!"
    assert lcd.clears == 1
    assert display.current is Status.BUSY


def test_lcd_free_is_green():
    lcd = FakeLcd()
    display = LcdPlateDisplay(lcd=lcd)

    display.render(Status.FREE)

    assert lcd.color == [0, 100, 0]
    assert lcd.message == "I'm free!"


def test_lcd_off_blanks_screen():
    lcd = FakeLcd()
    display = LcdPlateDisplay(lcd=lcd)
    display.render(Status.BUSY)

    display.render(Status.OFF)

    assert lcd.color == [0, 0, 0]
    assert lcd.message is None
    assert display.current is Status.OFF


def test_lcd_teardown_clears_and_releases_bus():
    lcd = FakeLcd()
    i2c = MagicMock()
    display = LcdPlateDisplay(lcd=lcd, i2c=i2c)
    display.render(Status.FREE)

    display.clear()
    display.close()

    assert lcd.color == [0, 0, 0]
    assert display.current is None
    i2c.deinit.assert_called_once()


def test_error_status_is_not_renderable():
    with pytest.raises(ValueError):
        ConsoleDisplay().render(Status.ERROR)


def test_console_display_tracks_current(caplog):
    display = ConsoleDisplay()

    with caplog.at_level("INFO"):
        display.render(Status.BUSY)

    assert display.current is Status.BUSY
    assert "Meeting in Progress!" in caplog.text


def test_build_display():
    assert isinstance(build_display(Settings(display_backend="console")), ConsoleDisplay)

    with pytest.raises(ConfigError):
        build_display(SimpleNamespace(display_backend="neon"))
