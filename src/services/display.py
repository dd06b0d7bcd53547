"""
Display adapters: a logging console display and the Adafruit RGB LCD plate.
"""

import logging

from core.config import BUSY_MESSAGE, FREE_MESSAGE, Settings
from core.errors import ConfigError
from models.events import Status

logger = logging.getLogger(__name__)

# RGB backlight values for the LCD plate
COLORS = {
    Status.BUSY: (100, 0, 0),
    Status.FREE: (0, 100, 0),
    Status.OFF: (0, 0, 0),
}

MESSAGES = {
    Status.BUSY: BUSY_MESSAGE,
    Status.FREE: FREE_MESSAGE,
    Status.OFF: "",
}


def check_renderable(status: Status) -> None:
    if status not in MESSAGES:
        raise ValueError(f"Status {status.value!r} cannot be displayed")


class ConsoleDisplay:
    """Simulated display that logs what the LCD would show."""

    def __init__(self):
        self.current: Status | None = None

    def render(self, status: Status) -> None:
        check_renderable(status)
        text = MESSAGES[status].replace("\n", " ") or "(blank)"
        logger.info("Display [%s] %s", status.value.upper(), text)
        self.current = status

    def clear(self) -> None:
        logger.info("Display cleared")
        self.current = None

    def close(self) -> None:
        logger.info("Display closed")


class LcdPlateDisplay:
    """
    Adafruit 16x2 RGB character LCD plate on I2C.

    The hardware libraries are imported when the plate is opened, so the
    console backend works on machines without Blinka.
    """

    def __init__(self, address: int = 0x20, lcd=None, i2c=None):
        if lcd is None:
            import board
            import busio
            from adafruit_character_lcd.character_lcd_rgb_i2c import Character_LCD_RGB_I2C

            i2c = busio.I2C(board.SCL, board.SDA)
            lcd = Character_LCD_RGB_I2C(i2c, 16, 2, address=address)
        self.lcd = lcd
        self.i2c = i2c
        self.current: Status | None = None

    def render(self, status: Status) -> None:
        check_renderable(status)
        self.lcd.clear()
        self.lcd.color = list(COLORS[status])
        if MESSAGES[status]:
            self.lcd.message = MESSAGES[status]
        self.current = status

    def clear(self) -> None:
        """Blank the screen and switch the backlight off."""
        self.lcd.clear()
        self.lcd.color = [0, 0, 0]
        self.current = None

    def close(self) -> None:
        if self.i2c is not None:
            self.i2c.deinit()


def build_display(settings: Settings):
    """Create the display selected by DISPLAY_BACKEND."""
    if settings.display_backend == "console":
        return ConsoleDisplay()
    if settings.display_backend == "lcd":
        return LcdPlateDisplay(address=settings.lcd_i2c_address)
    raise ConfigError(f"Unknown DISPLAY_BACKEND '{settings.display_backend}'")
