import logging

from PIL import Image, ImageDraw, ImageFont

from luna import settings

log = logging.getLogger(__name__)


class DisplayUnavailable(Exception):
    pass


def load_font(path=settings.FONT_PATH, size=settings.FONT_SIZE):
    try:
        return ImageFont.truetype(path, size)
    except OSError as e:
        log.warning(f"Could not load font {path}: {e}")
        return ImageFont.load_default()


def draw_frame(frame, font):
    image = Image.new("1", (settings.WIDTH, settings.HEIGHT))
    draw = ImageDraw.Draw(image)
    for item in frame:
        draw.text((item.x, item.y), item.text, font=font, fill=255)
    return image


# -------------------------------
# Hardware probing
# -------------------------------
def probe_gpio():
    from gpiozero import GPIOZeroError, pi_info
    try:
        info = pi_info()
    except (GPIOZeroError, OSError, ValueError, RuntimeError) as e:
        raise DisplayUnavailable(f"GPIO not supported on this system: {e}") from e
    log.info(f"GPIO support detected ({info.model})")


def open_i2c_device():
    try:
        import board
        import busio
        from adafruit_ssd1306 import SSD1306_I2C
        i2c = busio.I2C(board.SCL, board.SDA)
    except (ImportError, RuntimeError, OSError, ValueError) as e:
        raise DisplayUnavailable(f"I2C not available: {e}") from e
    try:
        device = SSD1306_I2C(settings.WIDTH, settings.HEIGHT, i2c, addr=settings.I2C_ADDR)
    except (OSError, ValueError, RuntimeError) as e:
        i2c.deinit()
        raise DisplayUnavailable(f"No SSD1306 at 0x{settings.I2C_ADDR:02X}: {e}") from e
    log.info(f"I2C support detected, SSD1306 at 0x{settings.I2C_ADDR:02X}")
    return i2c, device


# -------------------------------
# Display sink
# -------------------------------
class Display:
    """Pushes frames to an SSD1306 (anything with image/fill/show)."""

    def __init__(self, device, font=None, bus=None):
        self.device = device
        self.font = font or load_font()
        self.bus = bus

    @classmethod
    def open(cls):
        probe_gpio()
        bus, device = open_i2c_device()
        return cls(device, bus=bus)

    def show(self, frame):
        self.device.image(draw_frame(frame, self.font))
        self.device.show()

    def clear(self):
        self.device.fill(0)
        self.device.show()

    def close(self):
        try:
            self.clear()
        finally:
            if self.bus is not None:
                self.bus.deinit()
                self.bus = None
