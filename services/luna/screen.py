#!/usr/bin/env python3
"""
LUNA status screen
Main loop for the SSD1306 status display
"""
import sys
import time
import logging
from datetime import datetime

from luna import settings
from luna.display import Display, DisplayUnavailable
from luna.layout import render
from luna.messages import MessageScheduler, OllamaProvider
from luna.metrics import sample_snapshot
from luna.scroll import ScrollEngine

log = logging.getLogger(__name__)


class StatusScreen:
    def __init__(self, display, scheduler, sample=sample_snapshot,
                 clock=datetime.now, sleep=time.sleep):
        self.display = display
        self.scheduler = scheduler
        self.sample = sample
        self.clock = clock
        self.sleep = sleep
        self.scroll = ScrollEngine()

    def step(self, now=None):
        now = now or self.clock()
        snapshot = self.sample()
        message = self.scheduler.tick(now).text
        self.scroll.sync(message)
        frame = render(snapshot, message, self.scroll.offset)
        self.display.show(frame)
        self.scroll.advance(message)
        return frame

    def run(self):
        while True:
            self.step()
            self.sleep(settings.REFRESH_INTERVAL)


def main():
    """Main application loop"""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    try:
        display = Display.open()
    except DisplayUnavailable as e:
        log.error(f"Display unavailable: {e}")
        log.error("Enable I2C in raspi-config or /boot/firmware/config.txt and check the wiring")
        sys.exit(1)

    provider = OllamaProvider()
    screen = StatusScreen(display, MessageScheduler(provider))
    log.info("Starting LUNA status screen")
    try:
        screen.run()
    except KeyboardInterrupt:
        log.info("Stopped by user")
    finally:
        log.info("Cleaning up and exiting")
        provider.close()
        display.close()


if __name__ == "__main__":
    main()
