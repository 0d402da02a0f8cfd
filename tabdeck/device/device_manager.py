"""
Device management for touchscreen discovery and initialization.
"""

import logging
from typing import Dict, Optional

import evdev
from evdev import ecodes

logger = logging.getLogger(__name__)


class DeviceManager:
    """Finds a multitouch touchscreen and reads its coordinate ranges."""

    def __init__(self, name: Optional[str] = None):
        self.name = name
        self.device = None
        self.screen_width = 1920  # Default
        self.screen_height = 1080   # Default

    @staticmethod
    def _is_multitouch(abs_caps) -> bool:
        codes = [code for code, _ in abs_caps]
        return ecodes.ABS_MT_SLOT in codes and ecodes.ABS_MT_TRACKING_ID in codes

    def find_device(self):
        """Find the first multitouch device, optionally matching a name fragment."""
        for path in evdev.list_devices():
            device = evdev.InputDevice(path)
            if self.name and self.name.lower() not in device.name.lower():
                device.close()
                continue

            abs_caps = device.capabilities().get(ecodes.EV_ABS, [])
            if not self._is_multitouch(abs_caps):
                device.close()
                continue

            abs_info = {code: info for code, info in abs_caps}
            if ecodes.ABS_MT_POSITION_X in abs_info:
                self.screen_width = abs_info[ecodes.ABS_MT_POSITION_X].max + 1
            if ecodes.ABS_MT_POSITION_Y in abs_info:
                self.screen_height = abs_info[ecodes.ABS_MT_POSITION_Y].max + 1

            self.device = device
            logger.info(f"Found touchscreen: {device.name} at {path}")
            logger.info(f"Screen resolution: {self.screen_width}x{self.screen_height}")
            return device

        logger.error("No touchscreen device found")
        return None

    def get_device_info(self) -> Dict:
        """Get device and screen information."""
        return {
            'device': self.device,
            'name': self.device.name if self.device else None,
            'screen_width': self.screen_width,
            'screen_height': self.screen_height,
        }

    def close(self):
        if self.device:
            self.device.close()
            self.device = None
