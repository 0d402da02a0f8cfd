"""
Touchscreen listener feeding evdev multitouch input into a TouchArbiter.
"""

import logging
import threading
import time
from typing import Callable, Dict, List, Optional

from evdev import ecodes

from ..config.settings import DeckConfig
from ..device.device_manager import DeviceManager
from ..gestures.touch_arbiter import TouchArbiter
from .geometry import DeckGeometry
from .types import PointerAction, PointerEvent

logger = logging.getLogger(__name__)


class TouchListener:
    """Decodes multitouch slots into pointer events for the primary finger.

    The first finger placed drives the gesture; further fingers are ignored
    while it is down. Periodic callbacks (fling playback) run on
    a ticker thread under the same lock as event dispatch.
    """

    def __init__(self, arbiter: TouchArbiter, geometry: Optional[DeckGeometry] = None,
                 config: Optional[DeckConfig] = None, device_name: Optional[str] = None):
        self.arbiter = arbiter
        self.geometry = geometry
        self.config = config or DeckConfig()
        self.device_manager = DeviceManager(device_name)

        # State management
        self.running = False
        self.current_slot = 0
        self.slot_data: Dict[int, Dict] = {}  # slot -> {'id', 'x', 'y', flags}
        self.primary_slot: Optional[int] = None
        self.tickers: List[Callable[[], object]] = []

        # Thread management
        self.thread = None
        self.tick_thread = None
        self.state_lock = threading.Lock()

    def add_ticker(self, ticker: Callable[[], object]):
        """Run a callable every FLING_TICK_INTERVAL milliseconds while listening."""
        self.tickers.append(ticker)

    def start(self) -> bool:
        """Start the touchscreen listener."""
        device = self.device_manager.find_device()
        if not device:
            print("❌ No touchscreen found")
            return False

        self.running = True
        self._print_startup_info(self.device_manager.get_device_info())

        self.thread = threading.Thread(target=self._event_loop)
        self.thread.daemon = True
        self.thread.start()

        self.tick_thread = threading.Thread(target=self._tick_loop)
        self.tick_thread.daemon = True
        self.tick_thread.start()

        return True

    def stop(self):
        """Stop the touchscreen listener."""
        self.running = False
        if self.thread:
            self.thread.join(timeout=1)
        if self.tick_thread:
            self.tick_thread.join(timeout=1)
        self.device_manager.close()

    def _print_startup_info(self, device_info: Dict):
        print(f"✅ Found: {device_info['name']}")
        print(f"📺 Screen: {device_info['screen_width']}x{device_info['screen_height']}")
        print(f"📏 Drag threshold: {self.config.DRAG_THRESHOLD}px")
        print(f"📏 Swipe threshold: {self.config.SWIPE_THRESHOLD}px")
        print(f"💨 Min fling velocity: {self.config.MIN_FLING_VELOCITY}px/s")
        print("🎯 Ready! Drag, fling, swipe or tap the deck.")

    def _event_loop(self):
        """Main event processing loop."""
        try:
            event_batch = []
            for event in self.device_manager.device.read_loop():
                if not self.running:
                    break

                event_batch.append(event)

                if event.type == ecodes.EV_SYN and event.code == ecodes.SYN_REPORT:
                    with self.state_lock:
                        self._process_event_batch(event_batch, time.monotonic())
                    event_batch = []

        except KeyboardInterrupt:
            pass
        except OSError as e:
            logger.error(f"Error in event loop: {e}")

    def _tick_loop(self):
        """Periodic driver for fling playback."""
        interval = self.config.FLING_TICK_INTERVAL / 1000.0
        while self.running:
            time.sleep(interval)
            with self.state_lock:
                for ticker in self.tickers:
                    ticker()

    def _process_event_batch(self, event_batch, timestamp: float):
        """Apply a SYN_REPORT batch and dispatch the resulting pointer events."""
        for ev in event_batch:
            if ev.type == ecodes.EV_ABS:
                self._handle_abs_event(ev)

        for event in self._pointer_events(timestamp):
            self.arbiter.dispatch(event)

    def _handle_abs_event(self, ev):
        """Handle absolute coordinate events."""
        if ev.code == ecodes.ABS_MT_SLOT:
            self.current_slot = ev.value
        elif ev.code == ecodes.ABS_MT_TRACKING_ID:
            self._handle_tracking_id(ev.value)
        elif ev.code == ecodes.ABS_MT_POSITION_X:
            self._handle_position(ev.value, 'x')
        elif ev.code == ecodes.ABS_MT_POSITION_Y:
            self._handle_position(ev.value, 'y')

    def _handle_tracking_id(self, value: int):
        """Handle finger tracking ID changes."""
        slot = self.current_slot

        if value == -1:
            # Finger lifted
            if slot in self.slot_data:
                self.slot_data[slot]['lifted'] = True
        else:
            # Finger placed
            self.slot_data[slot] = {'id': value, 'x': 0, 'y': 0,
                                    'placed': True, 'moved': False, 'lifted': False}
            if self.primary_slot is None:
                self.primary_slot = slot

    def _handle_position(self, value: int, coordinate: str):
        slot = self.current_slot
        if slot in self.slot_data:
            self.slot_data[slot][coordinate] = value
            self.slot_data[slot]['moved'] = True

    def _project(self, data: Dict):
        if self.geometry is None:
            if self.config.DRAG_AXIS == 'x':
                return float(data['x']), float(data['y'])
            return float(data['y']), float(data['x'])
        return self.geometry.project(data['x'], data['y'], self.config.DRAG_AXIS)

    def _pointer_events(self, timestamp: float) -> List[PointerEvent]:
        """Turn the state of the primary slot into pointer events."""
        events = []
        slot = self.primary_slot
        data = self.slot_data.get(slot) if slot is not None else None

        if data is not None:
            axis, orthogonal = self._project(data)
            if data['placed']:
                action = PointerAction.DOWN
            elif data['lifted']:
                action = PointerAction.UP
            elif data['moved']:
                action = PointerAction.MOVE
            else:
                action = None

            if action is not None:
                events.append(PointerEvent(data['id'], action, axis, orthogonal, timestamp))
            if data['placed'] and data['lifted']:
                events.append(PointerEvent(data['id'], PointerAction.UP, axis, orthogonal,
                                           timestamp))
            data['placed'] = False
            data['moved'] = False

        # Forget lifted fingers; the next finger placed becomes primary
        for lifted in [s for s, d in self.slot_data.items() if d['lifted']]:
            del self.slot_data[lifted]
            if lifted == self.primary_slot:
                self.primary_slot = None
        return events
