"""
Console and debug file logging of deck events.
"""

import datetime
import logging
from typing import Optional

from ..core import events as ev

logger = logging.getLogger(__name__)


class DeckLogger:
    """EventBus subscriber printing one line per deck event."""

    def __init__(self, debug_file: Optional[str] = 'deck_debug.log', verbose: bool = False):
        self.verbose = verbose
        self.debug_file = None
        if debug_file:
            try:
                self.debug_file = open(debug_file, 'w')
                self.debug_file.write(f"Debug logging started at {datetime.datetime.now()}\n")
                self.debug_file.flush()
            except OSError as e:
                print(f"Warning: Could not open debug file: {e}")

    def __call__(self, event: ev.DeckEvent):
        self.log_event(event)

    def log_event(self, event: ev.DeckEvent):
        """Log an outbound deck event."""
        timestamp = datetime.datetime.now().strftime("%H:%M:%S.%f")[:-3]
        line = self.format_event(event)
        if line:
            print(f"[{timestamp}] {line}")

        if self.debug_file:
            try:
                self.debug_file.write(f"[{timestamp}] {event}\n")
                self.debug_file.flush()
            except OSError as e:
                logger.warning(f"Could not write to debug file: {e}")

    def format_event(self, event: ev.DeckEvent) -> Optional[str]:
        """Console line for an event, None for the ones only worth the debug file."""
        if isinstance(event, ev.ItemChanged):
            # Every drag step moves several items
            if not self.verbose:
                return None
            return f"   {event.item.title}: {event.position:.1f}px {event.state.value}"

        if isinstance(event, ev.Clicked):
            return f"👆 TAP: {event.item.title}"
        if isinstance(event, ev.PressStarted):
            return f"🤚 PRESS: {event.item.title}" if self.verbose else None
        if isinstance(event, ev.PressEnded):
            return f"✋ PRESS END: {event.item.title}" if self.verbose else None

        if isinstance(event, ev.FlingStarted):
            return f"💨 FLING: {int(event.distance)}px over {event.duration_ms}ms"
        if isinstance(event, ev.FlingCancelled):
            return "🛑 FLING CANCELLED"
        if isinstance(event, ev.FlingFinished):
            return "🏁 FLING FINISHED" if self.verbose else None

        if isinstance(event, ev.OvershootStarted):
            return f"↔️ OVERSHOOT: first item at {event.position:.1f}px"
        if isinstance(event, ev.TiltStart):
            return f"📐 TILT START: {event.angle:.2f}°"
        if isinstance(event, ev.TiltEnd):
            return f"📐 TILT END: {event.angle:.2f}°"
        if isinstance(event, (ev.RevertOvershootStart, ev.RevertOvershootEnd)):
            return "↩️ REVERT OVERSHOOT"

        if isinstance(event, ev.Swiped):
            return f"👋 SWIPE: {event.item.title} [{int(event.distance)}px]" if self.verbose else None
        if isinstance(event, ev.SwipeEnded):
            if event.remove:
                return f"🗑️ REMOVE: {event.item.title} [{event.velocity:.0f}px/s]"
            return f"↩️ KEEP: {event.item.title}"

        if isinstance(event, ev.SwitchingBetweenTabs):
            return f"🔀 SWITCHING: from tab {event.selected_index} [{int(event.distance)}px]"
        if isinstance(event, ev.SwitchingBetweenTabsEnded):
            if event.selection_changed:
                return f"🔀 SWITCHED: tab {event.previous_index} -> {event.selected_index}"
            return f"🔀 STAYED: tab {event.selected_index}"
        if isinstance(event, ev.PulledDown):
            return f"⬇️ PULLED DOWN: {int(event.distance)}px"

        return f"❓ {event.kind}"

    def close(self):
        """Close the debug file."""
        if self.debug_file:
            self.debug_file.close()
            self.debug_file = None
