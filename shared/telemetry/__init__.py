from .events import EventCategory, TelemetryEvent, build_event, scrub_attributes
from .logger import TelemetryLogger

__all__ = ["EventCategory", "TelemetryEvent", "TelemetryLogger", "build_event", "scrub_attributes"]
