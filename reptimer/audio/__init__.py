"""Audio/vibration cue package."""

from .cues import BeepType, Cue, CueDispatcher, BEEP_FREQUENCIES, VIBRATION_PATTERNS

__all__ = ["BeepType", "Cue", "CueDispatcher", "BEEP_FREQUENCIES", "VIBRATION_PATTERNS"]
