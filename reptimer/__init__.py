"""RepTimer — interval, head-to-head, stopwatch and breathing timers."""

__version__ = "0.1.0"
