"""
Countdown App - Live Event Countdown Timekeeping Service

Keeps the authoritative timeline of a single live event countdown: elapsed
and remaining time under pause/resume cycles, scheduled pauses, and the
administrative commands that move the countdown through its lifecycle.
"""

__version__ = "0.1.0"
__author__ = "Countdown Team"
