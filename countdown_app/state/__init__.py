"""
Countdown state machine module.

Holds the countdown record model, the pure timeline engine that turns a
record into visible countdown numbers, and the transition controller that
moves the record through NOT_STARTED → RUNNING ⇄ PAUSED → ENDED.
"""
