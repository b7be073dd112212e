"""
Utility functions module.

Common helpers for instant arithmetic and clock access shared across the
timeline engine, the transition controller and the persistence layer.

Time Semantics:
- All instants are timezone-aware UTC datetimes
- All durations are integer milliseconds
- Elapsed time is always recomputed from absolute instants, never accumulated
"""
