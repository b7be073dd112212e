"""
Configuration module.

Frozen dataclass defaults, YAML/environment overrides and validation for
the countdown service.
"""
