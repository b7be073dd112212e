"""
Data parsing and wire codec module.

Parses administrator-supplied duration strings and converts the countdown
record to and from its camelCase wire document.
"""
