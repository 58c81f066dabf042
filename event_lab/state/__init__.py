"""
Engine health state module.

Tracks per-engine success and failure counters so the coordinator can report
which analyses are currently available.
"""
