"""
Event Lab - Historical Market-Event Pattern Statistics

Scans daily price series for market events (percent moves, reversals,
sector spreads, momentum runs, volatility spikes, macro regimes and the
Turn-of-Year seasonal window), narrows them by market context and reports
what happened next over a ladder of forward timeframes.
"""

__version__ = "0.1.0"
__author__ = "Event Lab Team"
