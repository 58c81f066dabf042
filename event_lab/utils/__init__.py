"""
Utility functions module.

Calendar helpers shared by the engines, the seasonal analyzer and the
contextual filters.

Date Semantics:
- Series dates are session dates (``datetime.date``), never timestamps
- "N trading days forward" is index arithmetic on the series
- Calendar-day windows are only used for regime filters and date snapping
"""
