"""
Market data module.

Canonical price series models, provider payload parsing, date alignment of
two series, and the provider interface used to fetch history.
"""
