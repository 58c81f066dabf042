"""
Request and result models.

Immutable parameter sets for each event kind and the result structures
produced by the statistics layer. Follows the frozen-dataclass convention
used throughout the package.
"""
