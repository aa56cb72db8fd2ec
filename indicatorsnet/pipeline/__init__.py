from .core import compute_levels, acompute_levels
