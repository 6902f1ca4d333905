"""
engine — slab tables, tax calculator, refund, advance-tax interest and regime comparison.

Nothing is re-exported here; import from the submodules.
"""
