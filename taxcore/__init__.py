"""
taxcore — Indian income-tax computation and advance-tax interest engine.

Entry points live in taxcore.engine.* (pure functions) and
taxcore.engine.tax_position (request-level facade).
"""
__version__ = "0.1.0"
