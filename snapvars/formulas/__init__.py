"""
Formula families. Each module exposes a FORMULAS list collected by
snapvars.formulas.registry.
"""
