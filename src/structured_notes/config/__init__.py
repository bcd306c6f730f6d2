"""
Frozen settings and centralized tolerances.
"""
