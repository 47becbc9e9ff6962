"""
Dashboard statistics and streak calculation.
"""
