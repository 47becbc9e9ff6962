"""
Learning entries: listing, CRUD and orphan maintenance.
"""
