"""
Export, import and clear-all of a user's journal.
"""
