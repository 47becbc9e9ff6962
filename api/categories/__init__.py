"""
Per-user category listing.
"""
