"""
User profile (display name, bio).
"""
