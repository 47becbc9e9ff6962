"""
Account registration, login and bearer-token auth.
"""
