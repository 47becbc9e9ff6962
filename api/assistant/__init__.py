"""
AI summarization and journal chat.
"""
