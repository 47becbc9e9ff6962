"""
Row builders shared by unit tests.
"""

from datetime import date

TEST_USER_ID = 42


def make_entry_row(entry_id: int = 1, **overrides) -> dict:
    """
    Build a row shaped like the entries repository output.
    """
    row = {
        "entry_id": entry_id,
        "title": f"Entry {entry_id}",
        "category_name": "Math",
        "learning_date": date(2024, 5, 1),
        "notes_markdown": "Some **notes**",
        "difficulty_level": 3,
        "needs_revision": False,
        "created_at": None,
        "updated_at": None,
        "tags": ["x", "y"],
        "resources": ["http://a"],
    }
    row.update(overrides)
    return row
