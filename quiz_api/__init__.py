"""Quiz grading service."""
