"""
Tynda Backend — Pydantic Request/Response Schemas
==================================================

JSON keys are camelCase (`durationSeconds`, `coverUrl`, `createdAt`) and
record identity is exposed as `_id`. Python code uses snake_case field
names; `APIModel` maps between the two.
"""
