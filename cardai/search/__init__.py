"""
Search query helpers.

Responsibilities:
- Map free-form Korean/English keywords to a benefit category or place tag.
- Expand a query with known brand synonyms and aliases before title matching.
"""
