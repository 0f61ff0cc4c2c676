"""
Benefit indexing and recommendation engine.

Responsibilities:
- Estimate a comparable monetary value for each card benefit.
- Index benefits by card, category and place tag (plus a universal list).
- Resolve card-network tier benefits (VISA Infinite lounge, ...) for a place.
- Rank a user's cards for a place by aggregated benefit value.
"""
