"""
Card recommendation service.

Responsibilities:
- Load the card, benefit and place catalogue and build the benefit index once.
- Resolve a selected place into its tags and rank the user's cards for it.
- Serve benefit search and per-category benefit listings for a card set.
- Cache ranking responses for a short time.
"""
