"""
Stall recommendation engine.

Responsibilities:
- Resolve a user's effective preferences, falling back to defaults.
- Measure walking distance from the user's block to each canteen.
- Drop stalls over the user's queue or distance limits.
- Score the rest on cuisine preference, proximity, queue time and rating.
- Return a ranked list of scored stalls ready for API serialisation.
"""
