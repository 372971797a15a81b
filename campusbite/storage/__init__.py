"""
In-memory campus data store.

Responsibilities:
- Load canteens, stalls and campus blocks from the seed CSVs.
- Seed a demo user with default preferences.
- Serve the snapshot the recommendation engine scores.
- Apply the few updates the app exposes (location, preferences, queues, ratings).
"""
