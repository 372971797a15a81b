"""
Request analytics.

Responsibilities:
- Keep an in-process log of recommendation requests.
- Aggregate it into the admin analytics report.
"""
