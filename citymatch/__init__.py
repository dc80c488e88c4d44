"""
City scoring and explainability engine.

Responsibilities:
- Accept a catalog of city metric records and a user preference configuration.
- Score each city per category and combine categories into a total score.
- Apply hard filters and rank included cities ahead of excluded ones.
- Explain every category score factor by factor, using the same numbers.
"""
