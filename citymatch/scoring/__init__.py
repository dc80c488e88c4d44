"""
Scoring and explainability engine.

Responsibilities:
- Provide the normalization primitives shared by every category.
- Score each category from one metric record and its preference slice.
- Combine categories into a total score and evaluate hard filters.
- Explain each category with the very factor scores used to compute it.
"""
