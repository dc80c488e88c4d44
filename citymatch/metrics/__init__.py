"""
Metric records for candidate locations.

Responsibilities:
- Define the read-only, domain-grouped metric snapshot of one location.
- Coerce non-finite numbers to "no data" so scorers never see NaN.
- Adapt the tabular output of the ingestion process into records.
"""
