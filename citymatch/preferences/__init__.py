"""
User preference configuration.

Responsibilities:
- Define the preference tree with documented defaults and closed enums.
- Validate imported documents and migrate older schema layouts.
- Export preferences as a JSON document for the editing surface.
"""
