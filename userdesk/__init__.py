"""User directory dashboard: a paginated, editable table of users backed by a REST directory."""

__version__ = "0.1"
