"""Collection and store layer.

This module indexes records per collection and persists the store
as a flat JSON array of tagged records.
"""
