"""
Shared, cross-cutting code for the API.

`core/` holds the small building blocks every resource package uses
(DB wiring, error taxonomy, query validation, logging). Resource-specific SQL
and business rules live in the matching package (e.g. `articles/`).
"""
