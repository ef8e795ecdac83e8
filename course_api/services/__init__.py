"""
Use cases for the course API.

Each service wraps a RecordStore and adds the business rules (required
fields, duplicate enrollment conflicts). Routers call these services instead
of touching the store.
"""
