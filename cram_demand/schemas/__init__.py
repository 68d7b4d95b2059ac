"""
Pydantic schemas for API request and response validation.

Contract models are closed: undeclared fields are rejected.
"""
