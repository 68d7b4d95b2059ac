"""
CRAM Demand: content recommendation gateway and form.

A FastAPI gateway that forwards form inputs and a static knowledge base to a
hosted model with a JSON schema response format, and a Streamlit form that
renders the result.
"""

__version__ = "0.1.0"
