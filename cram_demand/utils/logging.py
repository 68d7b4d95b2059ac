"""
Logging utilities for the CRAM Demand backend.

Modules log through logging.getLogger(__name__); handlers and format are
configured once by logging.basicConfig in main.py.

Rules:
- NEVER log the Azure OpenAI API key or request headers
- NEVER log full knowledge-base documents or full model responses at INFO
- Trigger context is free text typed by a user: log it truncated only

Acceptable logging:
- High-level events (e.g., "Recommendation requested", "Provider call completed")
- Non-sensitive metadata (e.g., initiative_id, buying_job_id, HTTP status)
- Error codes and sanitized error messages
"""


def truncate(text: str, limit: int = 50) -> str:
    """Shorten free text for log lines."""
    if len(text) <= limit:
        return text
    return f"{text[:limit]}..."
