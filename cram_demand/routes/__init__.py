"""
FastAPI routers for all API endpoints.

- health: public liveness check
- knowledge_base: the static knowledge base document for the form
- recommend: the recommendation gateway
"""
