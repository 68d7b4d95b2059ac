"""
AI Components for the CRAM Demand backend.

1. Recommendation System (Schema-Constrained LLM)
   - One Azure OpenAI chat completion per request with a JSON schema
     response format
   - Located in: cram_demand/agents/recommendation/ (prompts, schema, client)
     and cram_demand/services/recommendation_service.py (orchestration)

All domain reasoning is delegated to the model; nothing is ranked locally.
"""
