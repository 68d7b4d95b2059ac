"""
Quick demo script to run the recommendation gateway locally.

This script starts a local server and shows how to make requests to the endpoint.
"""

import uvicorn

if __name__ == "__main__":
    print("=" * 60)
    print("Starting CRAM Demand Gateway Demo")
    print("=" * 60)
    print()
    print("📌 API Endpoints:")
    print("   - Health Check:    GET  http://localhost:8000/health")
    print("   - Knowledge Base:  GET  http://localhost:8000/api/knowledge-base")
    print("   - Recommend:       POST http://localhost:8000/api/recommend")
    print("   - API Docs:             http://localhost:8000/docs")
    print()
    print("🔐 Configuration:")
    print("   AZURE_OPENAI_ENDPOINT, AZURE_OPENAI_API_KEY and AZURE_OPENAI_DEPLOYMENT")
    print("   must be set (environment or .env) or /api/recommend answers 500.")
    print()
    print("📝 Test with curl:")
    print('   curl -X POST "http://localhost:8000/api/recommend" \\')
    print('     -H "Content-Type: application/json" \\')
    print('     -d \'{"initiative_id": "reduce_denials", "buying_job_id": "vendor_selection", '
          '"primary_engine": "risk_compliance", "secondary_engines": [], '
          '"audience_type": "executive", "strategic_priority": "high", '
          '"trigger_context": "Denials up 15% this quarter."}\'')
    print()
    print("🖥️  Form UI (separate terminal):")
    print("   streamlit run cram_demand/ui/app.py")
    print()
    print("=" * 60)
    print("Starting server on http://localhost:8000")
    print("Press Ctrl+C to stop")
    print("=" * 60)
    print()

    uvicorn.run(
        "cram_demand.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
