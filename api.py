"""
ASGI entry point: `uvicorn api:app`.
"""

from ashpaz.app import create_app

app = create_app()


# ============================================================================
# Main
# ============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
