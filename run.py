"""
Run script to start the FastAPI server.
"""
import uvicorn
import os
import sys

# Add the project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))


def main():
    """Start the Uvicorn server."""
    port = int(os.environ.get("PORT", "8000"))
    print("💧 Starting INGRES Groundwater API...")
    print(f"📖 API Documentation: http://localhost:{port}/docs")
    print(f"📊 ReDoc: http://localhost:{port}/redoc")
    print("-" * 50)

    uvicorn.run(
        "ingres.main:app",
        host="0.0.0.0",
        port=port,
        reload=False,
        log_level="info"
    )


if __name__ == "__main__":
    main()
