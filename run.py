#!/usr/bin/env python3
"""
Simple launcher script for the Daily Activity Planner API.
Run this from the root directory to start the application.
"""

import uvicorn

if __name__ == "__main__":
    print("🚀 Starting Daily Activity Planner API with auto-reload...")
    print("📖 API Documentation: http://localhost:8000/docs")
    print("🔍 Health Check: http://localhost:8000/health")
    print("🔄 Auto-reload is ENABLED - changes will automatically restart the server")
    print("🛑 Press Ctrl+C to stop the server")
    print("-" * 50)

    # Import string + factory so reload can rebuild the app
    uvicorn.run(
        "dayplanner.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=True,
        reload_dirs=["dayplanner"],
        log_level="info"
    )
