#!/usr/bin/env python3
"""
Simple launcher script for the Focus Blocks API.
Run this from the root directory to start the application.
"""

import uvicorn

if __name__ == "__main__":
    print("🚀 Starting Focus Blocks API with auto-reload...")
    print("📖 API Documentation: http://localhost:8000/docs")
    print("🔍 Health Check: http://localhost:8000/health")
    print("-" * 50)

    # Use import string format for reload to work properly
    uvicorn.run(
        "focusblocks.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        reload_dirs=["focusblocks"],
        log_level="info"
    )
