"""
Run the FastAPI backend server.
"""

import argparse
import os
import sys

import uvicorn

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.config import API_HOST, API_PORT, SUPABASE_URL


def main():
    parser = argparse.ArgumentParser(description='League Night Operations API server')
    parser.add_argument('--host', default=API_HOST)
    parser.add_argument('--port', type=int, default=API_PORT)
    parser.add_argument('--no-reload', action='store_true', help='Disable auto-reload')
    args = parser.parse_args()

    print("=" * 60)
    print("League Night Operations API Server")
    print("=" * 60)
    print(f"Starting server on http://{args.host}:{args.port}")
    print(f"API Documentation: http://{args.host}:{args.port}/docs")
    print(f"Storage: {'Supabase' if SUPABASE_URL else 'in-memory (SUPABASE_URL not set)'}")
    print("=" * 60)

    uvicorn.run(
        "app.main:app",
        host=args.host,
        port=args.port,
        reload=not args.no_reload,
        log_level="info"
    )


if __name__ == "__main__":
    main()
