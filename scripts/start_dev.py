#!/usr/bin/env python3
"""
Development startup script.

Starts the bookstore API in development mode with auto-reload.
"""

import os
import shutil
import subprocess
import sys
from pathlib import Path

# Project root
PROJECT_ROOT = Path(__file__).parent.parent


def check_dependencies():
    """Check if required dependencies are installed."""
    try:
        import fastapi
        import uvicorn
        import httpx
        import jwt
        import cryptography
        print("✓ All core dependencies installed")
        return True
    except ImportError as e:
        print(f"✗ Missing dependency: {e.name}")
        print("\nRun: pip install -e .[test]")
        return False


def check_env():
    """Check if .env file exists."""
    env_file = PROJECT_ROOT / "config" / ".env"
    env_example = PROJECT_ROOT / "config" / ".env.example"

    if env_file.exists():
        print("✓ Configuration file found")
        return True
    elif env_example.exists():
        print("! Configuration file not found, copying from example...")
        shutil.copy(env_example, env_file)
        print("✓ Created config/.env from example")
        print("  Set SESSION_SECRET and the Razorpay keys in config/.env")
        return True
    else:
        print("✗ No configuration file found")
        return False


def start_service():
    """Start the API in development mode."""
    print("\n📚 Starting Bookstore API on http://localhost:8000 ...")
    process = subprocess.Popen(
        [
            sys.executable, "-m", "uvicorn",
            "bookstore.main:app",
            "--reload",
            "--host", "0.0.0.0",
            "--port", "8000",
        ],
        cwd=PROJECT_ROOT,
        env={**os.environ},
    )

    print("\n" + "=" * 60)
    print("Service started successfully!")
    print("=" * 60)
    print("\n📍 API:  http://localhost:8000")
    print("📍 Docs: http://localhost:8000/docs")
    print("\nIssue a session token with: python scripts/issue_session.py <user-id>")
    print("Press Ctrl+C to stop")
    print("=" * 60)

    try:
        process.wait()
    except KeyboardInterrupt:
        print("\n\nShutting down...")
        process.terminate()
        process.wait()
        print("Service stopped.")


def main():
    print("=" * 60)
    print("Bookstore - Development Server")
    print("=" * 60)

    print("\nRunning pre-flight checks...")

    if not check_dependencies():
        sys.exit(1)

    if not check_env():
        sys.exit(1)

    print("\n✓ All checks passed!")

    start_service()


if __name__ == "__main__":
    main()
