#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify the database, MongoDB and AI endpoint are reachable.
Usage: python scripts/check_connections.py
"""
import sys
sys.path.insert(0, '.')

from app.db.postgres import test_postgres_connection
from app.db.mongodb import test_mongo_connection
from app.services.ai_client import get_ai_client
from app.core.config import get_settings


def main():
    settings = get_settings()
    print("=" * 50)
    print("PLACIFY - CONNECTION CHECK")
    print("=" * 50)

    print("\n[1] Relational database...")
    print(f"    URL: {settings.sqlalchemy_url.split('@')[-1]}")
    print("    ✅ CONNECTED" if test_postgres_connection() else "    ❌ FAILED")

    print("\n[2] MongoDB...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    print("    ✅ CONNECTED" if test_mongo_connection() else "    ❌ FAILED")

    print("\n[3] AI endpoint...")
    if settings.ai_api_key:
        print(f"    Base URL: {settings.ai_base_url}")
        print(f"    Model: {settings.ai_model}")
        print("    ✅ CONNECTED" if get_ai_client().test_connection() else "    ❌ FAILED")
    else:
        print("    ⚠️  AI_API_KEY not configured (skipped)")

    print("\n" + "=" * 50)


if __name__ == "__main__":
    main()
