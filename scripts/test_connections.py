#!/usr/bin/env python3
"""
Connection Test Script

Run this to verify the configured stores are reachable.
Usage: python scripts/test_connections.py
"""
import sys
sys.path.insert(0, '.')

from collabhub.core.config import get_settings
from collabhub.db.local_store import test_local_connection
from collabhub.db.mongodb import test_mongo_connection


def main():
    settings = get_settings()
    print("=" * 50)
    print("COLLABHUB - CONNECTION TEST")
    print("=" * 50)
    print(f"Storage mode: {settings.storage_mode.value}")

    # Local records
    print("\n[1] Testing local record store...")
    print(f"    URL: {settings.local_store_url}")
    if test_local_connection():
        print("    ✅ Local store: CONNECTED")
    else:
        print("    ❌ Local store: FAILED")

    # MongoDB
    print("\n[2] Testing MongoDB...")
    if settings.uses_remote:
        print(f"    URI: {settings.mongodb_uri}")
        print(f"    Database: {settings.mongodb_db}")
        if test_mongo_connection():
            print("    ✅ MongoDB: CONNECTED")
        else:
            print("    ❌ MongoDB: FAILED")
    else:
        print("    ⚠️  MongoDB: not used in local mode (skip)")

    print("\n" + "=" * 50)
    print("Connection test complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
