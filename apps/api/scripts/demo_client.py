#!/usr/bin/env python3
"""Mailing list demo client.

Replays a create / update / delete / batch sequence against a running
service. The endpoint is read from MAILINGLIST_API_ADDR (default ":8081").

Usage:
    cd apps/api
    MAILINGLIST_API_ADDR=127.0.0.1:8081 python scripts/demo_client.py
"""

import sys

# Add the project root to the import path
sys.path.insert(0, ".")

from mailinglist.client import main

if __name__ == "__main__":
    main()
