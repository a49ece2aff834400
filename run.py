#!/usr/bin/env python3
# File: run.py

import os
import sys

from tradetrackr.app import create_app
from tradetrackr.db import test_connection


def test_routes(app):
    """Test if routes are loaded"""
    try:
        rules = list(app.url_map.iter_rules())
        print(f"✅ Loaded {len(rules)} routes:")
        for rule in rules:
            if not rule.endpoint.startswith('static'):
                print(f"  - {rule.endpoint}: {rule.rule} [{', '.join(sorted(rule.methods))}]")
        return True
    except Exception as e:
        print(f"❌ Error checking routes: {e}")
        return False


if __name__ == '__main__':
    print("🚀 Starting TradeTrackr...")
    print("=" * 50)

    app = create_app()

    if not test_connection(app.extensions["db_engine"]):
        sys.exit(1)

    if not test_routes(app):
        sys.exit(1)

    host = os.getenv('HOST', '127.0.0.1')
    port = int(os.getenv('PORT', '5000'))

    print("=" * 50)
    print(f"📍 Server will start at: http://{host}:{port}")
    print("=" * 50)

    try:
        app.run(debug=os.getenv('DEBUG', '1') == '1', host=host, port=port)
    except KeyboardInterrupt:
        print("\n👋 Server stopped by user")
