import argparse
import sys

from sqlalchemy import inspect

from tradetrackr.app import create_app

print("=" * 70)
print("🔧 TRADETRACKR DATABASE SETUP")
print("=" * 70)

parser = argparse.ArgumentParser(description="Create tables and seed the TradeTrackr document")
parser.add_argument('--reset', action='store_true', help="erase the PIN and all app data first")
args = parser.parse_args()

app = create_app()

with app.app_context():
    tables = inspect(app.extensions["db_engine"]).get_table_names()
    print(f"✅ Database has {len(tables)} tables: {', '.join(sorted(tables))}")

    if 'kv_store' not in tables:
        print("❌ ERROR: kv_store table was not created!")
        sys.exit(1)

    gate = app.extensions['credential_gate']
    store = app.extensions['document_store']

    if args.reset:
        print("\n⚠️  Erasing PIN and app data...")
        gate.reset()
        print("✅ Reset done")

    document = store.load()
    print(f"\n📦 Document: {len(document.get('clients', []))} clients, "
          f"{len(document.get('materials', []))} materials, {len(document.get('jobs', []))} jobs")
    print(f"🔐 PIN configured: {'yes' if gate.is_configured() else 'no (set one from the login screen)'}")

print("=" * 70)
