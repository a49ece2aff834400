import sys

import requests

from tradetrackr.app import create_app

print("=" * 70)
print("📦 OFFLINE CACHE INSTALL")
print("=" * 70)

app = create_app()
cache = app.extensions['offline_cache']

print(f"Origin: {cache.origin}")
print(f"Generation: {cache.cache_name}")

try:
    count = cache.install()
    print(f"✅ Installed {count} assets")
except requests.RequestException as e:
    print(f"❌ Install failed, cache left untouched: {e}")
    sys.exit(1)

deleted = cache.activate()
if deleted:
    print(f"🧹 Deleted stale generations: {', '.join(deleted)}")
else:
    print("✅ No stale generations")

print("=" * 70)
