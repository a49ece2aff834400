from flask import Flask, request, jsonify
from flask_cors import CORS
import os
from dotenv import load_dotenv

from .credentials import CredentialGate
from .db import make_session_factory, init_db, test_connection
from .offline_cache import OfflineCache
from .store import DocumentStore, KeyValueStore
from .utils.file_utils import MAX_PHOTO_BYTES

load_dotenv()


def create_app(test_config=None):
    app = Flask(__name__)

    # ============================================
    # CONFIG
    # ============================================
    app.config["SECRET_KEY"] = os.getenv("SECRET_KEY", "dev-secret-key-change-in-production")
    app.config["DATABASE_URL"] = os.getenv("DATABASE_URL") or "sqlite:///./tradetrackr.db"
    app.config["ASSET_ORIGIN"] = os.getenv("ASSET_ORIGIN", "http://127.0.0.1:8000")
    app.config["REQUEST_TIMEOUT"] = float(os.getenv("REQUEST_TIMEOUT", "10"))
    app.config["MAX_PHOTO_BYTES"] = MAX_PHOTO_BYTES
    app.config["CORS_ORIGINS"] = os.getenv("CORS_ORIGINS", "*")

    if test_config:
        app.config.update(test_config)

    app.logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())

    # ============================================
    # DATABASE + STORES
    # ============================================
    # Each app gets its own engine; the module-level one is for scripts
    db_engine, session_factory = make_session_factory(app.config["DATABASE_URL"])
    init_db(db_engine)
    app.extensions["db_engine"] = db_engine

    storage = KeyValueStore(session_factory)
    document_store = DocumentStore(storage)
    app.extensions["document_store"] = document_store
    app.extensions["credential_gate"] = CredentialGate(storage, document_store)
    offline_cache = app.config.get("OFFLINE_CACHE") or OfflineCache(
        origin=app.config["ASSET_ORIGIN"],
        timeout=app.config["REQUEST_TIMEOUT"],
    )
    if offline_cache.session_factory is None:
        offline_cache.session_factory = session_factory
    app.extensions["offline_cache"] = offline_cache

    # ============================================
    # CORS
    # ============================================
    origins = app.config["CORS_ORIGINS"]
    CORS(
        app,
        resources={r"/*": {"origins": origins.split(",") if origins != "*" else "*"}},
        supports_credentials=origins != "*",
    )

    # ============================================
    # BLUEPRINTS
    # ============================================
    from .routes import (
        auth_routes, client_routes, material_routes, job_routes,
        settings_routes, offline_routes
    )

    app.register_blueprint(auth_routes.auth_bp)
    app.register_blueprint(client_routes.client_bp)
    app.register_blueprint(material_routes.material_bp)
    app.register_blueprint(job_routes.job_bp)
    app.register_blueprint(settings_routes.settings_bp)
    app.register_blueprint(offline_routes.offline_bp)

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({'error': f'No route for {request.path}'}), 404

    return app


# ============================================
# STANDALONE LAUNCH
# ============================================
if __name__ == "__main__":
    app = create_app()

    print("=" * 60)
    print("🔧 CHECKING DATABASE...")
    test_connection(app.extensions["db_engine"])
    print("=" * 60)

    app.run(debug=True, host="127.0.0.1", port=5000)
