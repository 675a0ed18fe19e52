"""Entry point for the smart plug Realtime Database to Firestore mirror"""
import os
from flask import Flask
from api.routes.triggers import triggers_bp
from api.routes.jobs import jobs_bp
from config.firebase_config import FirebaseConfig
from services.firestore_service import FirestoreService
from services.history_service import HistoryService
from services.mirror_service import MirrorService
from services.secret_service import SecretService


def create_app(mirror_service=None, history_service=None, secret_service=None, trigger_auth_enabled=None):
    """
    Create the Flask app

    Services default to instances backed by the real Firebase clients.
    """
    app = Flask(__name__)

    if mirror_service is None or history_service is None:
        firestore_service = FirestoreService()
        mirror_service = mirror_service or MirrorService(firestore_service)
        history_service = history_service or HistoryService(firestore_service)

    app.config['MIRROR_SERVICE'] = mirror_service
    app.config['HISTORY_SERVICE'] = history_service
    app.config['SECRET_SERVICE'] = secret_service or SecretService()
    app.config['TRIGGER_AUTH_ENABLED'] = (
        FirebaseConfig.TRIGGER_AUTH_ENABLED if trigger_auth_enabled is None else trigger_auth_enabled
    )

    # Register blueprints
    app.register_blueprint(triggers_bp)
    app.register_blueprint(jobs_bp)

    @app.route('/health', methods=['GET'])
    def health_check():
        """Health check endpoint for Cloud Run"""
        return {'status': 'healthy'}, 200

    return app


if __name__ == '__main__':
    # Get port from environment variable (Cloud Run sets this)
    port = int(os.environ.get('PORT', 8080))
    create_app().run(host='0.0.0.0', port=port, debug=False)
