import logging

from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flask_cors import CORS
from config import Config

db = SQLAlchemy()
jwt = JWTManager()
migrate = Migrate()

logger = logging.getLogger(__name__)


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    db.init_app(app)
    jwt.init_app(app)
    migrate.init_app(app, db)

    from app.services.clock import SystemClock
    app.extensions['gate_clock'] = SystemClock(app.config['GATE_TIMEZONE'])

    CORS(app)
    from app.routes.portico import portico_bp
    from app.routes.access import bp as access_bp
    from app.commands import seed_demo

    app.register_blueprint(portico_bp)
    app.register_blueprint(access_bp, url_prefix='/access-logs')
    app.cli.add_command(seed_demo)

    @app.route('/health')
    def health():
        return jsonify(status='ok'), 200

    for rule in app.url_map.iter_rules():
        logger.debug("Ruta cargada: %s", rule)

    return app
