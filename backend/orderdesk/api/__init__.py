"""Flask app factory for the order desk API."""

import logging
from dataclasses import dataclass
from typing import Optional

from flask import Flask, current_app
from flask_cors import CORS

from ..database.config import DatabaseConfig, initialize_database
from ..services import (
    AccessGuard,
    CatalogService,
    CredentialVerifier,
    MemberService,
    OrderService,
    ReportingService,
)
from ..utils.config import AppConfig, get_config

logger = logging.getLogger(__name__)

EXTENSION_KEY = "orderdesk"


@dataclass
class AppServices:
    """Services wired to one DatabaseConfig, shared by every request."""
    db: DatabaseConfig
    credentials: CredentialVerifier
    guard: AccessGuard
    orders: OrderService
    catalog: CatalogService
    reports: ReportingService
    members: MemberService

    @classmethod
    def build(cls, config: AppConfig, db_config: DatabaseConfig) -> "AppServices":
        return cls(
            db=db_config,
            credentials=CredentialVerifier(db_config, config.jwt_secret, config.token_ttl_seconds),
            guard=AccessGuard(config.jwt_secret),
            orders=OrderService(db_config),
            catalog=CatalogService(db_config),
            reports=ReportingService(db_config),
            members=MemberService(db_config),
        )


def get_services() -> AppServices:
    """Return the services bound to the current application."""
    return current_app.extensions[EXTENSION_KEY]


def create_app(config: Optional[AppConfig] = None, db_config: Optional[DatabaseConfig] = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        config: Application configuration (loaded from the environment if None)
        db_config: Pre-built database configuration (built from config if None)

    Returns:
        Flask application instance
    """
    config = config or get_config()
    setup_logging(config)

    app = Flask(__name__)
    app.config.update(
        DEBUG=config.debug,
        ORDERDESK=config,
    )
    app.json.ensure_ascii = False

    if db_config is None:
        db_config = initialize_database(
            config.database_url,
            echo=config.db_echo,
            pool_size=config.db_pool_size,
            max_overflow=config.db_max_overflow,
            pool_timeout=config.db_pool_timeout,
            pool_recycle=config.db_pool_recycle,
        )
    else:
        db_config.create_tables()

    app.extensions[EXTENSION_KEY] = AppServices.build(config, db_config)

    CORS(app, resources={r"/api/*": {"origins": config.cors_origins}})

    from .errors import register_error_handlers
    register_error_handlers(app)

    register_blueprints(app)

    from .cli import register_cli_commands
    register_cli_commands(app)

    logger.info("Order desk API created")
    return app


def setup_logging(config: AppConfig) -> None:
    """Configure root logging once from the configured level."""
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger().setLevel(config.log_level)


def register_blueprints(app: Flask) -> None:
    """Register application blueprints."""
    from .routes.auth import auth_bp
    from .routes.orders import orders_bp
    from .routes.catalog import catalog_bp
    from .routes.stats import stats_bp
    from .routes.users import users_bp
    from .routes.health import health_bp

    for blueprint in (auth_bp, orders_bp, catalog_bp, stats_bp, users_bp):
        app.register_blueprint(blueprint, url_prefix='/api')
    app.register_blueprint(health_bp)
