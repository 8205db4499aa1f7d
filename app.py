import logging

import click
from flask import Flask, jsonify

from config import Config
from routes import (
    health_bp, users_bp, court_bp, booking_bp, coupons_bp,
    payments_bp, ratings_bp, admin_bp, audit_bp,
)
from models import db
from models.user import User
from flask_migrate import Migrate
from sqlalchemy.exc import SQLAlchemyError
from services.errors import ServiceError, StoreError
from services.gateway import StripeGateway
from security.session import create_session
from utils.auth_context import load_current_user

logger = logging.getLogger(__name__)


def create_app(config_object=None, payment_gateway=None):
    app = Flask(__name__)
    app.config.from_object(config_object or Config)

    # Register routes
    app.register_blueprint(health_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(court_bp)
    app.register_blueprint(booking_bp)
    app.register_blueprint(coupons_bp)
    app.register_blueprint(payments_bp)
    app.register_blueprint(ratings_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(audit_bp)

    # Database init
    db.init_app(app)

    # Migrations
    Migrate(app, db)

    # Payment gateway is built once and handed to services per request
    app.extensions["payment_gateway"] = payment_gateway or StripeGateway.from_config(app.config)

    @app.before_request
    def _load_user():
        load_current_user()

    @app.errorhandler(ServiceError)
    def _service_error(exc):
        if exc.status_code >= 500:
            logger.error("%s: %s", exc.kind, exc.message)
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(SQLAlchemyError)
    def _store_error(exc):
        db.session.rollback()
        logger.error("Unhandled record store failure: %s", exc)
        err = StoreError("Record store operation failed", details={"reason": exc.__class__.__name__})
        return jsonify(err.to_dict()), err.status_code

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"
        return resp

    register_cli(app)

    return app

#-------------------------

def register_cli(app):
    @app.cli.command("make-admin")
    @click.argument("email")
    def make_admin(email):
        """Promote a user to admin by email (bootstrap)."""
        user = User.query.filter_by(email=email.strip().lower()).first()
        if not user:
            click.echo("User not found")
            return

        if user.role != "admin":
            user.role = "admin"
            db.session.commit()

        click.echo(f"{user.email} promoted to admin")

    @app.cli.command("issue-token")
    @click.argument("email")
    @click.option("--lifetime", type=int, default=None, help="Token lifetime in seconds.")
    def issue_token(email, lifetime):
        """Mint a bearer token for an existing user."""
        user = User.query.filter_by(email=email.strip().lower()).first()
        if not user:
            click.echo("User not found")
            return

        click.echo(create_session(user.id, lifetime_seconds=lifetime))

#-------------------------


if __name__ == "__main__":
    app = create_app()
    # Run locally
    app.run(host="127.0.0.1", port=5000)
