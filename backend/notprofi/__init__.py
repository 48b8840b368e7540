import logging

import click
from flask import Flask

from .config import Config
from .extensions import db, init_extensions
from .errors import register_error_handlers

# blueprints
from .auth import auth_bp
from .blueprints.main import main_bp
from .blueprints.settings import settings_bp
from .blueprints.property_managers import property_managers_bp
from .blueprints.companies import companies_bp
from .blueprints.cooperations import cooperations_bp
from .blueprints.jobs import jobs_bp
from .blueprints.invoices import invoices_bp


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    init_extensions(app)
    register_error_handlers(app)

    app.register_blueprint(auth_bp, url_prefix="/api")
    app.register_blueprint(main_bp, url_prefix="/api")
    app.register_blueprint(settings_bp, url_prefix="/api/settings")
    app.register_blueprint(property_managers_bp, url_prefix="/api/property-managers")
    app.register_blueprint(companies_bp, url_prefix="/api/companies")
    app.register_blueprint(cooperations_bp, url_prefix="/api/cooperations")
    app.register_blueprint(jobs_bp, url_prefix="/api/jobs")
    app.register_blueprint(invoices_bp, url_prefix="/api/invoices")

    register_commands(app)
    return app


def register_commands(app):
    @app.cli.command('init-db')
    def init_db():
        """Create all tables without running migrations."""
        db.create_all()
        click.echo('Database tables created.')

    @app.cli.command('seed')
    def seed():
        """Insert demo records into an empty database."""
        from .seeds import seed_data
        if seed_data():
            click.echo('Seed data inserted.')
        else:
            click.echo('Database already has data, nothing to do.')
