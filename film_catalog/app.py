import logging

from flask import Flask, jsonify
from sqlalchemy import select

from .config import get_config
from .errors import register_error_handlers
from .extensions import db, login_manager, csrf, migrate
from .models import Role, User, ROLE_ADMIN, ROLE_USER
from .routes.auth import auth_bp
from .routes.moderation import moderation_bp
from .routes.movies import movies_bp
from .routes.reviews import reviews_bp
from .routes.users import users_bp
from .routes.watchlists import watchlists_bp
from .services.cache import init_requests_cache

log = logging.getLogger(__name__)


def create_app(config=None):
    app = Flask(__name__)
    app.config.from_object(config or get_config())
    logging.basicConfig(level=logging.INFO)
    logging.getLogger("film_catalog").setLevel(app.config.get("LOG_LEVEL", "INFO"))
    if app.config.get("HTTP_CACHE_ENABLED"):
        init_requests_cache()

    # Init extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    csrf.init_app(app)

    @login_manager.user_loader
    def load_user(user_id):
        try:
            return db.session.get(User, int(user_id))
        except (TypeError, ValueError):
            return None

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({"ok": False, "error": "Authentication required", "code": "unauthorized", "status": 401}), 401

    # Register blueprints
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(movies_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(reviews_bp)
    app.register_blueprint(moderation_bp)
    app.register_blueprint(watchlists_bp)

    # JSON-only API; CSRF form tokens don't apply
    for bp in (auth_bp, movies_bp, users_bp, reviews_bp, moderation_bp, watchlists_bp):
        csrf.exempt(bp)

    register_error_handlers(app)

    # Create tables and seed roles plus the admin account on first run
    with app.app_context():
        db.create_all()
        _seed_roles_and_admin(app)

    return app


def _seed_roles_and_admin(app: Flask):
    """
    Ensure both roles exist and that the configured admin account holds them.
    """
    roles = {}
    for name in (ROLE_USER, ROLE_ADMIN):
        role = db.session.execute(select(Role).filter_by(name=name)).scalar_one_or_none()
        if role is None:
            role = Role(name=name)
            db.session.add(role)
        roles[name] = role

    admin_username = app.config.get("ADMIN_USERNAME", "admin")
    admin = db.session.execute(select(User).filter_by(username=admin_username)).scalar_one_or_none()
    if admin is None:
        admin = User(username=admin_username, name="Administrator")
        admin.set_password(app.config.get("ADMIN_PASSWORD", "admin"))
        admin.roles = [roles[ROLE_USER], roles[ROLE_ADMIN]]
        db.session.add(admin)
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        log.exception("Seeding roles and admin account failed")
