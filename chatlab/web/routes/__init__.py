"""Blueprint registration."""

from __future__ import annotations


def register_blueprints(app):
    # Import locally to avoid import-time side effects / circular imports.
    from .imports import bp as imports_bp
    from .system import bp as system_bp

    app.register_blueprint(imports_bp)
    app.register_blueprint(system_bp)
