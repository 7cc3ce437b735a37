from .extensions import db


def init_app(app):
    """
    Initialize backend modules and create tables.
    Call after db.init_app(app) in create_app.
    """
    # import models now so they bind to the single db instance
    from . import models  # noqa: F401

    with app.app_context():
        db.create_all()
