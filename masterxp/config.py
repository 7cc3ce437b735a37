# masterxp/config.py
import os

from dotenv import load_dotenv

# pick up a local .env before reading anything
load_dotenv()

BASE_DIR = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))
DB_DIR = os.path.join(BASE_DIR, "instance")
DB_PATH = os.path.join(DB_DIR, "masterxp.db")


def default_database_url():
    os.makedirs(DB_DIR, exist_ok=True)
    # absolute SQLite path (three slashes + absolute path)
    return "sqlite:///" + DB_PATH.replace("\\", "/")


def normalize_database_url(url):
    # hosted Postgres services hand out postgres:// which SQLAlchemy no longer accepts
    if url and url.startswith("postgres://"):
        return "postgresql://" + url[len("postgres://"):]
    return url


class Config:
    """Settings read from the environment at app creation time."""

    def __init__(self):
        self.SECRET_KEY = os.environ.get("MASTERXP_SECRET", "change-me-for-prod")
        # None means "use the local SQLite file", resolved in create_app
        self.SQLALCHEMY_DATABASE_URI = normalize_database_url(os.environ.get("DATABASE_URL"))
        self.SQLALCHEMY_TRACK_MODIFICATIONS = False

        self.AUTH0_DOMAIN = (os.environ.get("AUTH0_DOMAIN") or "").strip()
        self.AUTH0_AUDIENCE = (os.environ.get("AUTH0_AUDIENCE") or "").strip()
        # HS256 shared secret; only for local dev and tests
        self.AUTH_SECRET = os.environ.get("AUTH_SECRET") or None
        self.AUTH_LEEWAY = int(os.environ.get("AUTH_LEEWAY", "5"))

        self.FRONTEND_ORIGIN = os.environ.get("FRONTEND_ORIGIN", "http://localhost:5173")
        self.LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    def as_dict(self):
        return {k: v for k, v in vars(self).items() if k.isupper()}
