# masterxp/extensions.py
from flask_sqlalchemy import SQLAlchemy

# single db handle shared by models, store and the app factory
db = SQLAlchemy()
