from flask_sqlalchemy import SQLAlchemy

# Bound to an application by create_app() through db.init_app(app)
db = SQLAlchemy()
