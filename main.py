from invoice_app.routes.customers import customers_bp
from invoice_app.routes.products import products_bp
from invoice_app.routes.invoices import invoices_bp
from flask import Flask
from flask_cors import CORS
from flasgger import Swagger
from swagger__config import SWAGGER_CONFIG, SWAGGER_TEMPLATE
import os

from invoice_app.commands import register_commands  # noqa: E402
from invoice_app.config import Config, is_production_database  # noqa: E402
from invoice_app.extensions import db  # noqa: E402


def create_app(config_object=None):
    app = Flask(__name__)
    try:
        app.config.from_object(config_object or Config)
        app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

        db_uri = app.config.get("SQLALCHEMY_DATABASE_URI", "")
        if app.config.get("TESTING") and is_production_database(db_uri):
            raise RuntimeError(
                "Refusing to start in testing mode against a production database"
            )

        CORS(app, origins=app.config.get("CORS_ORIGINS") or "*")
        db.init_app(app)

        # Determine host based on environment
        host = os.environ.get("API_HOST", "127.0.0.1:5000")
        swagger_template = SWAGGER_TEMPLATE.copy()
        swagger_template["host"] = host
        Swagger(app, config=SWAGGER_CONFIG, template=swagger_template)

        blueprints = [
            customers_bp,
            products_bp,
            invoices_bp,
        ]

        for bp in blueprints:
            app.register_blueprint(bp)
            app.logger.debug(f"Blueprint {bp.name} registered")

        register_commands(app)

        @app.route("/")
        def home():
            """
            Root endpoint - API status
            ---
            tags:
              - Utility
            responses:
              200:
                description: API is running
                schema:
                  type: object
                  properties:
                    status:
                      type: string
                    message:
                      type: string
            """
            return {"status": "ok", "message": "Backend is running!"}, 200

        backend = db_uri.split("://", 1)[0] if db_uri else "unconfigured"
        route_count = len(list(app.url_map.iter_rules()))
        app.logger.info(
            f"Invoice backend ready: {route_count} routes, database backend {backend}"
        )

    except Exception as e:
        app.logger.error(f"Error during app creation: {e}")
        raise

    return app


app = create_app()


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5000))
    app.run(
        host="0.0.0.0", port=port, debug=os.environ.get("FLASK_ENV") != "production"
    )
