"""Flask application factory."""
import logging
from flask import Flask, jsonify
from flask_wtf.csrf import CSRFProtect
from storehub.database import init_db


def create_app(config_object='config.Config'):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_object)

    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # Initialize CSRF protection for the back-office forms
    CSRFProtect(app)

    # Initialize database
    init_db(app)

    # Discount type registry (built once per process)
    from storehub.discounts import init_discounts
    init_discounts(app)

    # Error Handlers
    from storehub.exceptions import StoreHubError

    @app.errorhandler(StoreHubError)
    def handle_storehub_error(error):
        """Handle custom application exceptions."""
        app.logger.error(f"StoreHubError [{error.status_code}]: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    # Register CLI commands
    from storehub.cli_commands import init_cli_commands
    init_cli_commands(app)

    app.logger.info(
        f"Discount types: {', '.join(app.extensions['discounts'].tags())} "
        f"(invalid data policy: {app.config.get('DISCOUNT_INVALID_DATA_POLICY')})"
    )

    return app
