from flask import current_app, jsonify

from ..errors import InvoiceAppError, ValidationFailed


def domain_error_response(error: InvoiceAppError):
    """Translate a service-layer error into the JSON error body."""
    if isinstance(error, ValidationFailed):
        return jsonify({"error": error.message, "details": error.messages}), 400

    if error.status_code >= 500:
        current_app.logger.error(f"{type(error).__name__}: {error.message}")
        return jsonify({"error": type(error).default_message}), error.status_code

    return jsonify({"error": error.message}), error.status_code
