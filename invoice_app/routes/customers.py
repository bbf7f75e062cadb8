from flask import Blueprint, current_app, jsonify, request
from sqlalchemy.exc import IntegrityError

from ..errors import InvoiceAppError
from ..extensions import db
from ..services import customer_service
from ..services.customer_service import DUPLICATE_IDENTIFIER_MESSAGE, serialize_customer
from .responses import domain_error_response

customers_bp = Blueprint("customers", __name__, url_prefix="/api/customers")


@customers_bp.route("", methods=["GET"])
def list_customers():
    """
    List every customer with its nickname or in-store phone number
    ---
    tags:
      - Customers
    responses:
      200:
        description: All customers
        schema:
          type: array
          items:
            $ref: '#/definitions/Customer'
      500:
        description: Database error
        schema:
          $ref: '#/definitions/Error'
    """
    try:
        customers = customer_service.list_customers(db.session)
        return jsonify([serialize_customer(c) for c in customers]), 200
    except Exception as e:
        current_app.logger.error(f"Failed to fetch customers: {e}")
        return (
            jsonify(
                {
                    "error": "An error occurred while fetching customers. Please try again later."
                }
            ),
            500,
        )


@customers_bp.route("/<int:customer_id>", methods=["GET"])
def get_customer(customer_id):
    """
    Fetch one customer
    ---
    tags:
      - Customers
    parameters:
      - name: customer_id
        in: path
        type: integer
        required: true
    responses:
      200:
        description: The customer
        schema:
          $ref: '#/definitions/Customer'
      404:
        description: Customer not found
        schema:
          $ref: '#/definitions/Error'
    """
    try:
        customer = customer_service.get_customer(db.session, customer_id)
        return jsonify(serialize_customer(customer)), 200
    except InvoiceAppError as e:
        return domain_error_response(e)
    except Exception as e:
        current_app.logger.error(f"Failed to fetch customer {customer_id}: {e}")
        return (
            jsonify(
                {
                    "error": "An error occurred while fetching the customer. Please try again later."
                }
            ),
            500,
        )


@customers_bp.route("", methods=["POST"])
def create_customer():
    """
    Create a customer together with its nickname / phone lookup row
    ---
    tags:
      - Customers
    parameters:
      - name: body
        in: body
        required: true
        schema:
          $ref: '#/definitions/CustomerInput'
    responses:
      201:
        description: Customer created
        schema:
          $ref: '#/definitions/Customer'
      400:
        description: Validation failed or nickname / phone number already in use
        schema:
          $ref: '#/definitions/Error'
    """
    try:
        data = request.get_json(silent=True)
        customer = customer_service.create_customer(db.session, data)
        db.session.commit()
        return jsonify(serialize_customer(customer)), 201

    except InvoiceAppError as e:
        db.session.rollback()
        return domain_error_response(e)

    except IntegrityError as e:
        db.session.rollback()
        current_app.logger.error(f"Customer create integrity error: {e}")
        return jsonify({"error": DUPLICATE_IDENTIFIER_MESSAGE}), 400

    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to create customer: {e}")
        return (
            jsonify(
                {
                    "error": "An error occurred while creating the customer. Please try again later."
                }
            ),
            500,
        )


@customers_bp.route("/<int:customer_id>", methods=["PUT"])
def update_customer(customer_id):
    """
    Replace a customer (full payload required)
    ---
    tags:
      - Customers
    parameters:
      - name: customer_id
        in: path
        type: integer
        required: true
      - name: body
        in: body
        required: true
        schema:
          $ref: '#/definitions/CustomerInput'
    responses:
      200:
        description: Customer updated
      400:
        description: Validation failed or nickname / phone number already in use
      404:
        description: Customer not found
    """
    try:
        data = request.get_json(silent=True)
        customer = customer_service.update_customer(db.session, customer_id, data)
        db.session.commit()
        return jsonify(serialize_customer(customer)), 200

    except InvoiceAppError as e:
        db.session.rollback()
        return domain_error_response(e)

    except IntegrityError as e:
        db.session.rollback()
        current_app.logger.error(f"Customer update integrity error: {e}")
        return jsonify({"error": DUPLICATE_IDENTIFIER_MESSAGE}), 400

    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to update customer {customer_id}: {e}")
        return (
            jsonify(
                {
                    "error": "An error occurred while updating the customer. Please try again later."
                }
            ),
            500,
        )


@customers_bp.route("/<int:customer_id>", methods=["DELETE"])
def delete_customer(customer_id):
    try:
        customer_service.delete_customer(db.session, customer_id)
        db.session.commit()
        return jsonify({"message": "Customer deleted successfully"}), 200

    except InvoiceAppError as e:
        db.session.rollback()
        return domain_error_response(e)

    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to delete customer {customer_id}: {e}")
        return (
            jsonify(
                {
                    "error": "An error occurred while deleting the customer. Please try again later."
                }
            ),
            500,
        )


@customers_bp.route("/search", methods=["POST"])
def search_customer():
    """
    Resolve a customer by type and identifier
    ---
    tags:
      - Customers
    parameters:
      - name: body
        in: body
        required: true
        schema:
          type: object
          properties:
            Customer_Type:
              type: string
              enum: [In-store, Production, Wedding Invitation Maker]
            Identifier:
              type: string
              description: Phone number for In-store, nickname otherwise
    responses:
      200:
        description: The matching customer
        schema:
          $ref: '#/definitions/Customer'
      400:
        description: Missing or invalid customer type / identifier
      404:
        description: No customer with that identifier
    """
    try:
        data = request.get_json(silent=True) or {}
        customer = customer_service.find_customer_by_identifier(
            db.session, data.get("Customer_Type"), data.get("Identifier")
        )
        return jsonify(serialize_customer(customer)), 200
    except InvoiceAppError as e:
        return domain_error_response(e)
    except Exception as e:
        current_app.logger.error(f"Failed to search customer: {e}")
        return (
            jsonify(
                {
                    "error": "An error occurred while searching for the customer. Please try again later."
                }
            ),
            500,
        )
