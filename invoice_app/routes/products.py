from flask import Blueprint, current_app, jsonify, request
from sqlalchemy.exc import IntegrityError

from ..errors import InvoiceAppError
from ..extensions import db
from ..services import product_service
from ..services.product_service import serialize_product
from .responses import domain_error_response

products_bp = Blueprint("products", __name__, url_prefix="/api/products")

DUPLICATE_PRODUCT_MESSAGE = (
    "This Product ID or Barcode ID is already in use. Please use unique values."
)


@products_bp.route("", methods=["GET"])
def list_products():
    """
    List the product catalog
    ---
    tags:
      - Products
    responses:
      200:
        description: All products
        schema:
          type: array
          items:
            $ref: '#/definitions/Product'
    """
    try:
        products = product_service.list_products(db.session)
        return jsonify([serialize_product(p) for p in products]), 200
    except Exception as e:
        current_app.logger.error(f"Failed to fetch products: {e}")
        return (
            jsonify(
                {
                    "error": "An error occurred while fetching products. Please try again later."
                }
            ),
            500,
        )


@products_bp.route("/<int:product_id>", methods=["GET"])
def get_product(product_id):
    try:
        product = product_service.get_product(db.session, product_id)
        return jsonify(serialize_product(product)), 200
    except InvoiceAppError as e:
        return domain_error_response(e)
    except Exception as e:
        current_app.logger.error(f"Failed to fetch product {product_id}: {e}")
        return (
            jsonify(
                {
                    "error": "An error occurred while fetching the product. Please try again later."
                }
            ),
            500,
        )


@products_bp.route("", methods=["POST"])
def create_product():
    """
    Create a product; Product_ID, Auto_Generated_ID and Barcode_ID are derived
    ---
    tags:
      - Products
    parameters:
      - name: body
        in: body
        required: true
        schema:
          $ref: '#/definitions/ProductInput'
    responses:
      201:
        description: Product created
        schema:
          $ref: '#/definitions/Product'
      400:
        description: Validation failed, duplicate Product_ID, or a Laser Cutting product already exists
        schema:
          $ref: '#/definitions/Error'
    """
    try:
        data = request.get_json(silent=True)
        product = product_service.create_product(
            db.session,
            data,
            max_attempts=current_app.config.get("BARCODE_MAX_ATTEMPTS", 50),
        )
        db.session.commit()
        current_app.logger.info(
            f"Created product {product.product_id} with barcode {product.barcode_id}"
        )
        return jsonify(serialize_product(product)), 201

    except InvoiceAppError as e:
        db.session.rollback()
        return domain_error_response(e)

    except IntegrityError as e:
        db.session.rollback()
        current_app.logger.error(f"Product create integrity error: {e}")
        return jsonify({"error": DUPLICATE_PRODUCT_MESSAGE}), 400

    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to create product: {e}")
        return (
            jsonify(
                {
                    "error": "An error occurred while creating the product. Please try again later."
                }
            ),
            500,
        )


@products_bp.route("/<int:product_id>", methods=["PUT"])
def update_product(product_id):
    """
    Replace a product (full payload required)
    ---
    tags:
      - Products
    parameters:
      - name: product_id
        in: path
        type: integer
        required: true
      - name: body
        in: body
        required: true
        schema:
          $ref: '#/definitions/ProductInput'
    responses:
      200:
        description: Product updated
      400:
        description: Validation failed or duplicate Product_ID
      404:
        description: Product not found
    """
    try:
        data = request.get_json(silent=True)
        product = product_service.update_product(
            db.session,
            product_id,
            data,
            max_attempts=current_app.config.get("BARCODE_MAX_ATTEMPTS", 50),
        )
        db.session.commit()
        return jsonify(serialize_product(product)), 200

    except InvoiceAppError as e:
        db.session.rollback()
        return domain_error_response(e)

    except IntegrityError as e:
        db.session.rollback()
        current_app.logger.error(f"Product update integrity error: {e}")
        return jsonify({"error": DUPLICATE_PRODUCT_MESSAGE}), 400

    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to update product {product_id}: {e}")
        return (
            jsonify(
                {
                    "error": "An error occurred while updating the product. Please try again later."
                }
            ),
            500,
        )


@products_bp.route("/<int:product_id>", methods=["DELETE"])
def delete_product(product_id):
    try:
        product_service.delete_product(db.session, product_id)
        db.session.commit()
        return jsonify({"message": "Product deleted successfully"}), 200

    except InvoiceAppError as e:
        db.session.rollback()
        return domain_error_response(e)

    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to delete product {product_id}: {e}")
        return (
            jsonify(
                {
                    "error": "An error occurred while deleting the product. Please try again later."
                }
            ),
            500,
        )
