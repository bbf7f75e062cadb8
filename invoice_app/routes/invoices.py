from io import BytesIO

from flask import Blueprint, current_app, jsonify, request, send_file
from sqlalchemy.exc import IntegrityError

from ..errors import InvoiceAppError
from ..extensions import db
from ..services import invoice_service, product_service
from ..services.invoice_service import serialize_invoice
from ..services.pdf_renderer import DEFAULT_COMPANY, render_invoice_pdf
from .responses import domain_error_response

invoices_bp = Blueprint("invoices", __name__, url_prefix="/api/invoices")

DOCUMENT_ID_CONFLICT_MESSAGE = "This Document ID is already in use. Please try again."


def is_document_id_conflict(error: IntegrityError) -> bool:
    """True when the unique index on invoices.document_id rejected the insert."""
    detail = str(error.orig).lower()
    return "document_id" in detail and ("unique" in detail or "duplicate" in detail)


@invoices_bp.route("/scan", methods=["POST"])
def scan_barcode():
    """
    Turn a scanned barcode into a line item
    ---
    tags:
      - Invoices
    parameters:
      - name: body
        in: body
        required: true
        schema:
          type: object
          properties:
            Barcode_ID:
              type: string
              example: ORGA-SLC-0042
            Quantity:
              type: integer
              example: 2
            Duration:
              type: number
              description: Minutes of machine time, Laser Cutting ("LC") only
            Material_Cost:
              type: number
              description: Laser Cutting only
    responses:
      200:
        description: One line item
        schema:
          $ref: '#/definitions/LineItem'
      400:
        description: Missing barcode, bad quantity / duration, or unknown barcode prefix
      404:
        description: No product carries this barcode
    """
    try:
        item = product_service.scan_barcode(
            db.session,
            request.get_json(silent=True),
            rate_per_minute=current_app.config.get("LASER_CUTTING_RATE_PER_MINUTE", 60),
        )
        return jsonify(item), 200
    except InvoiceAppError as e:
        return domain_error_response(e)
    except Exception as e:
        current_app.logger.error(f"Failed to process barcode: {e}")
        return (
            jsonify(
                {
                    "error": "An error occurred while processing the barcode. Please try again later."
                }
            ),
            500,
        )


@invoices_bp.route("", methods=["POST"])
def create_invoice():
    """
    Create an invoice or quotation
    ---
    tags:
      - Invoices
    parameters:
      - name: body
        in: body
        required: true
        schema:
          $ref: '#/definitions/InvoiceInput'
    responses:
      201:
        description: Invoice created; Document_ID, Total_Amount and Payment_Term are derived
        schema:
          $ref: '#/definitions/Invoice'
      400:
        description: Validation failed or Document_ID collision
      404:
        description: Customer not found
    """
    try:
        invoice = invoice_service.create_invoice(db.session, request.get_json(silent=True))
        db.session.commit()
        return jsonify(serialize_invoice(invoice)), 201

    except InvoiceAppError as e:
        db.session.rollback()
        return domain_error_response(e)

    except IntegrityError as e:
        db.session.rollback()
        current_app.logger.error(f"Invoice create integrity error: {e}")
        if is_document_id_conflict(e):
            return jsonify({"error": DOCUMENT_ID_CONFLICT_MESSAGE}), 400
        return (
            jsonify(
                {
                    "error": "An error occurred while creating the invoice/quotation. Please try again later."
                }
            ),
            500,
        )

    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to create invoice: {e}")
        return (
            jsonify(
                {
                    "error": "An error occurred while creating the invoice/quotation. Please try again later."
                }
            ),
            500,
        )


@invoices_bp.route("", methods=["GET"])
def list_invoices():
    try:
        invoices = invoice_service.list_invoices(db.session)
        return jsonify([serialize_invoice(i) for i in invoices]), 200
    except Exception as e:
        current_app.logger.error(f"Failed to fetch invoices: {e}")
        return (
            jsonify(
                {
                    "error": "An error occurred while fetching invoices/quotations. Please try again later."
                }
            ),
            500,
        )


@invoices_bp.route("/search", methods=["GET"])
def search_invoices():
    """
    Search invoices by customer nickname or phone number
    ---
    tags:
      - Invoices
    parameters:
      - name: nickname
        in: query
        type: string
      - name: phone
        in: query
        type: string
    responses:
      200:
        description: Matching invoices (case-insensitive substring match)
    """
    try:
        invoices = invoice_service.search_invoices(
            db.session,
            nickname=request.args.get("nickname"),
            phone=request.args.get("phone"),
        )
        return jsonify([serialize_invoice(i) for i in invoices]), 200
    except Exception as e:
        current_app.logger.error(f"Failed to search invoices: {e}")
        return jsonify({"error": "Failed to search invoices"}), 500


@invoices_bp.route("/<int:invoice_id>", methods=["GET"])
def get_invoice(invoice_id):
    try:
        invoice = invoice_service.get_invoice(db.session, invoice_id)
        return jsonify(serialize_invoice(invoice)), 200
    except InvoiceAppError as e:
        return domain_error_response(e)
    except Exception as e:
        current_app.logger.error(f"Failed to fetch invoice {invoice_id}: {e}")
        return (
            jsonify(
                {
                    "error": "An error occurred while fetching the invoice/quotation. Please try again later."
                }
            ),
            500,
        )


@invoices_bp.route("/<int:invoice_id>", methods=["PUT"])
def update_payment(invoice_id):
    """
    Update the payment status and/or advance payment of an invoice
    ---
    tags:
      - Invoices
    parameters:
      - name: invoice_id
        in: path
        type: integer
        required: true
      - name: body
        in: body
        required: true
        schema:
          type: object
          properties:
            Payment_Status:
              type: string
              enum: [Unpaid, Paid, Partially Paid]
            Advance_Payment:
              type: number
    responses:
      200:
        description: Invoice updated
      400:
        description: Invalid payment status or advance payment
      404:
        description: Invoice not found
    """
    try:
        invoice = invoice_service.update_payment(
            db.session, invoice_id, request.get_json(silent=True)
        )
        db.session.commit()
        return jsonify(serialize_invoice(invoice)), 200

    except InvoiceAppError as e:
        db.session.rollback()
        return domain_error_response(e)

    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to update invoice {invoice_id}: {e}")
        return jsonify({"error": "Failed to update invoice"}), 500


@invoices_bp.route("/print", methods=["POST"])
def print_invoice():
    """
    Render an invoice / quotation payload to PDF
    ---
    tags:
      - Invoices
    produces:
      - application/pdf
    parameters:
      - name: body
        in: body
        required: true
        schema:
          $ref: '#/definitions/PrintPayload'
    responses:
      200:
        description: PDF download
      500:
        description: PDF generation failed
    """
    try:
        company = {key: current_app.config[key] for key in DEFAULT_COMPANY if key in current_app.config}
        document = render_invoice_pdf(request.get_json(silent=True) or {}, company=company)
        return send_file(
            BytesIO(document.content),
            as_attachment=True,
            download_name=document.filename,
            mimetype="application/pdf",
        )
    except Exception as e:
        current_app.logger.error(f"Error in print endpoint: {e}")
        return jsonify({"error": "Failed to generate invoice PDF"}), 500
