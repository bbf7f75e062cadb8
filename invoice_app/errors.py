class InvoiceAppError(Exception):
    """Base class for errors raised by the invoicing services."""

    status_code = 500
    default_message = "An unexpected error occurred. Please try again later."

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class ValidationFailed(InvoiceAppError):
    """One or more field-level rules rejected the payload."""

    status_code = 400
    default_message = "Validation failed. Please check the form and try again."

    def __init__(self, messages):
        if isinstance(messages, str):
            messages = [messages]
        self.messages = list(messages)
        super().__init__(", ".join(self.messages) or None)


class NotFoundError(InvoiceAppError):
    status_code = 404
    default_message = "Record not found."


class ConflictError(InvoiceAppError):
    """A unique identifier (Product_ID, Barcode_ID, Document_ID, nickname, phone) is taken."""

    status_code = 400
    default_message = "This value is already in use. Please use a unique value."


class IdentifierExhaustedError(InvoiceAppError):
    """Barcode sampling gave up after the configured number of collisions."""

    status_code = 500
    default_message = "Failed to generate a valid Barcode ID. Please try again."
