"""
Swagger/OpenAPI configuration for the Orgalaser invoicing API
"""

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec",
            "route": "/apispec.json",
            "rule_filter": lambda rule: True,
            "model_filter": lambda tag: True,
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/api/docs",
}

_LINE_ITEM = {
    "type": "object",
    "required": ["Item_Description", "Quantity", "Rate", "Line_Total"],
    "properties": {
        "Item_Description": {"type": "string", "example": "Shoe Laser Cutting (SLC-JSmith-Leather-001)"},
        "Quantity": {"type": "integer", "minimum": 1, "example": 2},
        "Rate": {"type": "number", "minimum": 0, "example": 5000},
        "Line_Total": {"type": "number", "minimum": 0, "example": 10000},
    },
}

SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Orgalaser Invoicing API",
        "description": "Customers, product catalog with generated barcodes, and invoices / quotations with PDF printing",
        "contact": {"email": "orgalaser@gmail.com"},
        "version": "1.0.0",
    },
    "host": "",
    "basePath": "/",
    "schemes": ["http", "https"],
    "tags": [
        {"name": "Customers", "description": "Customer records and nickname / phone lookup"},
        {"name": "Products", "description": "Product catalog and identifier generation"},
        {"name": "Invoices", "description": "Invoices, quotations, barcode scanning and printing"},
        {"name": "Utility", "description": "Service status"},
    ],
    "definitions": {
        "Error": {
            "type": "object",
            "properties": {
                "error": {"type": "string"},
                "details": {"type": "array", "items": {"type": "string"}},
            },
        },
        "CustomerInput": {
            "type": "object",
            "required": ["Customer_Type", "Full_Name", "Job_Type"],
            "properties": {
                "Customer_Type": {
                    "type": "string",
                    "enum": ["Production", "In-store", "Wedding Invitation Maker"],
                },
                "Full_Name": {"type": "string", "example": "Jane Smith"},
                "Contact_Person": {"type": "string"},
                "Email": {"type": "string", "format": "email"},
                "Phone_Number": {
                    "type": "string",
                    "pattern": "^\\d{9,10}$",
                    "description": "Required for In-store customers",
                },
                "Nickname": {
                    "type": "string",
                    "description": "Required for Production and Wedding Invitation Maker customers",
                },
                "Address": {"type": "string"},
                "Tax_ID": {"type": "string", "pattern": "^\\d{9}(-7000)?$"},
                "Job_Type": {
                    "type": "string",
                    "enum": ["Wedding Invitations", "Shoe Laser Cutting", "Laser Cutting"],
                },
                "Status": {"type": "string", "enum": ["Active", "Inactive"]},
            },
        },
        "Customer": {
            "type": "object",
            "properties": {
                "id": {"type": "integer"},
                "Customer_Type": {"type": "string"},
                "Full_Name": {"type": "string"},
                "Contact_Person": {"type": "string"},
                "Email": {"type": "string"},
                "Phone_Number": {"type": "string"},
                "Address": {"type": "string"},
                "Tax_ID": {"type": "string"},
                "Job_Type": {"type": "string"},
                "Status": {"type": "string"},
                "Nickname": {"type": "string"},
                "Instore_Phone_Number": {"type": "string"},
                "Created_At": {"type": "string", "format": "date-time"},
                "Updated_At": {"type": "string", "format": "date-time"},
            },
        },
        "ProductInput": {
            "type": "object",
            "required": ["Product_Category"],
            "properties": {
                "Product_Category": {
                    "type": "string",
                    "enum": ["Shoe Laser Cutting", "Wedding Invitations", "Laser Cutting"],
                },
                "Customer_Nickname": {"type": "string"},
                "Material_Type": {
                    "type": "string",
                    "enum": ["Acrylic", "Leather", "Rexine", "Wood", "Paper"],
                },
                "Unique_Code": {"type": "string"},
                "Product_Type": {
                    "type": "string",
                    "enum": ["Invitation Card", "Cake Box", "Tag"],
                },
                "Sticker_Option": {
                    "type": "string",
                    "enum": ["With Sticker", "Without Sticker"],
                },
                "Sticker_Type": {"type": "string", "enum": ["Normal", "Glitter"]},
                "Sticker_Color": {
                    "type": "string",
                    "enum": ["Gold", "Silver", "Green", "Red", "Blue"],
                },
                "Price": {"type": "number", "exclusiveMinimum": 0},
                "Status": {"type": "string", "enum": ["Active", "Inactive"]},
            },
        },
        "Product": {
            "type": "object",
            "properties": {
                "id": {"type": "integer"},
                "Product_Category": {"type": "string"},
                "Product_ID": {"type": "string", "example": "SLC-JSmith-Leather-001"},
                "Auto_Generated_ID": {"type": "string", "example": "0001"},
                "Barcode_ID": {"type": "string", "example": "ORGA-SLC-0042"},
                "Price": {"type": "number", "format": "float"},
                "Status": {"type": "string"},
            },
        },
        "LineItem": _LINE_ITEM,
        "InvoiceInput": {
            "type": "object",
            "required": ["Document_Type", "Customer_ID", "Items"],
            "properties": {
                "Document_Type": {"type": "string", "enum": ["Invoice", "Quotation"]},
                "Customer_ID": {"type": "integer"},
                "Date": {"type": "string", "format": "date", "example": "2025-05-27"},
                "Items": {"type": "array", "items": _LINE_ITEM},
                "Purchasing_Order": {"type": "string"},
                "Payment_Method": {
                    "type": "string",
                    "enum": ["Cash", "Cheque", "Online Transfer", "Credit Card"],
                },
                "Discount_Price": {"type": "number", "description": "Percentage"},
                "Advance_Payment": {"type": "number"},
            },
        },
        "Invoice": {
            "type": "object",
            "properties": {
                "id": {"type": "integer"},
                "Document_Type": {"type": "string"},
                "Document_ID": {"type": "string", "example": "OLCI_2025-05-27_01"},
                "Customer_ID": {"type": "integer"},
                "Date": {"type": "string", "format": "date-time"},
                "Items": {"type": "array", "items": _LINE_ITEM},
                "Total_Amount": {"type": "number"},
                "Payment_Term": {"type": "string", "enum": ["None", "15 days"]},
                "Payment_Status": {
                    "type": "string",
                    "enum": ["Unpaid", "Paid", "Partially Paid"],
                },
                "Customer": {"$ref": "#/definitions/Customer"},
            },
        },
        "PrintPayload": {
            "type": "object",
            "properties": {
                "Document_Type": {"type": "string"},
                "Customer_Name": {"type": "string"},
                "Address": {"type": "string"},
                "TAX_ID": {"type": "string"},
                "Customer_Mobile": {"type": "string"},
                "Customer_Type": {"type": "string"},
                "Items": {"type": "array", "items": _LINE_ITEM},
                "Total_Amount": {"type": "number"},
                "Purchasing_Order": {"type": "string"},
                "Payment_Method": {"type": "string"},
                "Discount_Price": {"type": "number"},
                "Advance_Payment": {"type": "number"},
            },
        },
    },
}
