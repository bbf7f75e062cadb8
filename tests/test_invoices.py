import pytest
import json
from decimal import Decimal

from invoice_app.services import invoice_service


def _invoice_payload(customer_id, items, **extra):
    payload = {
        "Document_Type": "Invoice",
        "Customer_ID": customer_id,
        "Date": "2025-05-27",
        "Items": items,
    }
    payload.update(extra)
    return payload


@pytest.mark.invoices
class TestInvoices:
    """Test suite for invoice and quotation endpoints."""

    def test_create_invoice(self, client, sample_customer, line_items):
        """Test that totals, Document_ID and payment term are derived server-side."""
        response = client.post(
            "/api/invoices",
            json=_invoice_payload(
                sample_customer.id, line_items, Total_Amount=1, Payment_Method="Cash"
            ),
        )

        assert response.status_code == 201
        data = json.loads(response.data)
        assert data["Document_ID"] == "OLCI_2025-05-27_01"
        assert data["Total_Amount"] == 10600.0
        assert data["Payment_Term"] == "None"
        assert data["Payment_Status"] == "Unpaid"
        assert data["Payment_Method"] == "Cash"
        assert [i["Item_Description"] for i in data["Items"]] == [
            "Shoe Laser Cutting (SLC-JSmith-Leather-001)",
            "Laser Cutting (10 minutes)",
        ]
        assert data["Customer"]["Full_Name"] == "John Doe"

    def test_same_day_invoices_are_numbered(self, client, sample_customer, line_items):
        """Test that two invoices on one day get _01 and _02."""
        payload = _invoice_payload(sample_customer.id, line_items)
        first = json.loads(client.post("/api/invoices", json=payload).data)
        second = json.loads(client.post("/api/invoices", json=payload).data)

        assert first["Document_ID"] == "OLCI_2025-05-27_01"
        assert second["Document_ID"] == "OLCI_2025-05-27_02"

    def test_quotation_has_its_own_sequence(self, client, sample_customer, line_items):
        client.post("/api/invoices", json=_invoice_payload(sample_customer.id, line_items))
        response = client.post(
            "/api/invoices",
            json=_invoice_payload(
                sample_customer.id, line_items, Document_Type="Quotation"
            ),
        )

        assert response.status_code == 201
        assert json.loads(response.data)["Document_ID"] == "OLCQ_2025-05-27_01"

    def test_legacy_date_key(self, client, sample_customer, line_items):
        payload = _invoice_payload(sample_customer.id, line_items)
        payload["invoiceDateInput"] = payload.pop("Date")
        response = client.post("/api/invoices", json=payload)

        assert response.status_code == 201
        assert json.loads(response.data)["Date"].startswith("2025-05-27")

    def test_production_customer_gets_fifteen_day_term(
        self, client, sample_production_customer, line_items
    ):
        response = client.post(
            "/api/invoices",
            json=_invoice_payload(sample_production_customer.id, line_items),
        )

        assert json.loads(response.data)["Payment_Term"] == "15 days"

    def test_unknown_customer(self, client, line_items):
        response = client.post("/api/invoices", json=_invoice_payload(99999, line_items))

        assert response.status_code == 404

    def test_empty_items_rejected(self, client, sample_customer):
        response = client.post("/api/invoices", json=_invoice_payload(sample_customer.id, []))

        assert response.status_code == 400
        data = json.loads(response.data)
        assert "At least one item is required in the invoice/quotation." in data["details"]

    def test_bad_line_item_reports_index(self, client, sample_customer, line_items):
        line_items[1]["Quantity"] = 0
        response = client.post(
            "/api/invoices", json=_invoice_payload(sample_customer.id, line_items)
        )

        assert response.status_code == 400
        data = json.loads(response.data)
        assert any(message.startswith("Item at index 1:") for message in data["details"])

    def test_invalid_document_type(self, client, sample_customer, line_items):
        response = client.post(
            "/api/invoices",
            json=_invoice_payload(sample_customer.id, line_items, Document_Type="Receipt"),
        )

        assert response.status_code == 400

    def test_get_and_list_invoices(self, client, sample_customer, line_items):
        created = json.loads(
            client.post(
                "/api/invoices", json=_invoice_payload(sample_customer.id, line_items)
            ).data
        )

        fetched = client.get(f"/api/invoices/{created['id']}")
        listed = client.get("/api/invoices")

        assert fetched.status_code == 200
        assert json.loads(fetched.data)["Document_ID"] == created["Document_ID"]
        assert len(json.loads(listed.data)) == 1

    def test_get_invoice_nonexistent(self, client):
        assert client.get("/api/invoices/99999").status_code == 404

    def test_update_payment(self, client, sample_customer, line_items):
        created = json.loads(
            client.post(
                "/api/invoices", json=_invoice_payload(sample_customer.id, line_items)
            ).data
        )

        response = client.put(
            f"/api/invoices/{created['id']}",
            json={"Payment_Status": "Partially Paid", "Advance_Payment": 500},
        )

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data["Payment_Status"] == "Partially Paid"
        assert data["Advance_Payment"] == 500.0
        assert data["Total_Amount"] == created["Total_Amount"]

    def test_update_payment_invalid_status(self, client, sample_customer, line_items):
        created = json.loads(
            client.post(
                "/api/invoices", json=_invoice_payload(sample_customer.id, line_items)
            ).data
        )

        response = client.put(
            f"/api/invoices/{created['id']}", json={"Payment_Status": "Refunded"}
        )

        assert response.status_code == 400

    def test_document_ids_restart_each_day(self, client, sample_customer, line_items):
        """Test that the sequence starts again at _01 after midnight."""
        late = client.post(
            "/api/invoices",
            json=_invoice_payload(sample_customer.id, line_items, Date="2025-05-27T23:30:00"),
        )
        early = client.post(
            "/api/invoices",
            json=_invoice_payload(sample_customer.id, line_items, Date="2025-05-28T00:10:00"),
        )

        assert json.loads(late.data)["Document_ID"] == "OLCI_2025-05-27_01"
        assert json.loads(early.data)["Document_ID"] == "OLCI_2025-05-28_01"

    def test_non_finite_amounts_rejected(self, client, sample_customer, line_items):
        """Test that JSON Infinity / NaN never reach the totals."""
        line_items[0]["Line_Total"] = float("inf")
        line_items[1]["Rate"] = float("nan")
        response = client.post(
            "/api/invoices",
            data=json.dumps(_invoice_payload(sample_customer.id, line_items)),
            content_type="application/json",
        )

        assert response.status_code == 400
        data = json.loads(response.data)
        assert "Item at index 0: Line_Total must be a non-negative number." in data["details"]
        assert "Item at index 1: Rate must be a non-negative number." in data["details"]
        assert json.loads(client.get("/api/invoices").data) == []

    def test_document_id_collision_reports_conflict(
        self, client, sample_customer, line_items, monkeypatch
    ):
        monkeypatch.setattr(
            invoice_service,
            "generate_document_id",
            lambda session, document_type, business_date: "OLCI_2025-05-27_01",
        )
        payload = _invoice_payload(sample_customer.id, line_items)
        assert client.post("/api/invoices", json=payload).status_code == 201

        response = client.post("/api/invoices", json=payload)

        assert response.status_code == 400
        data = json.loads(response.data)
        assert data["error"] == "This Document ID is already in use. Please try again."

    def test_other_integrity_errors_are_not_conflicts(
        self, client, sample_customer, line_items, monkeypatch
    ):
        """Test that a rejected check constraint is not blamed on the Document ID."""
        monkeypatch.setattr(
            invoice_service, "compute_total_amount", lambda items: Decimal("-1")
        )
        response = client.post(
            "/api/invoices", json=_invoice_payload(sample_customer.id, line_items)
        )

        assert response.status_code == 500
        data = json.loads(response.data)
        assert "Document ID" not in data["error"]

    def test_blank_payment_status_rejected(self, client, sample_customer, line_items):
        """Test that a blank status is refused and the invoice stays readable."""
        created = json.loads(
            client.post(
                "/api/invoices", json=_invoice_payload(sample_customer.id, line_items)
            ).data
        )

        response = client.put(f"/api/invoices/{created['id']}", json={"Payment_Status": ""})

        assert response.status_code == 400
        fetched = client.get(f"/api/invoices/{created['id']}")
        assert fetched.status_code == 200
        assert json.loads(fetched.data)["Payment_Status"] == "Unpaid"

    def test_blank_advance_payment_rejected(self, client, sample_customer, line_items):
        created = json.loads(
            client.post(
                "/api/invoices",
                json=_invoice_payload(sample_customer.id, line_items, Advance_Payment=300),
            ).data
        )

        response = client.put(f"/api/invoices/{created['id']}", json={"Advance_Payment": ""})

        assert response.status_code == 400
        data = json.loads(response.data)
        assert "Advance payment must be a non-negative number." in data["details"]
        fetched = json.loads(client.get(f"/api/invoices/{created['id']}").data)
        assert fetched["Advance_Payment"] == 300.0

    def test_search_by_nickname_and_phone(
        self, client, sample_customer, sample_production_customer, line_items
    ):
        client.post("/api/invoices", json=_invoice_payload(sample_customer.id, line_items))
        client.post(
            "/api/invoices",
            json=_invoice_payload(sample_production_customer.id, line_items),
        )

        by_nickname = json.loads(client.get("/api/invoices/search?nickname=jsm").data)
        by_phone = json.loads(client.get("/api/invoices/search?phone=0771").data)

        assert [i["Customer_ID"] for i in by_nickname] == [sample_production_customer.id]
        assert [i["Customer_ID"] for i in by_phone] == [sample_customer.id]


@pytest.mark.invoices
class TestBarcodeScan:
    """Test suite for turning scanned barcodes into line items."""

    def test_scan_laser_cutting(self, client):
        response = client.post(
            "/api/invoices/scan",
            json={"Barcode_ID": "LC", "Quantity": 1, "Duration": 10},
        )

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data["Item_Description"] == "Laser Cutting (10 minutes)"
        assert data["Rate"] == 600.0
        assert data["Line_Total"] == 600.0

    def test_scan_laser_cutting_with_material_cost(self, client):
        response = client.post(
            "/api/invoices/scan",
            json={"Barcode_ID": "LC", "Quantity": 2, "Duration": 10, "Material_Cost": 150},
        )

        data = json.loads(response.data)
        assert data["Item_Description"] == "Laser Cutting (10 minutes, Material Cost: LKR 150)"
        assert data["Rate"] == 750.0
        assert data["Line_Total"] == 1500.0

    def test_scan_laser_cutting_requires_duration(self, client):
        response = client.post("/api/invoices/scan", json={"Barcode_ID": "LC", "Quantity": 1})

        assert response.status_code == 400

    def test_scan_laser_cutting_rejects_non_finite_duration(self, client):
        response = client.post(
            "/api/invoices/scan",
            data='{"Barcode_ID": "LC", "Quantity": 1, "Duration": Infinity}',
            content_type="application/json",
        )

        assert response.status_code == 400

    def test_scan_catalog_product(self, client, sample_product):
        response = client.post(
            "/api/invoices/scan",
            json={"Barcode_ID": sample_product.barcode_id, "Quantity": 2},
        )

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data["Item_Description"] == "Shoe Laser Cutting (SLC-JSmith-Leather-001)"
        assert data["Quantity"] == 2
        assert data["Rate"] == 5000.0
        assert data["Line_Total"] == 10000.0

    def test_scan_unknown_barcode(self, client):
        response = client.post(
            "/api/invoices/scan", json={"Barcode_ID": "ORGA-WI-0000", "Quantity": 1}
        )

        assert response.status_code == 404

    def test_scan_invalid_prefix(self, client):
        response = client.post(
            "/api/invoices/scan", json={"Barcode_ID": "XYZ-1234", "Quantity": 1}
        )

        assert response.status_code == 400


@pytest.mark.invoices
class TestPrint:
    """Test suite for PDF printing."""

    def test_print_returns_pdf_attachment(self, client, line_items):
        response = client.post(
            "/api/invoices/print",
            json={
                "Document_Type": "Invoice",
                "Customer_Name": "John Doe",
                "Address": "12 Galle Road, Colombo",
                "Customer_Mobile": "0771234567",
                "Customer_Type": "In-store",
                "Items": line_items,
                "Total_Amount": 10600,
                "Discount_Price": 10,
                "Advance_Payment": 500,
            },
        )

        assert response.status_code == 200
        assert response.mimetype == "application/pdf"
        disposition = response.headers["Content-Disposition"]
        assert "attachment" in disposition
        assert "invoice_OLH" in disposition
        assert response.data.startswith(b"%PDF")

    def test_print_with_empty_payload(self, client):
        response = client.post("/api/invoices/print", json={})

        assert response.status_code == 200
        assert response.data.startswith(b"%PDF")
