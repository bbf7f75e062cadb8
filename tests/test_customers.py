import pytest
import json


@pytest.mark.customers
class TestCustomers:
    """Test suite for customer endpoints."""

    def test_create_instore_customer(self, client, instore_data):
        """Test creating an In-store customer keyed by phone number."""
        response = client.post("/api/customers", json=instore_data)

        assert response.status_code == 201
        data = json.loads(response.data)
        assert data["Full_Name"] == "John Doe"
        assert data["Customer_Type"] == "In-store"
        assert data["Instore_Phone_Number"] == "0771234567"
        assert data["Status"] == "Active"
        assert "Nickname" not in data

    def test_create_production_customer(self, client, production_data):
        """Test creating a Production customer keyed by nickname."""
        response = client.post("/api/customers", json=production_data)

        assert response.status_code == 201
        data = json.loads(response.data)
        assert data["Nickname"] == "JSmith"
        assert data["Tax_ID"] == "123456789-7000"

    def test_phone_number_eight_digits_rejected(self, client, instore_data):
        """Test that an 8-digit phone number fails validation."""
        instore_data["Phone_Number"] = "12345678"
        response = client.post("/api/customers", json=instore_data)

        assert response.status_code == 400
        data = json.loads(response.data)
        assert "Phone number must be 9 or 10 digits" in data["details"]

    def test_phone_number_nine_digits_accepted(self, client, instore_data):
        """Test that a 9-digit phone number is accepted."""
        instore_data["Phone_Number"] = "123456789"
        response = client.post("/api/customers", json=instore_data)

        assert response.status_code == 201

    def test_missing_nickname_for_production(self, client, production_data):
        """Test that Production customers need a nickname."""
        del production_data["Nickname"]
        response = client.post("/api/customers", json=production_data)

        assert response.status_code == 400
        data = json.loads(response.data)
        assert "Nickname is required for Production customers" in data["details"]

    def test_invalid_email_rejected(self, client, instore_data):
        instore_data["Email"] = "not-an-email"
        response = client.post("/api/customers", json=instore_data)

        assert response.status_code == 400
        data = json.loads(response.data)
        assert "Please enter a valid email address" in data["details"]

    def test_non_string_full_name_rejected(self, client, instore_data):
        """Test that a numeric name is a field error rather than a server error."""
        instore_data["Full_Name"] = 12345
        response = client.post("/api/customers", json=instore_data)

        assert response.status_code == 400
        data = json.loads(response.data)
        assert "Full name must be text" in data["details"]

    def test_list_customer_type_rejected(self, client, instore_data):
        instore_data["Customer_Type"] = ["In-store"]
        response = client.post("/api/customers", json=instore_data)

        assert response.status_code == 400
        data = json.loads(response.data)
        assert (
            "Invalid customer type. Must be In-store, Production, or Wedding Invitation Maker."
            in data["details"]
        )

    def test_duplicate_nickname_rejected(self, client, production_data):
        """Test that a nickname can only belong to one Production customer."""
        first = client.post("/api/customers", json=production_data)
        assert first.status_code == 201

        production_data["Full_Name"] = "Someone Else"
        response = client.post("/api/customers", json=production_data)

        assert response.status_code == 400
        data = json.loads(response.data)
        assert "already in use" in data["error"]

    def test_get_customer_is_idempotent(self, client, sample_customer):
        """Test that two reads of the same customer return identical bodies."""
        first = client.get(f"/api/customers/{sample_customer.id}")
        second = client.get(f"/api/customers/{sample_customer.id}")

        assert first.status_code == 200
        assert json.loads(first.data) == json.loads(second.data)

    def test_get_customer_nonexistent(self, client):
        response = client.get("/api/customers/99999")

        assert response.status_code == 404
        data = json.loads(response.data)
        assert "error" in data

    def test_list_customers(self, client, sample_customer, sample_production_customer):
        response = client.get("/api/customers")

        assert response.status_code == 200
        data = json.loads(response.data)
        assert [c["Full_Name"] for c in data] == ["John Doe", "Jane Smith"]

    def test_search_instore_round_trip(self, client, instore_data):
        """Test that a created In-store customer is found again by phone number."""
        created = json.loads(client.post("/api/customers", json=instore_data).data)

        response = client.post(
            "/api/customers/search",
            json={"Customer_Type": "In-store", "Identifier": "0771234567"},
        )

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data["id"] == created["id"]

    def test_search_unknown_nickname(self, client, sample_production_customer):
        response = client.post(
            "/api/customers/search",
            json={"Customer_Type": "Production", "Identifier": "Nobody"},
        )

        assert response.status_code == 404
        data = json.loads(response.data)
        assert data["error"] == "No customer found with this nickname."

    def test_search_requires_type_and_identifier(self, client):
        response = client.post("/api/customers/search", json={"Customer_Type": "In-store"})

        assert response.status_code == 400

    def test_update_replaces_index_row(self, client, sample_production_customer, production_data):
        """Test that changing the nickname moves the lookup to the new value."""
        production_data["Nickname"] = "JaneS"
        response = client.put(
            f"/api/customers/{sample_production_customer.id}", json=production_data
        )

        assert response.status_code == 200
        assert json.loads(response.data)["Nickname"] == "JaneS"

        old = client.post(
            "/api/customers/search",
            json={"Customer_Type": "Production", "Identifier": "JSmith"},
        )
        new = client.post(
            "/api/customers/search",
            json={"Customer_Type": "Production", "Identifier": "JaneS"},
        )
        assert old.status_code == 404
        assert new.status_code == 200

    def test_update_changes_customer_type(self, client, sample_production_customer, production_data):
        """Test moving a Production customer to In-store."""
        production_data.update(
            {"Customer_Type": "In-store", "Phone_Number": "0711111111"}
        )
        response = client.put(
            f"/api/customers/{sample_production_customer.id}", json=production_data
        )

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data["Customer_Type"] == "In-store"
        assert data["Instore_Phone_Number"] == "0711111111"

    def test_delete_customer(self, client, sample_customer):
        response = client.delete(f"/api/customers/{sample_customer.id}")

        assert response.status_code == 200
        assert client.get(f"/api/customers/{sample_customer.id}").status_code == 404

    def test_delete_customer_with_invoices_refused(self, client, sample_customer, line_items):
        client.post(
            "/api/invoices",
            json={
                "Document_Type": "Invoice",
                "Customer_ID": sample_customer.id,
                "Items": line_items,
            },
        )

        response = client.delete(f"/api/customers/{sample_customer.id}")

        assert response.status_code == 400
        data = json.loads(response.data)
        assert "cannot be deleted" in data["error"]
