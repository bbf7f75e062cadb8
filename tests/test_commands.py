import pytest
import json


@pytest.mark.unit
class TestCommands:
    """Test suite for the flask CLI commands."""

    def test_init_db(self, runner):
        result = runner.invoke(args=["init-db"])

        assert result.exit_code == 0
        assert "Database tables created." in result.output

    def test_seed(self, runner, client):
        result = runner.invoke(args=["seed"])

        assert result.exit_code == 0
        assert "Seeded 3 customers and 3 products." in result.output
        assert "SLC-JSmith-Leather-001 -> ORGA-SLC-" in result.output
        assert "LC -> LC" in result.output

        customers = json.loads(client.get("/api/customers").data)
        products = json.loads(client.get("/api/products").data)
        assert len(customers) == 3
        assert {p["Product_Category"] for p in products} == {
            "Shoe Laser Cutting",
            "Wedding Invitations",
            "Laser Cutting",
        }

    def test_seed_replaces_existing_data(self, runner, client, sample_customer):
        runner.invoke(args=["seed"])
        result = runner.invoke(args=["seed"])

        assert result.exit_code == 0
        customers = json.loads(client.get("/api/customers").data)
        assert len(customers) == 3
