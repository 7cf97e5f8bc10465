from fastapi.testclient import TestClient
from models import engine, db, get_db_sync, get_db_sync_for_test
from models.Sale import Sale
from models.SaleDetail import SaleDetail
from models.Ticket import Ticket
from main import app
import alembic.config
from sqlalchemy import delete
from unittest import TestCase


class TestSale(TestCase):
    @classmethod
    def setUpClass(cls):
        alembic_args = ["upgrade", "head"]
        alembic.config.main(argv=alembic_args)

    def setUp(self):
        self.connection = engine.connect()
        self.trans = self.connection.begin()
        self.session = db(
            bind=self.connection, join_transaction_mode="create_savepoint"
        )
        self.session.execute(delete(SaleDetail))
        self.session.execute(delete(Sale))
        self.session.execute(delete(Ticket))

        ticket_a = Ticket(event_location_id=1, code="SALETKA1")
        ticket_b = Ticket(event_location_id=1, code="SALETKB1")
        self.session.add_all([ticket_a, ticket_b])
        self.session.commit()
        self.ticket_a_id = ticket_a.id
        self.ticket_b_id = ticket_b.id

        app.dependency_overrides[get_db_sync] = get_db_sync_for_test(db=self.session)
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        self.session.close()
        self.trans.rollback()
        self.connection.close()

    def _create_sale(self, total=100.00, user_id=None, partner_id=None):
        return self.client.post(
            "/sales/",
            json={
                "user_id": user_id,
                "partner_id": partner_id,
                "total_amount": total,
                "sale_details": [
                    {"ticket_id": self.ticket_a_id, "amount": 50.00},
                    {"ticket_id": self.ticket_b_id, "amount": 50.00},
                ],
            },
        )

    def test_create_sale(self):
        response = self._create_sale(user_id=1, partner_id=2)
        assert response.status_code == 201
        data = response.json()
        assert data["total_amount"] == 100.0
        assert data["user_id"] == 1
        assert data["partner_id"] == 2
        assert len(data["sale_details"]) == 2

        fetched = self.client.get(f"/sales/{data['id']}").json()
        assert len(fetched["sale_details"]) == 2
        assert sum(d["amount"] for d in fetched["sale_details"]) == 100.0
        assert {d["ticket_id"] for d in fetched["sale_details"]} == {
            self.ticket_a_id,
            self.ticket_b_id,
        }

    def test_create_sale_missing_total(self):
        response = self.client.post("/sales/", json={"sale_details": []})
        assert response.status_code == 422

    def test_create_sale_unknown_ticket(self):
        response = self.client.post(
            "/sales/",
            json={
                "total_amount": 10,
                "sale_details": [{"ticket_id": 999999, "amount": 10}],
            },
        )
        assert response.status_code == 409
        assert self.client.get("/sales/all").json()["results"] == []

    def test_get_sale_not_found(self):
        response = self.client.get("/sales/999999")
        assert response.status_code == 400
        assert "not found" in response.json()["message"]

    def test_update_sale(self):
        sale = self._create_sale().json()
        response = self.client.put(
            f"/sales/{sale['id']}", json={"total_amount": 75.5, "user_id": 9}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["total_amount"] == 75.5
        assert data["user_id"] == 9

    def test_update_sale_detail(self):
        sale = self._create_sale().json()
        detail_id = sale["sale_details"][0]["id"]

        response = self.client.put(
            f"/sales/details/{detail_id}", json={"amount": 20}
        )
        assert response.status_code == 200
        assert response.json()["amount"] == 20.0

        detail = self.client.get(f"/sales/details/{detail_id}").json()
        assert detail["amount"] == 20.0
        assert detail["sale_id"] == sale["id"]

    def test_sale_details_listing(self):
        sale = self._create_sale().json()
        response = self.client.get(f"/sales/{sale['id']}/details")
        assert response.status_code == 200
        assert len(response.json()["results"]) == 2

    def test_delete_sale_does_not_cascade(self):
        sale = self._create_sale().json()
        detail_id = sale["sale_details"][0]["id"]

        response = self.client.delete(f"/sales/{sale['id']}")
        assert response.status_code == 200
        assert response.json()["message"] == "Sale deleted successfully"
        assert self.client.get(f"/sales/{sale['id']}").status_code == 400
        assert self.client.get(f"/sales/details/{detail_id}").status_code == 200

        restored = self.client.post(f"/sales/{sale['id']}/restore")
        assert restored.status_code == 200
        assert self.client.get(f"/sales/{sale['id']}").status_code == 200

    def test_delete_and_restore_detail(self):
        sale = self._create_sale().json()
        detail_id = sale["sale_details"][0]["id"]

        assert self.client.delete(f"/sales/details/{detail_id}").status_code == 200
        fetched = self.client.get(f"/sales/{sale['id']}").json()
        assert len(fetched["sale_details"]) == 1

        assert (
            self.client.post(f"/sales/details/{detail_id}/restore").status_code == 200
        )
        fetched = self.client.get(f"/sales/{sale['id']}").json()
        assert len(fetched["sale_details"]) == 2

    def test_activate_and_deactivate(self):
        sale = self._create_sale().json()

        response = self.client.post(f"/sales/{sale['id']}/deactivate")
        assert response.status_code == 200
        assert self.client.get("/sales/active").json()["results"] == []

        self.client.post(f"/sales/{sale['id']}/activate")
        assert len(self.client.get("/sales/active").json()["results"]) == 1

    def test_filters(self):
        self._create_sale(user_id=1, partner_id=7)
        self._create_sale(user_id=2, partner_id=7)

        assert len(self.client.get("/sales/user/1").json()["results"]) == 1
        assert len(self.client.get("/sales/partner/7").json()["results"]) == 2

        response = self.client.get(
            "/sales/date-range",
            params={
                "start_date": "2000-01-01T00:00:00",
                "end_date": "2999-01-01T00:00:00",
            },
        )
        assert response.status_code == 200
        assert len(response.json()["results"]) == 2

    def test_list_sales_with_pagination(self):
        for _ in range(12):
            self._create_sale()

        response = self.client.get("/sales/?page=2&page_size=5")
        assert response.status_code == 200
        data = response.json()
        assert data["page"] == 2
        assert data["count"] == 12
        assert data["page_count"] == 3
        assert len(data["results"]) == 5

        assert self.client.get("/sales/?page=0").status_code == 400

    def test_statistics(self):
        self._create_sale(total=100.00)
        other = self._create_sale(total=50.00).json()
        self.client.post(f"/sales/{other['id']}/deactivate")

        response = self.client.get("/sales/statistics")
        assert response.status_code == 200
        assert response.json() == {
            "total_sales": 2,
            "active_sales": 1,
            "total_revenue": 150.0,
            "average_sale_amount": 75.0,
        }

    def test_statistics_without_sales(self):
        response = self.client.get("/sales/statistics")
        assert response.status_code == 200
        assert response.json() == {
            "total_sales": 0,
            "active_sales": 0,
            "total_revenue": 0.0,
            "average_sale_amount": 0.0,
        }
