from fastapi.testclient import TestClient
from models import engine, db, get_db_sync, get_db_sync_for_test
from models.Sale import Sale
from models.SaleDetail import SaleDetail
from models.Ticket import Ticket
from main import app
import alembic.config
from sqlalchemy import delete
from unittest import TestCase


class TestTicket(TestCase):
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

        ticket = Ticket(event_location_id=1, code="TEST2025")
        self.session.add(ticket)
        self.session.commit()
        self.test_ticket_id = ticket.id

        app.dependency_overrides[get_db_sync] = get_db_sync_for_test(db=self.session)
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        self.session.close()
        self.trans.rollback()
        self.connection.close()

    def test_create_ticket(self):
        response = self.client.post("/ticket/", json={"event_location_id": 4})
        assert response.status_code == 201
        data = response.json()
        assert data["event_location_id"] == 4
        assert len(data["code"]) == 8
        assert data["is_used"] is False
        assert data["used_at"] is None
        assert data["is_active"] is True

    def test_create_ticket_missing_event_location(self):
        response = self.client.post("/ticket/", json={})
        assert response.status_code == 422

    def test_use_ticket_flow(self):
        created = self.client.post("/ticket/", json={"event_location_id": 1}).json()

        response = self.client.post("/ticket/use", json={"code": created["code"]})
        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Ticket used successfully"
        assert data["ticket"]["is_used"] is True
        assert data["ticket"]["used_at"] is not None

        again = self.client.post("/ticket/use", json={"code": created["code"]})
        assert again.status_code == 400
        assert "already been used" in again.json()["message"]

    def test_use_ticket_by_id(self):
        response = self.client.post(f"/ticket/{self.test_ticket_id}/use")
        assert response.status_code == 200
        assert response.json()["ticket"]["code"] == "TEST2025"

    def test_use_unknown_code(self):
        response = self.client.post("/ticket/use", json={"code": "UNKNOWN1"})
        assert response.status_code == 400
        assert response.json()["message"] == "Ticket not found"

    def test_use_inactive_ticket(self):
        self.client.post(f"/ticket/{self.test_ticket_id}/deactivate")
        response = self.client.post("/ticket/use", json={"code": "TEST2025"})
        assert response.status_code == 400
        assert response.json()["message"] == "Ticket is not active"

    def test_generate_tickets(self):
        response = self.client.post(
            "/ticket/generate", json={"event_location_id": 9, "quantity": 5}
        )
        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "5 tickets generated successfully"
        assert len({t["code"] for t in data["tickets"]}) == 5

    def test_generate_tickets_invalid_quantity(self):
        for quantity in (0, 1001):
            response = self.client.post(
                "/ticket/generate",
                json={"event_location_id": 9, "quantity": quantity},
            )
            assert response.status_code == 400
            assert "between 1 and 1000" in response.json()["message"]

    def test_update_ticket_duplicate_code(self):
        created = self.client.post("/ticket/", json={"event_location_id": 1}).json()
        response = self.client.put(
            f"/ticket/{created['id']}", json={"code": "TEST2025"}
        )
        assert response.status_code == 409
        assert "already in use" in response.json()["message"]

    def test_update_ticket(self):
        response = self.client.put(
            f"/ticket/{self.test_ticket_id}",
            json={"event_location_id": 3, "code": "NEWCODE1"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["event_location_id"] == 3
        assert data["code"] == "NEWCODE1"

    def test_update_ticket_not_found(self):
        response = self.client.put("/ticket/999999", json={"event_location_id": 3})
        assert response.status_code == 400

    def test_get_ticket(self):
        response = self.client.get(f"/ticket/{self.test_ticket_id}")
        assert response.status_code == 200
        assert response.json()["code"] == "TEST2025"

        by_code = self.client.get("/ticket/code/TEST2025")
        assert by_code.status_code == 200
        assert by_code.json()["id"] == self.test_ticket_id

    def test_delete_and_restore(self):
        response = self.client.delete(f"/ticket/{self.test_ticket_id}")
        assert response.status_code == 200
        assert response.json()["message"] == "Ticket deleted successfully"

        assert self.client.get(f"/ticket/{self.test_ticket_id}").status_code == 400
        listed = self.client.get("/ticket/all").json()["results"]
        assert self.test_ticket_id not in [t["id"] for t in listed]

        restored = self.client.post(f"/ticket/{self.test_ticket_id}/restore")
        assert restored.status_code == 200
        listed = self.client.get("/ticket/all").json()["results"]
        assert self.test_ticket_id in [t["id"] for t in listed]

    def test_list_filters(self):
        self.client.post(f"/ticket/{self.test_ticket_id}/use")
        self.client.post("/ticket/", json={"event_location_id": 2})

        used = self.client.get("/ticket/used").json()["results"]
        unused = self.client.get("/ticket/unused").json()["results"]
        active = self.client.get("/ticket/active").json()["results"]
        by_location = self.client.get("/ticket/event-location/2").json()["results"]

        assert [t["id"] for t in used] == [self.test_ticket_id]
        assert len(unused) == 1
        assert len(active) == 2
        assert len(by_location) == 1

    def test_list_tickets_with_pagination(self):
        for _ in range(24):
            self.client.post("/ticket/", json={"event_location_id": 1})

        response = self.client.get("/ticket/?page=1&page_size=10")
        assert response.status_code == 200
        data = response.json()
        assert data["page"] == 1
        assert data["page_size"] == 10
        assert data["count"] == 25
        assert data["page_count"] == 3
        assert len(data["results"]) == 10

        last = self.client.get("/ticket/?page=3&page_size=10").json()
        assert len(last["results"]) == 5

    def test_list_tickets_invalid_pagination(self):
        assert self.client.get("/ticket/?page=0&page_size=10").status_code == 400
        assert self.client.get("/ticket/?page=1&page_size=0").status_code == 400

    def test_statistics(self):
        self.client.post(f"/ticket/{self.test_ticket_id}/use")
        self.client.post("/ticket/", json={"event_location_id": 1})

        response = self.client.get("/ticket/statistics")
        assert response.status_code == 200
        assert response.json() == {
            "total": 2,
            "used": 1,
            "unused": 1,
            "active": 2,
            "usage_rate": 50.0,
        }

    def test_statistics_without_tickets(self):
        self.client.delete(f"/ticket/{self.test_ticket_id}")
        response = self.client.get("/ticket/statistics")
        assert response.status_code == 200
        assert response.json()["usage_rate"] == 0
