import json
from unittest import TestCase
from unittest.mock import patch

import alembic.config
from sqlalchemy import delete
from typer.testing import CliRunner

from cli import app
from models import db, engine
from models.Sale import Sale
from models.SaleDetail import SaleDetail
from models.Ticket import Ticket
from services.ticket import TicketService

runner = CliRunner()


class TestCli(TestCase):
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
        self.session.commit()

        self.factory = patch("models.factory_session", return_value=self.session)
        self.factory.start()

    def tearDown(self):
        self.factory.stop()
        self.session.close()
        self.trans.rollback()
        self.connection.close()

    def test_generate_tickets(self):
        result = runner.invoke(app, ["generate-tickets", "4", "3"])

        assert result.exit_code == 0, result.output
        codes = result.output.split()
        assert len(codes) == 3
        assert len(set(codes)) == 3
        tickets = TicketService(self.session).get_tickets_by_event_location(4)
        assert sorted(t.code for t in tickets) == sorted(codes)

    def test_generate_tickets_bad_quantity(self):
        result = runner.invoke(app, ["generate-tickets", "4", "0"])

        assert result.exit_code == 1
        assert "Quantity must be between 1 and 1000" in result.output
        assert len(TicketService(self.session).get_all_tickets()) == 0

    def test_use_ticket(self):
        code = TicketService(self.session).create_ticket(event_location_id=1).code

        result = runner.invoke(app, ["use-ticket", code])
        assert result.exit_code == 0, result.output
        assert f"Ticket {code} used at" in result.output

        result = runner.invoke(app, ["use-ticket", code])
        assert result.exit_code == 1
        assert "Ticket has already been used" in result.output

    def test_use_unknown_ticket(self):
        result = runner.invoke(app, ["use-ticket", "NOPE0000"])

        assert result.exit_code == 1
        assert "Ticket not found" in result.output

    def test_ticket_statistics(self):
        service = TicketService(self.session)
        service.use_ticket_by_id(service.create_ticket(event_location_id=1).id)
        service.create_ticket(event_location_id=1)

        result = runner.invoke(app, ["ticket-statistics"])

        assert result.exit_code == 0, result.output
        stats = json.loads(result.output)
        assert stats["total"] == 2
        assert stats["used"] == 1
        assert stats["unused"] == 1
        assert stats["usage_rate"] == 50

    def test_sales_statistics_without_sales(self):
        result = runner.invoke(app, ["sales-statistics"])

        assert result.exit_code == 0, result.output
        stats = json.loads(result.output)
        assert stats["total_sales"] == 0
        assert stats["total_revenue"] == 0
