import json

import typer

app = typer.Typer()


@app.command()
def generate_tickets(event_location_id: int, quantity: int):
    from core.exceptions import TicketingError
    from models import factory_session
    from services.ticket import TicketService

    with factory_session() as db:
        try:
            tickets = TicketService(db).generate_tickets(event_location_id, quantity)
        except TicketingError as e:
            typer.echo(e.message, err=True)
            raise typer.Exit(code=1)
        for ticket in tickets:
            print(ticket.code)


@app.command()
def use_ticket(code: str):
    from core.exceptions import TicketingError
    from models import factory_session
    from services.ticket import TicketService

    with factory_session() as db:
        try:
            ticket = TicketService(db).use_ticket_by_code(code)
        except TicketingError as e:
            typer.echo(e.message, err=True)
            raise typer.Exit(code=1)
        print(f"Ticket {ticket.code} used at {ticket.used_at}")


@app.command()
def ticket_statistics():
    from models import factory_session
    from services.ticket import TicketService

    with factory_session() as db:
        print(json.dumps(TicketService(db).get_statistics(), indent=2))


@app.command()
def sales_statistics():
    from models import factory_session
    from schemas.sale import SaleStatisticsResponse
    from services.sale import SaleService

    with factory_session() as db:
        stats = SaleStatisticsResponse(**SaleService(db).get_statistics())
        print(stats.model_dump_json(indent=2))


if __name__ == "__main__":
    app()
