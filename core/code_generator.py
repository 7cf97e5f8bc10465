import secrets
import string
from typing import Callable
from sqlalchemy.orm import Session
from core.exceptions import ExhaustedRetriesError
from core.log import logger
from repository.ticket import ticket_code_exists
from settings import TICKET_CODE_LENGTH, TICKET_CODE_MAX_ATTEMPTS

CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_code(length: int = TICKET_CODE_LENGTH) -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def generate_unique_code(
    db: Session,
    exists: Callable[[Session, str], bool] = ticket_code_exists,
    max_attempts: int = TICKET_CODE_MAX_ATTEMPTS,
) -> str:
    """Draw random codes until one is not held by a live ticket.

    The check is an optimization only, the unique index on ``ticket.code``
    decides at insert time. Nothing is reserved, insert the ticket right away.

    Raises:
        ExhaustedRetriesError: after ``max_attempts`` consecutive collisions
    """
    for attempt in range(1, max_attempts + 1):
        code = generate_code()
        if not exists(db, code):
            return code
        logger.warning(f"Ticket code collision on attempt {attempt}: {code}")

    logger.error(f"Unable to generate unique ticket code after {max_attempts} attempts")
    raise ExhaustedRetriesError(
        f"Unable to generate unique code after {max_attempts} attempts"
    )
