from sqlalchemy import text
from core.log import logger
from models import db, engine
from settings import DEPLOYMENT_MODE


def health_check():
    logger.info(f"run app in {DEPLOYMENT_MODE} mode")
    logger.info(f"database backend = {engine.dialect.name}")
    logger.info("try echo database")
    with db() as session:
        session.execute(text("SELECT 1"))
    logger.info("successfully connect to database")
