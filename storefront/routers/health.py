import logging
from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError

from ..DB import Database, get_database

logger = logging.getLogger(__name__)

router = APIRouter(tags=['health'])


@router.get('/health')
def health_check():
    return {'status': 'ok'}


@router.get('/health/database')
def database_health_check(db: Database = Depends(get_database)):
    try:
        db.ping()
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        raise HTTPException(
            status_code=HTTPStatus.SERVICE_UNAVAILABLE,
            detail='Database connection failed',
        )
    return {'status': 'ok', 'database': 'connected'}
