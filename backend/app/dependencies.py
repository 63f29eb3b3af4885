from fastapi import Depends
from sqlalchemy.orm import sessionmaker

from app.database import SessionLocal
from app.services.search_service import SearchService, build_search_service


def get_session_factory() -> sessionmaker:
    return SessionLocal


def get_search_service(session_factory: sessionmaker = Depends(get_session_factory)) -> SearchService:
    return build_search_service(session_factory)
