# storefront/core/db.py
from __future__ import annotations

from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from storefront.core.config import get_settings


class Base(DeclarativeBase):
    """Declarative base for the catalogue models."""


@lru_cache(maxsize=1)
def get_engine():
    # pool_pre_ping drops dead connections before use
    return create_engine(get_settings().database_url_resolved, pool_pre_ping=True)


@lru_cache(maxsize=1)
def get_sessionmaker():
    return sessionmaker(
        bind=get_engine(),
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        class_=Session,
    )
