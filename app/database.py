import os

from dotenv import load_dotenv
from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from typing import Optional

from app.repository.product_repository import (
    InMemoryProductStore,
    ProductStore,
    SqlProductStore,
)

load_dotenv()

DATABASE_ECHO = os.getenv("DATABASE_ECHO", "false").lower() == "true"


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
        # a purely in-memory SQLite database only lives as long as its connection
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            return create_engine(
                database_url,
                echo=echo,
                connect_args=connect_args,
                poolclass=StaticPool,
            )
        return create_engine(database_url, echo=echo, connect_args=connect_args)
    return create_engine(database_url, echo=echo)


def build_product_store(database_url: Optional[str] = None) -> ProductStore:
    """SQL backed store when a database URL is configured, in-memory otherwise."""
    if database_url is None:
        database_url = os.getenv("DATABASE_URL")
    if not database_url:
        return InMemoryProductStore()
    return SqlProductStore(create_db_engine(database_url, echo=DATABASE_ECHO))


def get_product_store(request: Request) -> ProductStore:
    return request.app.state.product_store
