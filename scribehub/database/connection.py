import os
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

# Configuração do banco de dados
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./transcriptions.db")

Base = declarative_base()


def build_engine(database_url: str = DATABASE_URL) -> Engine:
    """Cria o engine; para SQLite usa configurações especiais"""
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={
                "check_same_thread": False,
                "timeout": 20
            },
            poolclass=StaticPool,
            echo=os.getenv("DEBUG", "false").lower() == "true"
        )
    return create_engine(database_url)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def create_db_and_tables(engine: Engine):
    """Cria as tabelas no banco de dados"""
    from .models import JobRecord  # noqa: F401  Import aqui para evitar circular imports
    Base.metadata.create_all(bind=engine)
