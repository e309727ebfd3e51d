from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from dotenv import load_dotenv
load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = "sqlite:///./aspyr.db"
    secret_key: str = "change-me-in-production"
    access_token_expire_minutes: int = 30
    # "sql" talks to DATABASE_URL directly, "rest" to a PostgREST-style table API.
    gateway_backend: str = "sql"
    rest_url: str = "http://localhost:54321/rest/v1"
    rest_api_key: str = ""
    remote_timeout_seconds: float = 10.0
    log_level: str = "INFO"
    log_dir: str = "logs"
    log_console: bool = False


settings = Settings()


def _connect_args(url: str) -> dict:
    return {"check_same_thread": False} if url.startswith("sqlite") else {}


engine = create_engine(settings.database_url, connect_args=_connect_args(settings.database_url))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

def reset_db():
    Base.metadata.drop_all(bind=engine)
    create_db()

def create_db():
    # Tables must be registered on Base before create_all.
    import aspyr.models  # noqa: F401
    Base.metadata.create_all(bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
