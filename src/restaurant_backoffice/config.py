import logging
import sys

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str
    SQL_ECHO: bool = False
    LOG_LEVEL: str = "INFO"

    # столики
    MAX_SEATS: int = 30

    # заказы
    ENFORCE_STATUS_TRANSITIONS: bool = True
    ALLOW_INITIAL_STATUS: bool = True
    DEFAULT_PAGE_SIZE: int = 20

    # администратор по умолчанию
    DEFAULT_ADMIN_EMAIL: str = "admin@example.com"
    DEFAULT_ADMIN_NAME: str = "Admin"

    class Config:
        env_file = ".env"


settings = Settings()


def setup_logging(level: str | None = None) -> logging.Logger:
    """
    Настраивает логирование приложения.
    Уровень берётся из LOG_LEVEL, если не передан явно.
    """
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format="%(asctime)s │ %(levelname)-8s │ %(name)-30s │ %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # SQL-логи только через SQL_ECHO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    return logging.getLogger("restaurant_backoffice")
