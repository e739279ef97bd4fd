from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    data_dir: Path = Path(__file__).resolve().parents[1] / "data"
    persistence_backend: Literal["json", "sql"] = "json"
    database_url: str = "sqlite+pysqlite:///:memory:"

    session_secret: str = "dev-secret-change-me"
    session_max_age: int = 24 * 3600
    front_desk_pass: str = "frontdesk"
    store_pass: str = "store"
    driver_pass: str = "driver"

    base_url: str | None = None
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000

    @property
    def db_file(self) -> Path:
        return self.data_dir / "db.json"

    @property
    def uploads_dir(self) -> Path:
        return self.data_dir / "uploads"


settings = Settings()
