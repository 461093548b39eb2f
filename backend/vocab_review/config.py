from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    data_dir: Path = Path.home() / ".vocab_review" / "data"
    sqlite_filename: str = "vocab_review.db"
    device_id: str = "default"  # scopes review history to one device
    session_max_size: int = 20
    max_live_sessions: int = 100  # oldest unfinished session is evicted past this
    log_level: str = "INFO"

    model_config = {"env_prefix": "VOCAB_REVIEW_"}

    @property
    def sqlite_path(self) -> Path:
        return self.data_dir / self.sqlite_filename


settings = Settings()
