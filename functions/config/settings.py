from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Firebase / GCP
    gcp_project_id: Optional[str] = None
    gcp_service_account_key: Optional[str] = None  # JSON key as string or path; ADC when unset
    storage_bucket: Optional[str] = None  # defaults to <project>.appspot.com

    # Deployment
    region: str = "asia-south1"
    enforce_app_check: bool = False  # TODO: enable once every client ships App Check tokens

    # Erasure
    write_group_limit: int = 500  # Firestore caps a batched write at 500 operations
    deleted_placeholder: str = "[Deleted]"
    avatar_filename: str = "avatar.jpg"

    # App
    app_name: str = "onebytwo-functions"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "10/minute"  # slowapi format, e.g. "10/minute"
    host: str = "0.0.0.0"
    port: int = 8080  # Cloud Run injects PORT

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
