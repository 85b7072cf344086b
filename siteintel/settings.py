from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    app_name: str = "Haven Site Intelligence"
    version: str = "1.0.0"

    # per-request timeout for upstream GIS / Legistar / Socrata calls (seconds)
    request_timeout: float = 20.0
    user_agent: str = "HavenSiteIntel/1.0"

    # threads used to fan out one brief
    max_workers: int = 8

    default_jurisdiction: str = "davidson"
    log_level: str = "INFO"

    cors_origins: list[str] = ["*"]

settings = Settings()
