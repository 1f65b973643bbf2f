from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "HOMEFIT_"}

    # Hosted aggregate tables (PostgREST endpoint)
    postgrest_url: str = "http://localhost:3000"
    postgrest_api_key: str = ""

    # Redis
    redis_url: str = "redis://localhost:6379/0"
    cache_ttl_seconds: int = 6 * 3600

    # App
    debug: bool = False
    log_level: str = "INFO"

    # Area profile window
    default_window_months: int = 24

    # Financing assumptions (resale flats)
    default_loan_years: int = 25
    default_interest_rate: float = 0.026
    resale_ltv: float = 0.75
    msr_limit: float = 0.30
    tdsr_limit: float = 0.55

    # Optional JSON override for the structural commute table
    commute_table_path: str | None = None


settings = Settings()
