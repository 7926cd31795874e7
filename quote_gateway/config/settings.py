from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Stock Quote Gateway"
    app_version: str = "1.0.0"
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    alpha_vantage_api_key: str = ""
    alpha_vantage_base_url: str = "https://www.alphavantage.co/query"
    alpha_vantage_function: str = "GLOBAL_QUOTE"
    request_timeout_seconds: int = 10

    cache_backend: str = "database"
    database_url: str = "sqlite:///./quote_cache.db"
    cache_table_name: str = "stock-prices-cache"
    cache_ttl_seconds: int = 300

    default_symbols: list[str] = ["AAPL", "MSFT", "AMZN", "NVDA", "TSLA", "META"]
    max_concurrent_fetches: int = 8

    rate_limit_failure_threshold: int = 1
    rate_limit_cooldown_seconds: int = 60

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")


settings = Settings()
