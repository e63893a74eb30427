"""Settings management"""
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""
    
    # Application
    app_name: str = "pocket-trader"
    app_env: str = "development"
    debug: bool = True
    public_base_url: str = ""  # used to build the Telegram webhook URL
    
    # Database
    database_url: str = "sqlite+aiosqlite:///./pocket_trader.db"
    
    # Security
    jwt_secret_key: str = "change-me"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 30
    refresh_token_expire_days: int = 7
    extension_api_key: str = ""  # empty disables the extension key check
    
    # CORS
    cors_origins: str = "http://localhost:3000,http://localhost:8000"

    # Telegram
    telegram_bot_token: str = ""
    telegram_api_url: str = "https://api.telegram.org"
    telegram_webhook_secret: str = ""
    result_match_window_hours: int = 2
    result_match_candidates: int = 10

    # Auto-trade relay
    autotrade_state_file: str = ".autotrade_state.json"
    autotrade_poll_interval_seconds: float = 5.0
    autotrade_batch_size: int = 10
    autotrade_entry_window_seconds: int = 60
    broker_url_prefix: str = "https://pocketoption.com/"
    broker_utc_offset_hours: int = -3  # Pocket Option server time is UTC-3
    broker_response_timeout_seconds: float = 10.0

    # Web Push
    vapid_public_key: str = ""
    push_ttl_seconds: int = 86400

    # Price alert watcher
    binance_api_url: str = "https://api.binance.com"
    price_alert_check_enabled: bool = False
    price_alert_check_interval_seconds: int = 60

    # Paper trading
    paper_initial_balance: float = 1000.0
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )
    
    @property
    def cors_origins_list(self) -> List[str]:
        """Return CORS origins as a list"""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def telegram_webhook_url(self) -> str:
        """Public URL Telegram should deliver updates to"""
        return f"{self.public_base_url.rstrip('/')}/telegram/webhook"


# Global settings instance
settings = Settings()
