import os


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    def __init__(self):
        self.app_name = "InvoiceDesk"
        self.api_version = "1.0.0"
        self.environment = os.getenv("INVOICEDESK_ENVIRONMENT", "development")
        self.secret_key = os.getenv("INVOICEDESK_SECRET_KEY", "CHANGE_ME")
        self.access_token_expire_minutes = int(os.getenv("INVOICEDESK_ACCESS_TOKEN_EXPIRE_MINUTES", "30"))
        self.database_url = os.getenv("INVOICEDESK_DATABASE_URL", "sqlite:///./invoicedesk.db")
        self.log_level = os.getenv("INVOICEDESK_LOG_LEVEL", "INFO")
        self.process_recurring_on_startup = _env_flag("INVOICEDESK_PROCESS_RECURRING_ON_STARTUP")
        self.cors_origins = [
            origin.strip()
            for origin in os.getenv("INVOICEDESK_CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
            if origin.strip()
        ]


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
