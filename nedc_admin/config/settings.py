"""
Application settings from environment variables
"""
import os


class Settings:
    """Main application settings"""

    def __init__(self):
        # Core
        self.environment: str = os.getenv("ENVIRONMENT", "production")
        self.debug: bool = os.getenv("DEBUG", "false").lower() == "true"
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO")

        # Backend REST API
        self.api_base_url: str = os.getenv(
            "API_BASE_URL", "https://artinsgruppen2-a22da2d8d991.herokuapp.com/api"
        ).rstrip("/")
        self.api_timeout: float = float(os.getenv("API_TIMEOUT", "30"))

        # Session cookie
        self.secret_key: str = os.getenv("SECRET_KEY", "change-me-in-production-very-secret-key")
        self.session_cookie: str = os.getenv("SESSION_COOKIE", "nedcsession")
        self.session_max_age: int = int(os.getenv("SESSION_MAX_AGE", str(60 * 60 * 24 * 7)))

        # Web server
        self.host: str = os.getenv("HOST", "0.0.0.0")
        self.port: int = int(os.getenv("PORT", "8067"))

        # Process manager log files
        self.log_dir: str = os.getenv("LOG_DIR", "./logs")

        # Page sizes
        self.companies_per_page: int = 10
        self.payments_per_page: int = 10
        self.success_invoices_per_page: int = 10
        self.failed_invoices_per_page: int = 5
        self.orders_per_page: int = 10

        # Business rules
        self.payment_commission_rate: float = float(os.getenv("PAYMENT_COMMISSION_RATE", "0.09"))
        self.low_stock_threshold: int = int(os.getenv("LOW_STOCK_THRESHOLD", "50"))

    @property
    def is_production(self) -> bool:
        """Production mode flag"""
        return self.environment.lower() == "production"

    @property
    def session_https_only(self) -> bool:
        """Secure cookie flag, only over HTTPS in production"""
        return self.is_production


# Global settings instance (lazy initialization)
_settings_instance = None

def get_settings() -> Settings:
    """Get the settings instance (created on first access)"""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance

settings = get_settings()
