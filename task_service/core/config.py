"""
Configuration settings for Task Service.
"""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Settings:
    """Application settings"""

    # Service information
    service_name: str = os.getenv("SERVICE_NAME", "task_service")
    service_version: str = os.getenv("SERVICE_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "False").lower() == "true"
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Database configuration
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./tasks.db")

    # API configuration
    api_prefix: str = os.getenv("API_PREFIX", "/api")
    max_page_size: int = int(os.getenv("MAX_PAGE_SIZE", "100"))
    default_page_size: int = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))

    # Overdue sweep
    sweep_enabled: bool = os.getenv("SWEEP_ENABLED", "True").lower() == "true"
    sweep_interval_seconds: float = float(os.getenv("SWEEP_INTERVAL_SECONDS", "60"))

    # RabbitMQ configuration
    rabbitmq_enabled: bool = os.getenv("RABBITMQ_ENABLED", "False").lower() == "true"
    rabbitmq_host: str = os.getenv("RABBITMQ_HOST", "rabbitmq")
    rabbitmq_port: int = int(os.getenv("RABBITMQ_PORT", "5672"))
    rabbitmq_user: str = os.getenv("RABBITMQ_USER", "admin")
    rabbitmq_password: str = os.getenv("RABBITMQ_PASSWORD", "admin123")


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get settings instance."""
    return settings
