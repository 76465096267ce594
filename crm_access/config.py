from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Engine settings loaded from environment variables.

    All settings can be configured via .env file or environment variables.
    """

    # Application
    APP_NAME: str = "CRM Access Engine"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Access decisions
    LOG_ACCESS_DECISIONS: bool = False
    UNIFORM_NOT_FOUND: bool = True  # Report denied reads as "not found"

    # Provisioning
    DEFAULT_EMPLOYEE_SERVICE_TYPES: str = "training"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    @property
    def default_employee_service_types(self) -> list[str]:
        """Parse DEFAULT_EMPLOYEE_SERVICE_TYPES from comma-separated string"""
        if not self.DEFAULT_EMPLOYEE_SERVICE_TYPES:
            return []
        return [
            service_type.strip()
            for service_type in self.DEFAULT_EMPLOYEE_SERVICE_TYPES.split(",")
            if service_type.strip()
        ]


# Global settings instance
settings = Settings()
