'''
Holds all the configurations
'''
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """
    Manages application configuration using environment variables.
    """
    # Application Metadata
    APP_NAME: str = "School Portal Core"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "Fee accounting and timetable view-state API for the school portal."
    TEST_MODE: bool = False

    # Upstream school backend
    API_HOST: str = "http://192.168.0.113:8080"
    STUDENT_API_PREFIX: str = "/api/student"
    HTTP_TIMEOUT_SECONDS: float = 10.0
    @property
    def student_api_url(self) -> str:
        """
        Base URL every collaborator call is made against.
        """
        return f"{self.API_HOST.rstrip('/')}{self.STUDENT_API_PREFIX}"

    # JWT Settings
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15

    # Other settings
    LOG_LEVEL: str = "INFO"
    BACKEND_CORS_ORIGINS: list[str] = []

    class Config:
        env_file = ".env" # automatically loads the .env

# Create a single, importable instance of the settings
settings = Settings()
