"""
Core settings and environment variables for the Saarthi triage engine.
Uses pydantic-settings for type-safe environment variable loading.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Create a .env file in the root directory to configure these.
    """

    # Application
    APP_NAME: str = "Saarthi Complaint Engine"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    # CORS - Frontend URLs allowed to access this API
    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:8080"

    # Firebase/Firestore (persistence collaborator)
    FIREBASE_PROJECT_ID: Optional[str] = None
    FIREBASE_CREDENTIALS_PATH: Optional[str] = None  # Path to service account JSON
    STATE_COLLECTION: str = "saarthi_state"

    # Mock DB mode for local development without Firebase credentials
    USE_MOCK_DB: bool = False
    MOCK_DB_PATH: str = "./mock_db.json"

    # Lifecycle
    MAX_DEADLINE_HOURS: int = 48  # dueBy is never further than this from assignedAt
    OVERDUE_PRIORITY_PENALTY: int = 5
    OVERDUE_SWEEP_INTERVAL_SECONDS: float = 60.0

    # Karma (external counter bumped on submission)
    SUBMISSION_KARMA_POINTS: int = 10
    DEFAULT_KARMA: int = 10

    # Classifier
    CLASSIFIER_ENABLED: bool = True  # if False, image path is skipped entirely
    IMAGE_LABELER_URL: Optional[str] = None  # external image-labeling endpoint
    IMAGE_LABELER_API_KEY: Optional[str] = None
    CLASSIFIER_TIMEOUT_SECONDS: float = 10.0
    LABEL_CONFIDENCE_THRESHOLD: float = 0.6
    CLASSIFIER_INIT_ATTEMPTS: int = 2
    CLASSIFIER_INIT_RETRY_DELAY_SECONDS: float = 0.5

    # Fallback location for submissions without coordinates (Knowledge Park)
    DEFAULT_LAT: float = 28.4744
    DEFAULT_LNG: float = 77.5040

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"


# Global settings instance
settings = Settings()
