"""Configuration settings for the session purge backend.

Values are read from the environment (and an optional ``.env`` file).
"""

from typing import Literal, Optional

from pydantic import PostgresDsn, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for the session purge pipeline.

    Attributes:
    ----------
        ENVIRONMENT (str): Deployment environment (local, test, dev, prd).
        LOG_LEVEL (str): Root log level.
        POSTGRES_HOST (str): Postgres host holding sessions and batch manifests.
        POSTGRES_PORT (int): Postgres port.
        POSTGRES_USER (str): Postgres user.
        POSTGRES_PASSWORD (str): Postgres password.
        POSTGRES_DB (str): Postgres database name.
        VESPA_URL (str): Base URL of the Vespa container holding the session index.
        VESPA_PORT (int): Vespa query/document port.
        VESPA_SESSION_SCHEMA (str): Vespa document type of session documents.
        VESPA_NAMESPACE (str): Vespa namespace of session documents.
        SEARCH_PAGE_SIZE (int): Maximum hits per search page (one page = one batch).
        AWS_REGION (str): Region of the session payload bucket.
        S3_ENDPOINT_URL (Optional[str]): Custom S3 endpoint (MinIO, LocalStack).
        S3_SESSIONS_PAYLOAD_BUCKET_NAME (str): Bucket holding recorded session payloads.
        STORAGE_PATH (str): Root directory of the filesystem object store (local/test).
        RESEND_API_KEY (Optional[str]): API key of the transactional email provider.
        RESEND_API_URL (str): Email send endpoint.
        EMAIL_FROM_NAME (str): Display name of the sender.
        EMAIL_FROM_ADDRESS (str): Outbound sender address.
        TEMPORAL_HOST (str): Temporal frontend host.
        TEMPORAL_PORT (int): Temporal frontend port.
        TEMPORAL_NAMESPACE (str): Temporal namespace.
        TEMPORAL_TASK_QUEUE (str): Task queue the deletion activities are served on.
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    ENVIRONMENT: Literal["local", "test", "dev", "prd"] = "local"
    LOG_LEVEL: str = "INFO"

    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DB: str = "postgres"

    VESPA_URL: str = "http://localhost"
    VESPA_PORT: int = 8081
    VESPA_SESSION_SCHEMA: str = "session"
    VESPA_NAMESPACE: str = "sessions"
    SEARCH_PAGE_SIZE: int = 10000

    AWS_REGION: str = "us-west-2"
    S3_ENDPOINT_URL: Optional[str] = None
    S3_SESSIONS_PAYLOAD_BUCKET_NAME: str = "highlight-session-s3"
    STORAGE_PATH: str = "./local_storage"

    RESEND_API_KEY: Optional[str] = None
    RESEND_API_URL: str = "https://api.resend.com/emails"
    EMAIL_FROM_NAME: str = "Highlight"
    EMAIL_FROM_ADDRESS: str = "notifications@highlight.io"

    TEMPORAL_HOST: str = "localhost"
    TEMPORAL_PORT: int = 7233
    TEMPORAL_NAMESPACE: str = "default"
    TEMPORAL_TASK_QUEUE: str = "session-purge"

    @computed_field  # type: ignore[misc]
    @property
    def SQLALCHEMY_ASYNC_DATABASE_URI(self) -> str:
        """Async SQLAlchemy URI built from the Postgres settings."""
        return str(
            PostgresDsn.build(
                scheme="postgresql+asyncpg",
                username=self.POSTGRES_USER,
                password=self.POSTGRES_PASSWORD or None,
                host=self.POSTGRES_HOST,
                port=self.POSTGRES_PORT,
                path=self.POSTGRES_DB,
            )
        )

    @property
    def is_dev_or_test_env(self) -> bool:
        """Whether storage keys live under the ``dev/`` prefix."""
        return self.ENVIRONMENT in ("local", "test", "dev")

    @property
    def temporal_address(self) -> str:
        """Temporal frontend address in ``host:port`` form."""
        return f"{self.TEMPORAL_HOST}:{self.TEMPORAL_PORT}"


settings = Settings()
