import os
import log
from dotenv import load_dotenv

# Load .env file into environment
load_dotenv()


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Config:
    def __init__(self):
        self.database_url = os.getenv("DATABASE_URL", "sqlite:///./abtest.db")
        self.log_level = os.getenv("LOG_LEVEL", default="INFO")
        self.log_file = os.getenv("LOG_FILE", "abtest_service.log")

        # Overrides the request origin when building embed/analytics URLs (e.g. behind a proxy)
        self.public_base_url = os.getenv("PUBLIC_BASE_URL", "").rstrip("/")
        self.cors_allow_origins = _split_csv(os.getenv("CORS_ALLOW_ORIGINS", "*"))

        # Blob storage for uploaded images
        self.valkey_host = os.getenv("VALKEY_HOST", "localhost")
        self.valkey_port = int(os.getenv("VALKEY_PORT", 6379))
        self.image_ttl_seconds = int(os.getenv("IMAGE_TTL_SECONDS", 0))
        self.max_upload_bytes = int(os.getenv("MAX_UPLOAD_BYTES", 5 * 1024 * 1024))

        # Call setup_logging when the application starts
        log.setup_logging(self.log_level, self.log_file or None)

    def __repr__(self):
        return (
            f"<Config database_url={self.database_url} loglevel={self.log_level} "
            f"public_base_url={self.public_base_url!r} valkey={self.valkey_host}:{self.valkey_port}>"
        )

config = Config()
