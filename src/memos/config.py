import os
from dataclasses import dataclass

from dotenv import load_dotenv

LOG_FORMATS = ("console", "json")


def load_env_file() -> str:
    """Load the .env file for the current environment and return the environment name."""
    env = os.environ.get("MEMOS_ENV", "development").lower()
    env_file = f".env.{env}"
    if os.path.exists(env_file):
        load_dotenv(env_file)
    else:
        # Fall back to the default .env file
        load_dotenv()
    return env


@dataclass(frozen=True)
class Config:
    environment: str
    database_url: str
    host: str = "127.0.0.1"
    port: int = 3737
    log_level: str = "INFO"
    log_format: str = "console"
    max_request_size: int = 262_144

    @classmethod
    def from_env(cls) -> "Config":
        env = load_env_file()
        return cls(
            environment=env,
            database_url=os.environ["DATABASE_URL"],
            host=os.environ.get("SERVER_HOST", "127.0.0.1"),
            port=int(os.environ.get("SERVER_PORT", "3737")),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
            log_format=os.environ.get("LOG_FORMAT", "console").lower(),
            max_request_size=int(os.environ.get("MAX_REQUEST_SIZE", "262144")),
        )

    def validate(self) -> None:
        """Reject settings the application cannot start with."""
        if self.port <= 0:
            raise ValueError("Server port must be greater than 0")
        if self.max_request_size <= 0:
            raise ValueError("Max request size must be greater than 0")
        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"Unknown log format {self.log_format!r}, expected one of {LOG_FORMATS}")
