import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class Settings:
    # Application
    app_name: str = os.getenv("APP_NAME", "Library Circulation")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Repository insertion ceilings
    item_capacity: int = int(os.getenv("ITEM_CAPACITY", "100"))
    patron_capacity: int = int(os.getenv("PATRON_CAPACITY", "50"))

    # Load the sample catalogue and patrons when the CLI starts
    seed_demo_data: bool = _env_flag("SEED_DEMO_DATA", "True")

    # CLI output: plain | json | rich
    output_mode: str = os.getenv("LIB_CLI_OUTPUT", "plain").lower()


settings = Settings()
