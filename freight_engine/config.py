import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from freight_engine.errors import ConfigurationError

# Project root .env, same place the deployment scripts write it
ENV_PATH = Path(__file__).resolve().parent.parent / '.env'

REQUIRED_FEDEX_VARS = ("FEDEX_KEY", "FEDEX_PASSWORD", "FEDEX_ACCOUNT")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


class FedExSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    account: str = Field(..., min_length=1)
    meter: Optional[str] = None
    test_mode: bool = False
    timeout: float = Field(30.0, gt=0)


def _env_flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


def load_fedex_settings(env_path: Optional[Path] = None) -> FedExSettings:
    """
    Reads FedEx credentials from the environment, after loading the project .env.

    Variables already present in the environment win over the .env file.
    """
    load_dotenv(dotenv_path=env_path or ENV_PATH)

    missing = [name for name in REQUIRED_FEDEX_VARS if not (os.getenv(name) or "").strip()]
    if missing:
        raise ConfigurationError(f"FedEx credentials missing from environment: {', '.join(missing)}")

    raw_timeout = os.getenv("FEDEX_TIMEOUT", "30")
    try:
        return FedExSettings(
            key=os.environ["FEDEX_KEY"],
            password=os.environ["FEDEX_PASSWORD"],
            account=os.environ["FEDEX_ACCOUNT"],
            meter=os.getenv("FEDEX_METER") or None,
            test_mode=_env_flag(os.getenv("FEDEX_TEST_MODE")),
            timeout=float(raw_timeout),
        )
    except (ValueError, ValidationError) as e:
        raise ConfigurationError(f"Invalid FedEx settings (FEDEX_TIMEOUT={raw_timeout!r}): {e}") from e


def configure_logging(level: Optional[str] = None) -> None:
    """Basic root handler; level comes from LOG_LEVEL unless given."""
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)
