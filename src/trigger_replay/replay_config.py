# Configuration of a replay session.
# Values are read from TRIGGER_REPLAY_* environment variables (or a .env file),
# and can be overridden from the command line.
import os

import dotenv
import pydantic

# Default half-width of the query window, in the time unit of the intervals.
DEFAULT_TOLERANCE = 100

DEFAULT_HISTOGRAM_PREFIX = ""

_ENV_PREFIX = "TRIGGER_REPLAY_"


class ReplayConfig(pydantic.BaseModel):
    reference_dir: str | None = None
    run_id: int | None = None
    # Point in time for the reference lookup.
    timestamp: int = 0
    # Comma separated condition names.
    conditions: str = ""
    tolerance: int = pydantic.Field(default=DEFAULT_TOLERANCE, ge=0)
    histogram_prefix: str = DEFAULT_HISTOGRAM_PREFIX

    @classmethod
    def from_env(cls, **overrides) -> "ReplayConfig":
        """Reads the config from the environment, then applies non-None overrides."""
        dotenv.load_dotenv()
        values = {}
        for field in cls.model_fields:
            env_value = os.environ.get(_ENV_PREFIX + field.upper())
            if env_value is not None:
                values[field] = env_value
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(values)
