from pydantic import BaseModel, Field
import os
import yaml

from .cache import DEFAULT_DISPOSE_TIME, DEFAULT_LENGTH_MAXIMUM
from .rpc import DEFAULT_PATH

DEFAULT_USER_AGENT = "Python Untis API"


class SessionConfig(BaseModel):
    server: str
    school: str
    username: str
    password: str
    user_agent: str = DEFAULT_USER_AGENT
    path: str = DEFAULT_PATH
    cache_length_maximum: int = Field(default=DEFAULT_LENGTH_MAXIMUM, gt=0)
    cache_dispose_time: float = Field(default=DEFAULT_DISPOSE_TIME, ge=0)


def load_config(path: str | os.PathLike) -> SessionConfig:
    with open(path) as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain a mapping")

    return SessionConfig.model_validate(data)
