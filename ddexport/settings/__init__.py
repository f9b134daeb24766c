from ._agent import AgentConfig
from ._agent import config


__all__ = ["AgentConfig", "config"]
