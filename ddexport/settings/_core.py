from collections import ChainMap
from enum import Enum
import os
from typing import Dict  # noqa:F401
from typing import Optional  # noqa:F401

from envier import Env


class ValueSource(str, Enum):
    ENV_VAR = "env_var"
    CODE = "code"
    DEFAULT = "default"


class DDConfig(Env):
    """Provides support for loading configurations from multiple sources."""

    def __init__(
        self,
        source: Optional[Dict[str, str]] = None,
        parent: Optional["Env"] = None,
    ) -> None:
        self.env_source = os.environ
        self.code_source = source or {}

        # Order of precedence: provided source < environment variables
        full_source = ChainMap(self.env_source, self.code_source)

        super().__init__(source=full_source, parent=parent)

        self._value_source = {}
        for _, e in type(self).items(recursive=True):
            env_name = e.full_name
            if env_name in self.env_source:
                self._value_source[env_name] = ValueSource.ENV_VAR
            elif env_name in self.code_source:
                self._value_source[env_name] = ValueSource.CODE
            else:
                self._value_source[env_name] = ValueSource.DEFAULT

    def value_source(self, env_name: str) -> ValueSource:
        return self._value_source.get(env_name, ValueSource.DEFAULT)
