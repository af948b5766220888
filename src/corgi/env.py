from __future__ import annotations

import os
import shutil
import sys
from dataclasses import dataclass, field, replace
from typing import Mapping, Optional


@dataclass(frozen=True)
class Environment:
    """Snapshot of the OS identity and environment variables the probes read."""

    platform: str
    variables: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_process(cls) -> "Environment":
        return cls(platform=sys.platform, variables=dict(os.environ))

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        value = self.variables.get(name)
        if value is None:
            return default
        return value

    def has(self, name: str) -> bool:
        return name in self.variables

    def which(self, name: str) -> Optional[str]:
        """Resolve ``name`` against this environment's PATH, not the process one."""
        return shutil.which(name, path=self.variables.get("PATH", os.defpath))

    def with_variables(self, **overrides: str) -> "Environment":
        return replace(self, variables={**self.variables, **overrides})
