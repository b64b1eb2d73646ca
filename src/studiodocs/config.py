"""Engine configuration with environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields

_ENV_PREFIX = "STUDIODOCS_"


@dataclass(frozen=True)
class EngineConfig:
    """Studio branding and resource limits shared by every generator."""

    company_name: str = "ArqExpress"
    tagline: str = "Transformando espaços"
    schedule_tagline: str = "ARQUITETURA, SEM COMPLICAR."
    theme: str = "studio"

    # Image fetching
    image_timeout: float = 15.0
    image_workers: int = 8

    # Proposal defaults
    proposal_validity_days: int = 30

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "EngineConfig":
        """Build a config, reading ``STUDIODOCS_<FIELD>`` variables.

        ``STUDIODOCS_IMAGE_TIMEOUT=5`` sets ``image_timeout`` to ``5.0``.
        """
        env = os.environ if environ is None else environ
        values = {}
        for f in fields(cls):
            raw = env.get(_ENV_PREFIX + f.name.upper())
            if raw is None or raw == "":
                continue
            if f.type in ("int", int):
                values[f.name] = int(raw)
            elif f.type in ("float", float):
                values[f.name] = float(raw)
            else:
                values[f.name] = raw
        return cls(**values)
