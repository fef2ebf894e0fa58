"""
Extractor configuration.

Responsibilities:
- Load deployment-specific configuration
- Read environment variables
- Provide a typed, immutable config object

Non-responsibilities:
- No extraction logic
- No format constants (see spec.py)
- No runtime mutation
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Tuple


def parse_track_names(raw: str | None) -> Tuple[str, ...]:
    """
    Parse a comma-separated allow-list of track names.

    Whitespace around names is stripped and empty entries are ignored.
    Names are case-sensitive. An absent or blank value yields an empty
    tuple, which means "all audio tracks".
    """
    if not raw:
        return ()
    return tuple(name.strip() for name in raw.split(",") if name.strip())


@dataclass(frozen=True)
class ExtractorConfig:
    """
    Immutable extractor configuration.

    Constructed once by the caller and passed down to the pipeline.
    """

    # ------------------------------------------------------------------
    # Environment
    # ------------------------------------------------------------------

    env: str = "dev"

    # ------------------------------------------------------------------
    # Track selection
    # ------------------------------------------------------------------

    # Empty = keep every audio track
    target_track_names: Tuple[str, ...] = ()

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------

    enable_json_logs: bool = True

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @staticmethod
    def load_from_env(environ: Mapping[str, str] | None = None) -> ExtractorConfig:
        """
        Load configuration from environment variables.

        Args:
            environ: Optional mapping used instead of os.environ (tests).
        """
        env = os.environ if environ is None else environ
        return ExtractorConfig(
            env=env.get("ENV", "dev"),
            target_track_names=parse_track_names(env.get("TARGET_TRACK_NAMES")),
            enable_json_logs=env.get("ENABLE_JSON_LOGS", "1") == "1",
        )
