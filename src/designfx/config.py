"""Engine configuration.

Settings can be given to the constructor or read from environment variables
through EngineConfig.default(). Constructor parameters take precedence.
"""

import logging
import math
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
FALSE_VALUES = frozenset({"0", "false", "no", "off"})


@dataclass
class EngineConfig:
    """Configuration of the compositing engine and the reference renderers.

    Environment variables:
        DESIGNFX_DEFER_INITIAL: Defer the initial recompute on mount to the
            next tick (default: true).
        DESIGNFX_REPAINT: Request a repaint after each compositing pass
            (default: true).
        DESIGNFX_BLUR_SCALE: Blur radius as a fraction of the larger image side
            at full blur (default: 0.05).
        DESIGNFX_NOISE_SEED: Seed of the pixel renderer's noise (default: 0).

    Example:
        >>> config = EngineConfig.default()
        >>> config = EngineConfig(defer_initial_recompute=False)
    """

    defer_initial_recompute: bool = True
    repaint: bool = True
    blur_scale: float = 0.05
    noise_seed: int = 0

    @classmethod
    def default(cls) -> "EngineConfig":
        """Create EngineConfig with values from environment variables.

        Raises:
            ValueError: If an environment variable holds an invalid value.
        """

        def parse_env_bool(key: str, default: bool) -> bool:
            value_str = os.environ.get(key)
            if value_str is None:
                return default
            value = value_str.strip().lower()
            if value in TRUE_VALUES:
                return True
            if value in FALSE_VALUES:
                return False
            raise ValueError(
                f"Environment variable {key}={value_str!r} is not a valid boolean"
            )

        def parse_env_float(key: str, default: float) -> float:
            value_str = os.environ.get(key)
            if value_str is None:
                return default
            try:
                value = float(value_str)
            except ValueError as e:
                raise ValueError(
                    f"Environment variable {key}={value_str!r} is not a valid number"
                ) from e
            if not math.isfinite(value):
                raise ValueError(
                    f"Environment variable {key}={value_str!r} is not a finite number"
                )
            if value < 0:
                logger.warning(
                    f"Environment variable {key}={value} is negative, treating as 0"
                )
                return 0.0
            return value

        def parse_env_int(key: str, default: int) -> int:
            value_str = os.environ.get(key)
            if value_str is None:
                return default
            try:
                return int(value_str)
            except ValueError as e:
                raise ValueError(
                    f"Environment variable {key}={value_str!r} is not a valid integer"
                ) from e

        return cls(
            defer_initial_recompute=parse_env_bool("DESIGNFX_DEFER_INITIAL", True),
            repaint=parse_env_bool("DESIGNFX_REPAINT", True),
            blur_scale=parse_env_float("DESIGNFX_BLUR_SCALE", 0.05),
            noise_seed=parse_env_int("DESIGNFX_NOISE_SEED", 0),
        )
