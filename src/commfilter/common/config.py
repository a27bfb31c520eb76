"""
Pipeline configuration.

Values resolve in the same order as the logging configuration: explicit
parameters, then ``COMMFILTER_*`` environment variables, then defaults.
"""

import numbers
import os
from dataclasses import dataclass
from typing import Optional

from .exceptions import ConfigurationError, InvalidThresholdError, validate_parameter

DEFAULT_THRESHOLD = 5
DEFAULT_ALPHA = 0.7
DEFAULT_ALGORITHM = "edge_betweenness"

ENV_THRESHOLD = "COMMFILTER_THRESHOLD"
ENV_ALPHA = "COMMFILTER_ALPHA"
ENV_ALGORITHM = "COMMFILTER_ALGORITHM"
ENV_SEED = "COMMFILTER_SEED"

AVAILABLE_ALGORITHMS = ["edge_betweenness", "louvain", "label_propagation"]


@dataclass(frozen=True)
class PipelineConfig:
    """
    Settings for a community filtering run.

    Attributes
    ----------
    threshold : int
        Minimum community size (inclusive) for a community to be kept
    alpha : float
        Transparency applied to every community colour, in [0, 1]
    algorithm : str
        Community detection algorithm used when no detector is supplied
    random_seed : int, optional
        Seed for randomised detectors (louvain, label_propagation)
    """

    threshold: int = DEFAULT_THRESHOLD
    alpha: float = DEFAULT_ALPHA
    algorithm: str = DEFAULT_ALGORITHM
    random_seed: Optional[int] = None

    def validate(self) -> 'PipelineConfig':
        """
        Check every field, returning self.

        Raises
        ------
        InvalidThresholdError
            If threshold is not a positive integer
        ConfigurationError
            If alpha is outside [0, 1] or the algorithm is unknown
        """
        check_threshold(self.threshold)
        if not 0.0 <= self.alpha <= 1.0:
            raise ConfigurationError(
                f"alpha must be between 0.0 and 1.0, got {self.alpha}",
                parameter="alpha",
                value=self.alpha
            )
        validate_parameter(self.algorithm, AVAILABLE_ALGORITHMS, "algorithm", "PipelineConfig")
        return self

    @classmethod
    def from_env(
        cls,
        threshold: Optional[int] = None,
        alpha: Optional[float] = None,
        algorithm: Optional[str] = None,
        random_seed: Optional[int] = None
    ) -> 'PipelineConfig':
        """
        Build a validated config from parameters, environment and defaults.

        Raises
        ------
        ConfigurationError
            If an environment variable cannot be parsed
        """
        if threshold is None:
            threshold = _env_number(ENV_THRESHOLD, int, DEFAULT_THRESHOLD)
        if alpha is None:
            alpha = _env_number(ENV_ALPHA, float, DEFAULT_ALPHA)
        if algorithm is None:
            algorithm = os.getenv(ENV_ALGORITHM) or DEFAULT_ALGORITHM
        if random_seed is None:
            random_seed = _env_number(ENV_SEED, int, None)

        return cls(
            threshold=threshold,
            alpha=alpha,
            algorithm=algorithm,
            random_seed=random_seed
        ).validate()


def check_threshold(threshold) -> None:
    """Raise ``InvalidThresholdError`` unless threshold is an int >= 1."""
    if isinstance(threshold, bool) or not isinstance(threshold, numbers.Integral) or threshold <= 0:
        raise InvalidThresholdError(threshold)


def _env_number(env_var: str, kind, default):
    raw = os.getenv(env_var)
    if raw is None or raw.strip() == "":
        return default
    try:
        return kind(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"Environment variable {env_var} is not a valid {kind.__name__}: {raw!r}",
            parameter=env_var,
            value=raw,
            cause=e
        ) from e
