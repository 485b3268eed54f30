"""Random samplers for inter-arrival and service times."""

from typing import Callable, Dict

import numpy as np

Sampler = Callable[[np.random.Generator], float]


def exponential(mean: float) -> Sampler:
    """Exponential samples with the given mean (Poisson arrivals)."""
    if mean <= 0:
        raise ValueError(f"Exponential mean must be positive, got {mean}")
    return lambda rng: float(rng.exponential(mean))


def constant(value: float) -> Sampler:
    """Always returns ``value``."""
    if value < 0:
        raise ValueError(f"Constant value cannot be negative, got {value}")
    return lambda rng: float(value)


def uniform(low: float, high: float) -> Sampler:
    """Uniform samples on ``[low, high)``."""
    if low < 0 or high < low:
        raise ValueError(f"Invalid uniform bounds [{low}, {high})")
    return lambda rng: float(rng.uniform(low, high))


def gamma(mean: float, std: float) -> Sampler:
    """Gamma samples parameterised by mean and standard deviation.

    A small std relative to the mean gives regular arrivals; a large one
    gives bursty arrivals.
    """
    if mean <= 0 or std <= 0:
        raise ValueError(f"Gamma mean and std must be positive, got mean={mean}, std={std}")
    shape = (mean / std) ** 2
    scale = std ** 2 / mean
    return lambda rng: float(rng.gamma(shape, scale))


def normal(mean: float, std: float) -> Sampler:
    """Normal samples truncated at zero."""
    if std < 0:
        raise ValueError(f"Normal std cannot be negative, got {std}")
    return lambda rng: float(max(0.0, rng.normal(mean, std)))


def build_sampler(config: Dict) -> Sampler:
    """Create a sampler from a distribution config.

    Args:
        config: Dict with a ``distribution`` key and its parameters, e.g.
            ``{'distribution': 'exponential', 'mean': 2.0}``

    Returns:
        Function drawing one value from a numpy random generator

    Raises:
        ValueError: If the distribution is unknown
    """
    distribution = config.get('distribution', 'exponential')
    mean = config.get('mean', 1.0)

    if distribution == 'exponential':
        return exponential(mean)
    elif distribution == 'constant':
        return constant(config.get('value', mean))
    elif distribution == 'uniform':
        return uniform(config.get('low', 0.0), config.get('high', 2 * mean))
    elif distribution == 'gamma':
        return gamma(mean, config.get('std', mean))
    elif distribution == 'normal':
        return normal(mean, config.get('std', 0.0))
    else:
        raise ValueError(f"Unknown distribution: {distribution}")
