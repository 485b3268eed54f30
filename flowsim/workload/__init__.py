"""Sampling helpers for workloads."""

from .distributions import build_sampler, constant, exponential, gamma, normal, uniform

__all__ = ["build_sampler", "constant", "exponential", "gamma", "normal", "uniform"]
