# src/pierce_seci/errors.py
"""
Error kinds raised by the simulation pipeline.

Sampling and parameter-assembly errors are fatal to a run. Integration
failures are raised per draw and caught by the batch integrator, which
records them and carries on. R0 domain errors are raised per evaluation.
"""


class InsufficientSamples(ValueError):
    """Fewer than ``nmin`` values survived truncation and trimming."""

    def __init__(self, name, n_available, nmin):
        self.name = name
        self.n_available = n_available
        self.nmin = nmin
        super().__init__(
            f"{name}: only {n_available} feasible draws left after truncation, "
            f"need {nmin} (increase nsim)"
        )


class DimensionMismatch(ValueError):
    """Marginal sample vectors of unequal length."""


class IntegrationFailure(RuntimeError):
    """A single parameter draw could not be integrated."""


class InvalidParameterDomain(ValueError):
    """R0 radicand is negative or undefined for the given parameters."""
