"""
Model family and link function specifications.

Each Family defines:
- A default link function g(μ) mapping the mean to the linear predictor
- A variance function V(μ) relating variance to the mean
- A unit deviance d(y, μ) used for deviance residuals
- Whether the response must be counts

Each Link defines the inverse link g⁻¹(η) → μ, which prediction applies
to the complete linear predictor.

Only the pairings the workbench supports are exposed: gaussian with the
identity link, poisson and negative binomial with the log link.

References:
    McCullagh, P., & Nelder, J. A. (1989). Generalized Linear Models (2nd ed.)
    Hilbe, J. M. (2011). Negative Binomial Regression (2nd ed.)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import numpy as np
from numpy.typing import NDArray

from regworkbench.core.exceptions import ValidationError


# =====================================================================
# Link functions
# =====================================================================

class Link(ABC):
    """Abstract link function g(μ) mapping mean to linear predictor."""

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    def linkinv(self, eta: NDArray) -> NDArray:
        """g⁻¹(η) → μ."""
        ...

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Link) and other.name == self.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class IdentityLink(Link):
    """Identity link: g(μ) = μ. Default for Gaussian family."""

    @property
    def name(self) -> str:
        return 'identity'

    def linkinv(self, eta: NDArray) -> NDArray:
        return np.array(eta, dtype=np.float64, copy=True)


class LogLink(Link):
    """Log link: g(μ) = log(μ). Default for the count families."""

    @property
    def name(self) -> str:
        return 'log'

    def linkinv(self, eta: NDArray) -> NDArray:
        # exp of the full linear predictor; overflow gives inf
        with np.errstate(over='ignore'):
            return np.exp(np.asarray(eta, dtype=np.float64))


# =====================================================================
# Family base class
# =====================================================================

class Family(ABC):
    """
    Model family specification.

    A family fixes its link: the workbench supports exactly one link per
    family, so there is no link argument.
    """

    def __init__(self):
        self._link = self._default_link()

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    def _default_link(self) -> Link:
        ...

    @property
    def link(self) -> Link:
        return self._link

    @property
    def is_count(self) -> bool:
        """Whether the response must be non-negative integer counts."""
        return False

    @abstractmethod
    def variance(self, mu: NDArray) -> NDArray:
        """Variance function V(μ)."""
        ...

    @abstractmethod
    def unit_deviance(self, y: NDArray, mu: NDArray) -> NDArray:
        """Per-observation deviance contributions d(y_i, μ_i)."""
        ...

    def deviance(self, y: NDArray, mu: NDArray) -> float:
        """Total deviance Σ d(y_i, μ_i)."""
        return float(np.sum(self.unit_deviance(y, mu)))

    def deviance_residuals(self, y: NDArray, mu: NDArray) -> NDArray:
        """Signed deviance residuals sign(y - μ) * sqrt(d(y, μ))."""
        d = self.unit_deviance(y, mu)
        return np.sign(y - mu) * np.sqrt(np.maximum(d, 0.0))

    def pearson_residuals(self, y: NDArray, mu: NDArray) -> NDArray:
        """Pearson residuals (y - μ) / sqrt(V(μ))."""
        return (y - mu) / np.sqrt(self.variance(mu))

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Family) and other.name == self.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(link={self._link.name!r})"


# =====================================================================
# Concrete families
# =====================================================================

class Gaussian(Family):
    """Gaussian (Normal) family. Link: identity.

    V(μ) = 1
    Deviance = Σ (y_i - μ_i)²  (= RSS)
    """

    @property
    def name(self) -> str:
        return 'gaussian'

    def _default_link(self) -> Link:
        return IdentityLink()

    def variance(self, mu: NDArray) -> NDArray:
        return np.ones_like(mu, dtype=np.float64)

    def unit_deviance(self, y: NDArray, mu: NDArray) -> NDArray:
        return (y - mu) ** 2


class Poisson(Family):
    """Poisson family. Link: log.

    V(μ) = μ
    d(y, μ) = 2 * [y log(y/μ) - (y - μ)], with 0 log 0 = 0
    """

    @property
    def name(self) -> str:
        return 'poisson'

    def _default_link(self) -> Link:
        return LogLink()

    @property
    def is_count(self) -> bool:
        return True

    def variance(self, mu: NDArray) -> NDArray:
        return np.maximum(mu, 1e-10)

    def unit_deviance(self, y: NDArray, mu: NDArray) -> NDArray:
        mu = np.maximum(mu, 1e-10)
        # np.where evaluates both branches; the y == 0 branch is discarded
        with np.errstate(divide='ignore', invalid='ignore'):
            term = np.where(y > 0, y * np.log(y / mu), 0.0)
        return 2.0 * (term - (y - mu))


class NegativeBinomial(Family):
    """Negative binomial (NB2) family. Link: log.

    V(μ) = μ + α μ²,  θ = 1/α (R's glm.nb reports θ)
    d(y, μ) = 2 * [y log(y/μ) - (y + θ) log((y + θ)/(μ + θ))]

    α is estimated by the external fit. Before fitting, the family only
    names the model; the α held here is used for residuals afterwards.
    """

    def __init__(self, alpha: float = 1.0):
        if not alpha > 0:
            raise ValidationError(
                f"NegativeBinomial alpha must be positive, got {alpha!r}"
            )
        self.alpha = float(alpha)
        super().__init__()

    @property
    def name(self) -> str:
        return 'negative_binomial'

    def _default_link(self) -> Link:
        return LogLink()

    @property
    def is_count(self) -> bool:
        return True

    @property
    def theta(self) -> float:
        return 1.0 / self.alpha

    def variance(self, mu: NDArray) -> NDArray:
        mu = np.maximum(mu, 1e-10)
        return mu + self.alpha * mu ** 2

    def unit_deviance(self, y: NDArray, mu: NDArray) -> NDArray:
        mu = np.maximum(mu, 1e-10)
        theta = self.theta
        with np.errstate(divide='ignore', invalid='ignore'):
            term = np.where(y > 0, y * np.log(y / mu), 0.0)
        return 2.0 * (term - (y + theta) * np.log((y + theta) / (mu + theta)))

    def __repr__(self) -> str:
        return f"NegativeBinomial(link='log', alpha={self.alpha:.6g})"


# =====================================================================
# Family name → class mapping + resolver
# =====================================================================

_FAMILY_CLASSES: dict[str, type[Family]] = {
    'gaussian': Gaussian,
    'normal': Gaussian,
    'gaussian-identity': Gaussian,
    'poisson': Poisson,
    'poisson-log': Poisson,
    'negative_binomial': NegativeBinomial,
    'negative-binomial': NegativeBinomial,
    'negative-binomial-log': NegativeBinomial,
    'negbin': NegativeBinomial,
    'nb': NegativeBinomial,
}


def resolve_family(family: str | Family) -> Family:
    """Resolve a family argument to a Family instance.

    Args:
        family: A name such as 'gaussian', 'poisson', 'negative_binomial'
                (or 'poisson-log' etc.), or a Family instance (passed
                through).

    Raises:
        ValidationError: If the string name is not recognized.
        TypeError: If argument is neither string nor Family.
    """
    if isinstance(family, Family):
        return family
    if isinstance(family, str):
        cls = _FAMILY_CLASSES.get(family.strip().lower())
        if cls is None:
            raise ValidationError(
                f"Unknown family: {family!r}. Valid families: "
                f"gaussian, poisson, negative_binomial"
            )
        return cls()
    raise TypeError(f"family must be str or Family, got {type(family).__name__}")
