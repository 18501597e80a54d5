"""
Surface Chemistry Module
========================

Heterogeneous reactions on reactor walls.

A ReactingSurface carries the fractional coverages θₖ of its adsorbed
species and evaluates mass-action rates per unit wall area:

   q_j = k_j(T) Π C_gas^{ν'} Π (θₖ Γ / σₖ)^{ν'}        [kmol/(m²·s)]

where Γ is the site density [kmol/m²] and σₖ the number of sites an
adsorbate occupies. The coverage equations are

   dθₖ/dt = ṡₖ σₖ / Γ

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

import numpy as np
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from .errors import ConfigurationError
from .kinetics import ArrheniusRate
from .thermodynamics import IdealGasPhase


@dataclass
class SurfaceSpecies:
    """Adsorbed species occupying `size` surface sites."""

    name: str
    size: float = 1.0


@dataclass
class SurfaceReaction:
    """
    Irreversible surface reaction.

    Reactants and products may name gas-phase or surface species.
    """

    reactants: Dict[str, float]
    products: Dict[str, float]
    rate: ArrheniusRate


class ReactingSurface:
    """
    Reacting surface attached to the gas phase of one reactor.

    Coverages are stored without normalization; the owning reactor's
    integrator keeps their sum close to one.
    """

    def __init__(
        self,
        gas: IdealGasPhase,
        species: Sequence[SurfaceSpecies],
        reactions: Sequence[SurfaceReaction] = (),
        site_density: float = 2.7e-8,
        coverages=None,
        name: str = "surface",
    ):
        """
        Initialize reacting surface.

        Args:
            gas: Gas phase the surface exchanges species with
            species: Adsorbed species; the first one is usually the empty site
            reactions: Surface reactions
            site_density: Γ [kmol/m²]
            coverages: Initial coverages (defaults to all sites on species 0)
            name: Surface identifier
        """
        if len(species) == 0:
            raise ConfigurationError("A reacting surface needs at least one species")
        if site_density <= 0:
            raise ConfigurationError(f"Site density must be positive: {site_density}")

        self.gas = gas
        self.name = name
        self.species: List[SurfaceSpecies] = list(species)
        self.site_density = site_density
        self._index = {sp.name: k for k, sp in enumerate(self.species)}
        self._sizes = np.array([sp.size for sp in self.species])

        n_gas, n_surf = gas.n_species, self.n_species
        self.reactions = list(reactions)
        self._nu_f = np.zeros((len(self.reactions), n_gas + n_surf))
        self._nu_r = np.zeros((len(self.reactions), n_gas + n_surf))
        for j, rxn in enumerate(self.reactions):
            rxn.rate.validate()
            for terms, nu in ((rxn.reactants, self._nu_f), (rxn.products, self._nu_r)):
                for sp, coeff in terms.items():
                    nu[j, self._kinetics_index(sp)] = coeff

        self._theta = np.zeros(n_surf)
        self._theta[0] = 1.0
        if coverages is not None:
            self.set_coverages(coverages)

    def _kinetics_index(self, name: str) -> int:
        k = self.gas.species_index(name)
        if k is not None:
            return k
        if name in self._index:
            return self.gas.n_species + self._index[name]
        raise ConfigurationError(f"Unknown species '{name}' on surface '{self.name}'")

    @property
    def n_species(self) -> int:
        return len(self.species)

    @property
    def species_names(self) -> List[str]:
        return [sp.name for sp in self.species]

    @property
    def sizes(self) -> np.ndarray:
        return self._sizes

    @property
    def coverages(self) -> np.ndarray:
        return self._theta.copy()

    def set_coverages(self, theta) -> None:
        """Set coverages, normalizing to one (initial conditions)."""
        if isinstance(theta, dict):
            arr = np.zeros(self.n_species)
            for sp, v in theta.items():
                if sp not in self._index:
                    raise ConfigurationError(f"Unknown surface species '{sp}'")
                arr[self._index[sp]] = v
            theta = arr
        theta = np.maximum(np.asarray(theta, dtype=float), 0.0)
        if theta.sum() <= 0:
            raise ValueError("Coverages must have a positive sum")
        self._theta = theta / theta.sum()

    def set_coverages_no_norm(self, theta) -> None:
        self._theta = np.array(theta[: self.n_species], dtype=float)

    def net_production_rates(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Net production rates per unit area at the gas temperature.

        Returns:
            (gas species rates, surface species rates) [kmol/(m²·s)]
        """
        n_gas = self.gas.n_species
        if not self.reactions:
            return np.zeros(n_gas), np.zeros(self.n_species)

        T = self.gas.temperature
        C = np.concatenate(
            [
                np.clip(self.gas.concentrations, 0.0, np.inf),
                np.clip(self._theta, 0.0, np.inf) * self.site_density / self._sizes,
            ]
        )
        k = np.array([rxn.rate(T) for rxn in self.reactions])
        q = k * np.prod(C[None, :] ** self._nu_f, axis=1)
        rates = (self._nu_r - self._nu_f).T @ q
        return rates[:n_gas], rates[n_gas:]
