"""
Ideal-Gas Reactor
=================

Well-mixed, ideal-gas reactor with temperature as the energy variable.

THEORETICAL FOUNDATION
=====================

State vector (K gas species, S surface coverages over all walls):

   y = [m, V, T, Y₀ … Y_{K-1}, θ …]                    length 3 + K + S

1. Total Mass:
   dm/dt = ṁ_surf + Σ ṁ_in - Σ ṁ_out
   ṁ_surf = Σₖ ṡₖ Wₖ                                  (net surface mass flux)

2. Volume (walls):
   dV/dt = V̇ = Σ_walls ±(K A ΔP + A v(t))

3. Energy (constant-volume heat capacity form):
   m c_v dT/dt = -P V̇ - Q̇
                 - Σₖ uₖ (ω̇ₖ V + ṡₖ)
                 - Σ_out ṁ P V / m
                 + Σ_in ṁ (h_in - Σₖ uₖ Y_in,ₖ / Wₖ)

   uₖ: partial molar internal energy [J/kmol]
   ω̇ₖ: homogeneous production rate [kmol/(m³·s)]
   ṡₖ: surface production rate [kmol/s]

4. Species:
   dYₖ/dt = (ω̇ₖ V + ṡₖ) Wₖ / m - Yₖ ṁ_surf / m
            + Σ_in (ṁ_in,ₖ - ṁ_in Yₖ) / m

   Outflow leaves with the reactor composition and does not change Yₖ.

5. Partial Jacobian (temperature column only):
   ∂Ṫ/∂T  = R/(m c_v) Σₖ c̃ₖ (ω̇ₖ V + ṡₖ) - 1/(m c_v) Σₖ uₖ V ∂ω̇ₖ/∂T
   c̃ₖ     = c_p,ₖ/R - 1 - uₖ (dc_v/dT)/(R c_v) - uₖ/RT
   ∂Ẏₖ/∂T = Wₖ/m ((ω̇ₖ V + ṡₖ)/T + ∂ω̇ₖ/∂T)

   The ∂Ṫ/∂Y and ∂Ẏ/∂Y blocks are not computed here. Whoever assembles the
   full system matrix must supply them (ReactorNet differences them
   numerically).

Mass fractions are loaded from the state vector without renormalization;
the integrator's error control keeps ΣYₖ close to one.

References:
- Goodwin, Moffat & Speth, Cantera reactor science documentation
- Niemeyer, Curtis & Sung, "pyJac: analytical Jacobian generator for
  chemical kinetics", Comput. Phys. Commun. 215 (2017)

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

import numpy as np
from typing import Optional
import logging

from .errors import ConfigurationError
from .reactor_base import Reactor, ReactorConfiguration
from .thermodynamics import GAS_CONSTANT

logger = logging.getLogger(__name__)


class IdealGasReactor(Reactor):
    """
    Zero-dimensional ideal-gas reactor integrating (m, V, T, Y, θ).

    Example:
        >>> from igr_simulator.core.mechanisms import hydrogen_air
        >>> gas, kin = hydrogen_air()
        >>> gas.set_state_TPX(1000.0, 101325.0, {"H2": 2, "O2": 1, "N2": 3.76})
        >>> r = IdealGasReactor(gas, kin)
        >>> r.initialize()
        >>> y = np.zeros(r.n_equations)
        >>> r.get_state(y)
        >>> y[2]
        1000.0
    """

    def set_thermo(self, thermo) -> None:
        """Attach the phase; only ideal-gas phases are accepted."""
        phase_type = getattr(thermo, "phase_type", None)
        if phase_type != "IdealGas":
            raise ConfigurationError(
                f"Incompatible phase type '{phase_type}' for ideal-gas reactor '{self.name}': "
                "IdealGasReactor requires an 'IdealGas' thermodynamic model"
            )
        super().set_thermo(thermo)

    # ------------------------------------------------------------------
    # State vector
    # ------------------------------------------------------------------

    def get_state(self, y: np.ndarray) -> None:
        """
        Write [m, V, T, Y, θ] for the committed state into `y`.

        Raises:
            StateError: If the reactor has no thermodynamic model
        """
        self._require_thermo("get_state")
        self.restore_state()
        n_species = self.thermo.n_species

        y[0] = self.thermo.density * self._volume
        y[1] = self._volume
        y[2] = self.thermo.temperature
        y[3 : 3 + n_species] = self.thermo.mass_fractions
        self.get_surface_initial_conditions(y[3 + n_species :])

    def update_state(self, y: np.ndarray) -> None:
        """
        Load the phase from `y` and persist the result.

        Mass fractions are taken as given (no renormalization).
        """
        self._require_thermo("update_state")
        n_species = self.thermo.n_species

        self._mass = float(y[0])
        self._volume = float(y[1])
        self.thermo.set_mass_fractions_no_norm(y[3 : 3 + n_species])
        self.thermo.set_state_TR(y[2], self._mass / self._volume)
        self.update_surface_state(y[3 + n_species :])
        self._persist_state()

    # ------------------------------------------------------------------
    # Governing equations
    # ------------------------------------------------------------------

    def eval_eqs(self, time: float, y: np.ndarray, ydot: np.ndarray, params=None) -> None:
        """
        Time derivatives of the state at `time`.

        Args:
            time: Simulation time [s]
            y: State vector (already loaded by update_state)
            ydot: Output, same layout as y
            params: Sensitivity multipliers for the registered parameters,
                or None for the nominal rates

        Raises:
            StateError: If the reactor has no thermo or is not initialized
        """
        self._require_initialized("eval_eqs")
        self.restore_state()

        with self.sensitivity.applied(self.kinetics, params):
            thermo = self.thermo
            n_species = thermo.n_species
            m = self._mass
            V = self._volume

            u_k = thermo.partial_molar_int_energies()
            mw = thermo.molecular_weights
            Y = thermo.mass_fractions

            if self.chemistry_enabled and self.kinetics is not None:
                self._wdot[:] = self.kinetics.net_production_rates()
            else:
                self._wdot[:] = 0.0

            self._evaluate_walls(time)
            mdot_surf = self._evaluate_surfaces(time, ydot[3 + n_species : self._n_eq])
            dmdt = mdot_surf

            mcvdTdt = -self._pressure * self._vdot - self._Q
            production = self._wdot * V + self._sdot  # [kmol/s]
            mcvdTdt -= np.dot(production, u_k)
            dYdt = production * mw / m - Y * mdot_surf / m

            for outlet in self.outlets:
                mdot = outlet.mass_flow_rate(time)
                dmdt -= mdot
                mcvdTdt -= mdot * self._pressure * V / m

            for inlet in self.inlets:
                mdot = inlet.mass_flow_rate(time)
                dmdt += mdot
                mcvdTdt += inlet.enthalpy_mass() * mdot
                mdot_spec = inlet.outlet_species_mass_flow_rates(time)
                dYdt += (mdot_spec - mdot * Y) / m
                mcvdTdt -= np.dot(u_k / mw, mdot_spec)

            ydot[0] = dmdt
            ydot[1] = self._vdot
            if self.energy_enabled:
                ydot[2] = mcvdTdt / (m * thermo.cv_mass)
            else:
                ydot[2] = 0.0
            ydot[3 : 3 + n_species] = dYdt

    def eval_jac_eqs(self, time: float, y: np.ndarray, jac: np.ndarray, start: int) -> None:
        """
        Analytic temperature-column Jacobian entries.

        Fills jac[start+2, start+2] (∂Ṫ/∂T) and jac[start+3+k, start+2]
        (∂Ẏₖ/∂T). All other entries of `jac` are left untouched.

        Surface production rates are those of the last eval_eqs call;
        their temperature dependence is not included.
        """
        self._require_initialized("eval_jac_eqs")
        self.restore_state()

        thermo = self.thermo
        n_species = thermo.n_species
        m = self._mass
        V = self._volume
        T = thermo.temperature
        RT = GAS_CONSTANT * T

        mw = thermo.molecular_weights
        Y = thermo.mass_fractions
        u_k = thermo.partial_molar_int_energies()
        cp_R = thermo.cp_R()
        cv = thermo.cv_mass

        if self.chemistry_enabled and self.kinetics is not None:
            wdot = self.kinetics.net_production_rates()
            dwdot_dT = self.kinetics.net_production_rates_ddT()
        else:
            wdot = np.zeros(n_species)
            dwdot_dT = np.zeros(n_species)
        production = wdot * V + self._sdot

        # d(cv/R)/dT of the mixture; species d(Cv/R)/dT equals d(Cp/R)/dT
        dcv_R_dT = np.sum(thermo.dcp_R_dT() * Y / mw)
        inv_mcv = 1.0 / (m * cv)

        cv_R_eff = cp_R - 1.0 - u_k * dcv_R_dT / cv - u_k / RT
        first = np.dot(cv_R_eff, production) * inv_mcv * GAS_CONSTANT
        second = np.dot(u_k, V * dwdot_dT) * inv_mcv

        T_ind = start + 2
        jac[T_ind, T_ind] = first - second if self.energy_enabled else 0.0
        jac[start + 3 : start + 3 + n_species, T_ind] = mw / m * (production / T + dwdot_dT)

        logger.debug(f"Reactor '{self.name}': dTdot/dT = {jac[T_ind, T_ind]:.6e}")

    # ------------------------------------------------------------------
    # Component names
    # ------------------------------------------------------------------

    def component_index(self, name: str) -> Optional[int]:
        """
        Offset of `name` in this reactor's state vector.

        Species names take precedence over "mass", "volume" and
        "temperature". Returns None for unknown names.
        """
        self._require_thermo("component_index")
        k = self.thermo.species_index(name)
        if k is not None:
            return k + 3
        return {"mass": 0, "volume": 1, "temperature": 2}.get(name)

    def component_name(self, k: int) -> str:
        if k == 2:
            return "temperature"
        return super().component_name(k)


def validate_ideal_gas_reactor() -> None:
    """
    Validation of the ideal-gas reactor equations.

    Tests:
    1. get_state / update_state round trip
    2. Closed reactor without chemistry has zero derivatives
    3. Closed reacting reactor conserves mass and ΣY
    4. Jacobian writes only the temperature column
    5. Component index / name consistency
    """
    from .mechanisms import hydrogen_air

    gas, kinetics = hydrogen_air()
    gas.set_state_TPX(1100.0, 101325.0, {"H2": 2.0, "O2": 1.0, "N2": 3.76})
    reactor = IdealGasReactor(gas, kinetics, ReactorConfiguration(name="check", volume=0.5))
    reactor.initialize()
    n = reactor.n_equations

    # Test 1: Round trip
    y = np.zeros(n)
    reactor.get_state(y)
    reactor.update_state(y)
    y2 = np.zeros(n)
    reactor.get_state(y2)
    assert np.allclose(y, y2, rtol=1e-12, atol=0.0), "State round trip"

    # Test 2: No forcing without chemistry
    reactor.chemistry_enabled = False
    ydot = np.full(n, np.nan)
    reactor.eval_eqs(0.0, y, ydot)
    assert np.all(ydot == 0.0), "Isolated non-reacting reactor"
    reactor.chemistry_enabled = True

    # Test 3: Reacting, closed
    reactor.eval_eqs(0.0, y, ydot)
    assert ydot[0] == 0.0 and ydot[1] == 0.0, "Closed reactor mass/volume"
    assert abs(np.sum(ydot[3:])) < 1e-9 * np.abs(ydot[3:]).max(), "Sum of dY/dt"
    assert ydot[2] > 0.0, "Exothermic reaction heats the mixture"

    # Test 4: Only the temperature column is written
    jac = np.full((n, n), -1.0)
    reactor.eval_jac_eqs(0.0, y, jac, 0)
    untouched = np.ones((n, n), dtype=bool)
    untouched[2:, 2] = False
    assert np.all(jac[untouched] == -1.0), "Jacobian blocks outside T column"
    assert np.all(np.isfinite(jac[2:, 2])), "Finite temperature column"

    # Test 5: Indexer
    for name in gas.species_names:
        assert reactor.component_name(reactor.component_index(name)) == name, name
    assert reactor.component_index("temperature") == 2

    print("✓ All ideal-gas reactor validations passed")


if __name__ == "__main__":
    validate_ideal_gas_reactor()
