"""
Static catalog of the available threshold algorithms.
One read-only AlgorithmSpec per algorithm: identifier, display metadata,
parameter default and range, and which pre-passes the Binarizer must run.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple, List


@dataclass(frozen=True)
class AlgorithmSpec:
	"""Catalog entry for one algorithm."""
	identifier: str
	name: str
	year: str
	description: str
	formula: str
	parameter_name: Optional[str]
	default_parameter: Optional[float]
	parameter_range: Optional[Tuple[float, float]]
	windowed: bool
	needs_global_pass: bool
	needs_edge_map: bool


ALGORITHM_SPECS: Tuple[AlgorithmSpec, ...] = (
	AlgorithmSpec(
		identifier="otsu",
		name="Otsu's Method",
		year="1979",
		description="A global thresholding technique that maximizes the between-class variance.",
		formula=r"\sigma^2_B(t) = \omega_B(t)\omega_F(t)[\mu_B(t) - \mu_F(t)]^2",
		parameter_name=None,
		default_parameter=None,
		parameter_range=None,
		windowed=False,
		needs_global_pass=False,
		needs_edge_map=False
	),
	AlgorithmSpec(
		identifier="niblack",
		name="Niblack's Method",
		year="1986",
		description="A local adaptive method using the pixel neighborhood's statistics.",
		formula=r"T(x,y) = m(x,y) + k \cdot s(x,y)",
		parameter_name="k",
		default_parameter=-0.2,
		parameter_range=(-0.5, 0.0),
		windowed=True,
		needs_global_pass=False,
		needs_edge_map=False
	),
	AlgorithmSpec(
		identifier="sauvola",
		name="Sauvola's Method",
		year="1999",
		description="An improvement on Niblack that adapts to local contrast.",
		formula=r"T(x,y) = m(x,y) \cdot \left(1 + k \cdot \left(\frac{s(x,y)}{R} - 1\right)\right)",
		parameter_name="k",
		default_parameter=0.5,
		parameter_range=(0.0, 1.0),
		windowed=True,
		needs_global_pass=False,
		needs_edge_map=False
	),
	AlgorithmSpec(
		identifier="wolf",
		name="Wolf's Method",
		year="2003",
		description="Adapts to local contrast while considering global image characteristics.",
		formula=r"T(x,y) = m(x,y) - k \cdot (1 - s(x,y)/s_{max}) \cdot (m(x,y) - min_{val})",
		parameter_name="k",
		default_parameter=0.5,
		parameter_range=(0.0, 1.0),
		windowed=True,
		needs_global_pass=True,
		needs_edge_map=False
	),
	AlgorithmSpec(
		identifier="nick",
		name="NICK Method",
		year="2009",
		description="Designed specifically for historical document binarization.",
		formula=r"T(x,y) = m(x,y) + k \cdot \sqrt{s^2(x,y) + m^2(x,y)}",
		parameter_name="k",
		default_parameter=-0.2,
		parameter_range=(-0.5, 0.0),
		windowed=True,
		needs_global_pass=False,
		needs_edge_map=False
	),
	AlgorithmSpec(
		identifier="trsingh",
		name="T.R. Singh Method",
		year="2011",
		description="A local adaptive thresholding technique with bias parameter.",
		formula=r"T(x,y) = m(x,y) \cdot \left(1 + p \cdot \left(\frac{s(x,y)}{R} - 1\right)\right)",
		parameter_name="p",
		default_parameter=0.5,
		parameter_range=(0.0, 1.0),
		windowed=True,
		needs_global_pass=False,
		needs_edge_map=False
	),
	AlgorithmSpec(
		identifier="isauvola",
		name="ISauvola Method",
		year="2016",
		description="Enhanced Sauvola with improved handling of light text on dark backgrounds.",
		formula=r"T(x,y) = m(x,y) \cdot \left(1 + k(1-\alpha) \cdot \left(\frac{s(x,y)}{R} - 1\right)\right)",
		parameter_name="k",
		default_parameter=0.5,
		parameter_range=(0.0, 1.0),
		windowed=True,
		needs_global_pass=True,
		needs_edge_map=False
	),
	AlgorithmSpec(
		identifier="wan",
		name="WAN Method",
		year="2018",
		description="Multi-stage approach with edge preservation and noise reduction.",
		formula=r"T(x,y) = m(x,y) \cdot \left(1 + k(1+E(x,y)) \cdot \left(\frac{s(x,y)}{R} - 1\right)\right)",
		parameter_name="k",
		default_parameter=0.5,
		parameter_range=(0.0, 1.0),
		windowed=True,
		needs_global_pass=False,
		needs_edge_map=True
	),
)

_SPECS_BY_ID: Dict[str, AlgorithmSpec] = {spec.identifier: spec for spec in ALGORITHM_SPECS}


def get_spec(identifier: str) -> AlgorithmSpec:
	"""
	Look up a catalog entry.
	Args:
		identifier: Algorithm identifier
	Returns:
		AlgorithmSpec
	Raises:
		KeyError: If the identifier is unknown
	"""
	try:
		return _SPECS_BY_ID[identifier]
	except KeyError:
		raise KeyError(
			f"Unknown algorithm '{identifier}'. Available: {list(_SPECS_BY_ID)}"
		) from None


def list_specs() -> List[AlgorithmSpec]:
	"""All catalog entries in presentation order."""
	return list(ALGORITHM_SPECS)


def clamp_parameter(identifier: str, value: Optional[float]) -> Optional[float]:
	"""
	Clamp a user-supplied parameter into the algorithm's valid range.
	The Binarizer does not re-check parameter bounds; front ends call this first.
	Args:
		identifier: Algorithm identifier
		value: Requested value, or None for the default
	Returns:
		Clamped value, the default when value is None, or None for parameter-free algorithms
	"""
	spec = get_spec(identifier)
	if spec.parameter_range is None:
		return None
	if value is None:
		return spec.default_parameter

	low, high = spec.parameter_range
	return min(max(float(value), low), high)
