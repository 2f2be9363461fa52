"""Materials module.

Components:
    record: Material kind tags and the device-side MaterialRecord
    lambertian: Ideal diffuse reflection
    metal: Mirror reflection perturbed by fuzz
    dielectric: Glass-like refraction with Schlick reflectance
    scatter: Dispatch over the material kinds

Host-side material classes are frozen dataclasses validated at construction.
Scattering is implemented as Taichi functions.
"""

from .dielectric import Dielectric, reflect_probability, scatter_dielectric
from .lambertian import Lambertian, scatter_lambertian, validate_albedo
from .metal import Metal, scatter_metal
from .record import MaterialRecord, MaterialType

# Note: scatter is NOT imported here to avoid circular imports with geometry.
# Import directly from pathtrace.materials.scatter when needed.

__all__ = [
    "MaterialType",
    "MaterialRecord",
    "Lambertian",
    "scatter_lambertian",
    "validate_albedo",
    "Metal",
    "scatter_metal",
    "Dielectric",
    "scatter_dielectric",
    "reflect_probability",
]
