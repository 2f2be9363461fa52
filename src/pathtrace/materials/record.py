"""Material kinds and the device-side material record.

Materials form a closed set of kinds. On the device every material is the
same tagged record: ``kind`` selects the variant and the remaining members
hold that variant's parameters (unused members are zero). A copy of the
record travels with each hit so the integrator never re-queries a primitive.
"""

from enum import IntEnum

import taichi as ti

from pathtrace.core.ray import vec3


class MaterialType(IntEnum):
    """Enumeration of supported material kinds.

    Used for material dispatch in the path tracer to determine which
    scattering function to call.
    """

    LAMBERTIAN = 0
    METAL = 1
    DIELECTRIC = 2


@ti.dataclass
class MaterialRecord:
    """Tagged material variant as stored on the device.

    Attributes:
        kind: A MaterialType value.
        albedo: Reflectance color (Lambertian and Metal).
        fuzz: Reflection roughness in [0, 1] (Metal).
        refractive_index: Index of refraction (Dielectric).
    """

    kind: ti.i32
    albedo: vec3
    fuzz: ti.f64
    refractive_index: ti.f64
