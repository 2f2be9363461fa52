"""Material dispatch over the closed set of material kinds.

``scatter_material`` selects the scattering function from the kind tag of a
MaterialRecord and wraps the result in a ScatterRecord. The host-side
``Material`` union and ``material_to_record_values`` convert Python material
descriptions into the values stored in the scene's Taichi fields.
"""

import taichi as ti

from pathtrace.core.ray import Ray, make_ray, vec3
from pathtrace.geometry.sphere import HitRecord
from pathtrace.materials.dielectric import Dielectric, scatter_dielectric
from pathtrace.materials.lambertian import Lambertian, scatter_lambertian
from pathtrace.materials.metal import Metal, scatter_metal
from pathtrace.materials.record import MaterialType

Material = Lambertian | Metal | Dielectric


@ti.dataclass
class ScatterRecord:
    """Outcome of a scattering event.

    Attributes:
        scattered: 1 if a ray leaves the surface, 0 if the ray was absorbed.
        attenuation: Color factor applied to the scattered ray's radiance.
            Only meaningful if scattered == 1.
        ray: The scattered ray, starting at the hit point.
            Only meaningful if scattered == 1.
    """

    scattered: ti.i32
    attenuation: vec3
    ray: Ray


def material_to_record_values(material: Material) -> tuple[int, list[float], float, float]:
    """Flatten a host material into (kind, albedo, fuzz, refractive_index).

    Raises:
        TypeError: If ``material`` is not one of the supported kinds.
    """
    if isinstance(material, Lambertian):
        return int(MaterialType.LAMBERTIAN), material.albedo.to_list(), 0.0, 0.0
    if isinstance(material, Metal):
        return int(MaterialType.METAL), material.albedo.to_list(), material.fuzz, 0.0
    if isinstance(material, Dielectric):
        return int(MaterialType.DIELECTRIC), [1.0, 1.0, 1.0], 0.0, material.refractive_index
    raise TypeError(f"Unsupported material: {material!r}")


@ti.func
def scatter_material(incoming: Ray, hit: HitRecord, stream: ti.i32) -> ScatterRecord:
    """Dispatch to the scattering function of the hit material.

    Args:
        incoming: The ray that produced the hit.
        hit: The hit record, carrying a copy of the material.
        stream: The random stream of the calling pixel.

    Returns:
        A ScatterRecord. An unknown kind is treated as absorbing.
    """
    material = hit.material
    scattered_direction = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(0.0, 0.0, 0.0)
    did_scatter = 0

    if material.kind == int(MaterialType.LAMBERTIAN):
        scattered_direction, attenuation, did_scatter = scatter_lambertian(
            material.albedo, hit.point, hit.normal, stream
        )
    elif material.kind == int(MaterialType.METAL):
        scattered_direction, attenuation, did_scatter = scatter_metal(
            material.albedo, material.fuzz, incoming.direction, hit.normal, stream
        )
    elif material.kind == int(MaterialType.DIELECTRIC):
        scattered_direction, attenuation, did_scatter = scatter_dielectric(
            material.refractive_index, incoming.direction, hit.normal, stream
        )

    return ScatterRecord(
        scattered=did_scatter,
        attenuation=attenuation,
        ray=make_ray(hit.point, scattered_direction),
    )
