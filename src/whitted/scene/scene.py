"""Scene storage: primitives, materials and lights packed into Taichi fields.

A ``SceneDescription`` is the immutable host-side scene as produced by the
config loader. ``Scene`` copies it into Taichi fields once at construction;
after that the scene is read-only and every kernel receives it explicitly.

Primitive storage is structure-of-arrays: one entry per primitive in
``kinds``, ``points_a/b/c`` and ``radii`` (see ``shapes`` for the packing of
each kind), plus one array per material coefficient. Lights use the same
layout.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.materials import Material
    >>> from src.whitted.scene import Light, Scene, SceneDescription, SphereShape
    >>> desc = SceneDescription(
    ...     primitives=(SphereShape((0, 0, -5), 1.0, Material(color=(1, 0, 0))),),
    ...     lights=(Light(position=(0, 5, 0), intensity=1.0),),
    ...     ambient=0.2,
    ... )
    >>> scene = Scene(desc)
    >>> scene.nearest_hit((0, 0, 0), (0, 0, -1)).t
    4.0
"""

import logging
from dataclasses import dataclass, field

import taichi as ti
import taichi.math as tm

from src.whitted.core.ray import T_MAX, T_MIN, offset_origin
from src.whitted.errors import GeometryDegenerateCase
from src.whitted.materials.phong import Color, PhongMaterial
from src.whitted.scene.intersection import intersect_scene, shadow_factor
from src.whitted.scene.shapes import Shape, Vec3

logger = logging.getLogger(__name__)

vec3 = tm.vec3

DEFAULT_BACKGROUND: Color = (0x3D / 255.0, 0x1A / 255.0, 0x28 / 255.0)
WHITE: Color = (1.0, 1.0, 1.0)


@dataclass(frozen=True)
class Light:
    """A point light.

    Attributes:
        position: World-space position.
        intensity: Scalar intensity (>= 0).
        color: RGB color of the light.
        attenuation: Distance attenuation coefficients (c1, c2, c3); the
            light is scaled by min(1, 1 / (c1 + c2 * d + c3 * d^2)).
    """

    position: Vec3
    intensity: float
    color: Color = WHITE
    attenuation: tuple[float, float, float] = (1.0, 0.0, 0.0)

    def __post_init__(self) -> None:
        if self.intensity < 0.0:
            raise ValueError(f"Light intensity = {self.intensity} must be >= 0")
        if any(c < 0.0 for c in self.attenuation):
            raise ValueError(f"Light attenuation {self.attenuation} must be non-negative")


@dataclass(frozen=True)
class SceneDescription:
    """Everything needed to build a Scene.

    Attributes:
        primitives: Ordered primitives; order breaks ties between equal hits.
        lights: Point lights.
        ambient: Ambient light intensity (I_a).
        ambient_color: RGB color of the ambient light.
        background: Color returned by rays that hit nothing.
    """

    primitives: tuple[Shape, ...] = field(default_factory=tuple)
    lights: tuple[Light, ...] = field(default_factory=tuple)
    ambient: float = 0.0
    ambient_color: Color = WHITE
    background: Color = DEFAULT_BACKGROUND


@dataclass(frozen=True)
class HitInfo:
    """Host-side copy of a nearest-hit query result."""

    t: float
    point: Vec3
    normal: Vec3
    primitive_id: int


@ti.data_oriented
class Scene:
    """Read-only Taichi storage for a scene.

    Degenerate primitives (zero radius, zero normal, collinear triangle) are
    dropped with a warning; ``primitive_indices`` maps each stored primitive
    back to its position in the description.
    """

    def __init__(self, description: SceneDescription) -> None:
        self.description = description

        shapes = []
        self.primitive_indices: list[int] = []
        for index, shape in enumerate(description.primitives):
            try:
                shape.validate()
            except GeometryDegenerateCase as exc:
                logger.warning(
                    "Skipping primitive %d (%s): %s", index, shape.kind.name.lower(), exc
                )
                continue
            shapes.append(shape)
            self.primitive_indices.append(index)

        n = len(shapes)
        cap = max(n, 1)

        self.kinds = ti.field(dtype=ti.i32, shape=cap)
        self.points_a = ti.Vector.field(3, dtype=ti.f32, shape=cap)
        self.points_b = ti.Vector.field(3, dtype=ti.f32, shape=cap)
        self.points_c = ti.Vector.field(3, dtype=ti.f32, shape=cap)
        self.radii = ti.field(dtype=ti.f32, shape=cap)

        self.colors = ti.Vector.field(3, dtype=ti.f32, shape=cap)
        self.checker_colors = ti.Vector.field(3, dtype=ti.f32, shape=cap)
        self.ambients = ti.field(dtype=ti.f32, shape=cap)
        self.diffuses = ti.field(dtype=ti.f32, shape=cap)
        self.speculars = ti.field(dtype=ti.f32, shape=cap)
        self.shininesses = ti.field(dtype=ti.f32, shape=cap)
        self.reflectivities = ti.field(dtype=ti.f32, shape=cap)
        self.transparencies = ti.field(dtype=ti.f32, shape=cap)
        self.checker_sizes = ti.field(dtype=ti.f32, shape=cap)
        self.num_primitives = ti.field(dtype=ti.i32, shape=())

        for i, shape in enumerate(shapes):
            a, b, c, radius = shape.packed()
            material = shape.material
            self.kinds[i] = int(shape.kind)
            self.points_a[i] = a
            self.points_b[i] = b
            self.points_c[i] = c
            self.radii[i] = radius
            self.colors[i] = material.color
            self.checker_colors[i] = material.checker_color
            self.ambients[i] = material.ambient
            self.diffuses[i] = material.diffuse
            self.speculars[i] = material.specular
            self.shininesses[i] = material.shininess
            self.reflectivities[i] = material.reflectivity
            self.transparencies[i] = material.transparency
            self.checker_sizes[i] = material.checker_size
        self.num_primitives[None] = n

        lights = description.lights
        light_cap = max(len(lights), 1)
        self.light_positions = ti.Vector.field(3, dtype=ti.f32, shape=light_cap)
        self.light_colors = ti.Vector.field(3, dtype=ti.f32, shape=light_cap)
        self.light_intensities = ti.field(dtype=ti.f32, shape=light_cap)
        self.light_attenuations = ti.Vector.field(3, dtype=ti.f32, shape=light_cap)
        self.num_lights = ti.field(dtype=ti.i32, shape=())

        for i, light in enumerate(lights):
            self.light_positions[i] = light.position
            self.light_colors[i] = light.color
            self.light_intensities[i] = light.intensity
            self.light_attenuations[i] = light.attenuation
        self.num_lights[None] = len(lights)

        self.ambient_intensity = ti.field(dtype=ti.f32, shape=())
        self.ambient_color = ti.Vector.field(3, dtype=ti.f32, shape=())
        self.background = ti.Vector.field(3, dtype=ti.f32, shape=())
        self.ambient_intensity[None] = description.ambient
        self.ambient_color[None] = description.ambient_color
        self.background[None] = description.background

        logger.info(
            "Scene loaded: %d primitives (%d skipped), %d lights",
            n,
            len(description.primitives) - n,
            len(lights),
        )

    @property
    def primitive_count(self) -> int:
        return self.num_primitives[None]

    @property
    def light_count(self) -> int:
        return self.num_lights[None]

    # -------------------------------------------------------------------------
    # Host-side probes
    # -------------------------------------------------------------------------

    @ti.kernel
    def _nearest_hit_kernel(self, origin: vec3, direction: vec3) -> ti.types.vector(8, ti.f32):
        rec = intersect_scene(self, origin, tm.normalize(direction), T_MIN, T_MAX)
        return ti.Vector(
            [
                rec.t,
                rec.point.x,
                rec.point.y,
                rec.point.z,
                rec.normal.x,
                rec.normal.y,
                rec.normal.z,
                ti.cast(rec.primitive_id, ti.f32),
            ]
        )

    @ti.kernel
    def _shadow_kernel(self, point: vec3, normal: vec3, light_index: ti.i32) -> ti.f32:
        origin = offset_origin(point, normal)
        to_light = self.light_positions[light_index] - origin
        distance = tm.length(to_light)
        return shadow_factor(self, origin, to_light / distance, distance, T_MIN)

    def nearest_hit(self, origin: Vec3, direction: Vec3) -> HitInfo | None:
        """Nearest intersection of a ray with the scene.

        Args:
            origin: Ray origin.
            direction: Ray direction (normalized here).

        Returns:
            A HitInfo, or None when the ray misses every primitive.
        """
        out = self._nearest_hit_kernel(vec3(*origin), vec3(*direction))
        primitive_id = int(round(out[7]))
        if primitive_id < 0:
            return None
        return HitInfo(
            t=float(out[0]),
            point=(float(out[1]), float(out[2]), float(out[3])),
            normal=(float(out[4]), float(out[5]), float(out[6])),
            primitive_id=primitive_id,
        )

    def light_visibility(self, point: Vec3, normal: Vec3, light_index: int) -> float:
        """Shadow factor of a light seen from a surface point.

        The shadow ray starts at point + RAY_EPSILON * normal.
        """
        if not 0 <= light_index < self.light_count:
            raise IndexError(f"light index {light_index} out of range")
        return float(self._shadow_kernel(vec3(*point), vec3(*normal), light_index))


@ti.func
def get_material(scene: ti.template(), i: ti.i32) -> PhongMaterial:
    """Assemble the material of the i-th primitive from scene storage."""
    return PhongMaterial(
        color=scene.colors[i],
        checker_color=scene.checker_colors[i],
        ambient=scene.ambients[i],
        diffuse=scene.diffuses[i],
        specular=scene.speculars[i],
        shininess=scene.shininesses[i],
        reflectivity=scene.reflectivities[i],
        transparency=scene.transparencies[i],
        checker_size=scene.checker_sizes[i],
    )
