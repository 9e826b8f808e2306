import math

import numpy as np
import pytest

from physics import transforms
from rendering.camera import SceneCamera
from rendering.materials import Material, hex_color, scene_materials
from rendering.meshes import (
    WireframeMesh,
    create_capped_cylinder_mesh,
    create_girl_meshes,
    create_ground_grid,
    create_raindrop_mesh,
    create_sphere_mesh,
    create_streetlamp_mesh,
    create_surface_of_revolution,
    create_totoro_body_mesh,
    create_tree_mesh,
    create_umbrella_mesh,
    merged,
)


def _assert_well_formed(mesh: WireframeMesh):
    assert mesh.segments
    count = len(mesh.vertices)
    for start, end in mesh.segments:
        assert 0 <= start < count
        assert 0 <= end < count


@pytest.mark.parametrize(
    "factory",
    [
        create_sphere_mesh,
        create_capped_cylinder_mesh,
        create_ground_grid,
        create_raindrop_mesh,
        create_streetlamp_mesh,
        create_tree_mesh,
        create_totoro_body_mesh,
        lambda: create_umbrella_mesh(0.7),
    ],
)
def test_generated_meshes_index_their_own_vertices(factory):
    _assert_well_formed(factory())


def test_girl_parts_are_all_drawable():
    parts = create_girl_meshes()

    assert set(parts) == {"body", "dress_bottom", "dress_top", "boots", "eyes", "pupils", "hair"}
    for mesh in parts.values():
        _assert_well_formed(mesh)


def test_merged_reindexes_segments():
    first = WireframeMesh([(0.0, 0.0, 0.0), (1.0, 0.0, 0.0)], [(0, 1)])
    second = WireframeMesh([(0.0, 1.0, 0.0), (0.0, 2.0, 0.0)], [(0, 1)])

    mesh = merged(first, second)

    assert len(mesh.vertices) == 4
    assert list(mesh.segments) == [(0, 1), (2, 3)]


def test_transformed_by_applies_the_matrix():
    mesh = WireframeMesh([(1.0, 0.0, 0.0)], [(0, 0)])

    moved = mesh.transformed_by(transforms.translation(0.0, 2.0, 0.0) @ transforms.scale(3.0, 1.0, 1.0))

    np.testing.assert_allclose(moved.vertices[0], (3.0, 2.0, 0.0))


def test_open_sweep_adds_a_closing_column():
    profile = [(1.0, 0.0, 0.0), (1.0, 0.0, 1.0)]

    full = create_surface_of_revolution(profile, 6)
    half = create_surface_of_revolution(profile, 6, sweep=math.pi)

    assert len(full.vertices) == 12
    assert len(half.vertices) == 14


def test_umbrella_meshes_are_cached_by_rounded_angle():
    assert create_umbrella_mesh(0.5) is create_umbrella_mesh(0.5000001)
    assert create_umbrella_mesh(0.5) is not create_umbrella_mesh(0.6)


def test_ground_grid_spans_the_requested_size():
    grid = create_ground_grid(10.0, 4)
    xs = [vertex[0] for vertex in grid.vertices]

    assert min(xs) == -10.0
    assert max(xs) == 10.0
    assert len(grid.segments) == 10


def test_hex_color_parses_rgb():
    assert hex_color("#ff0080", 0.5) == (1.0, 0.0, 128 / 255.0, 0.5)
    with pytest.raises(ValueError):
        hex_color("#fff")


def test_material_override_keeps_other_fields():
    base = Material((0.0, 0.0, 0.0, 1.0), ambient=0.2)

    changed = base.override(hex_color("#ffffff"), specularity=0.9)

    assert changed.color == (1.0, 1.0, 1.0, 1.0)
    assert changed.ambient == 0.2
    assert changed.specularity == 0.9
    assert base.specularity == 0.3


def test_scene_palette_covers_every_prop():
    assert {"ground", "rain", "rain_bright", "shadow", "cylinder"} <= set(scene_materials())


def test_camera_composes_projection_with_the_timeline_view():
    camera = SceneCamera((800, 400))
    camera.set_view(transforms.translation(0.0, 0.0, -10.0))

    combined = camera.view_projection_matrix()

    np.testing.assert_allclose(combined, camera.projection_matrix() @ camera.view_matrix())
    assert camera.projection_matrix()[1, 1] == pytest.approx(2.0 * camera.projection_matrix()[0, 0])

    camera.update_viewport((400, 0))
    assert camera.projection_matrix()[0, 0] == pytest.approx(camera.projection_matrix()[1, 1])
