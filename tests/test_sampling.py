import numpy as np
import pytest

from voxelterm.cube import Cube
from voxelterm.sampling import (
    SliceAxis,
    downsample_2d,
    map_coordinates_3d,
    position_2d,
    slice_grid_coords,
)


def _cube_2x2x2():
    # value = 4*i + 2*j + k, i.e. 0..7 over the corners
    return np.arange(8, dtype=np.float64).reshape(2, 2, 2)


def _points(*xyz):
    return np.array(xyz, dtype=np.float64).T


def test_trilinear_hits_corner_values():
    data = _cube_2x2x2()
    out = map_coordinates_3d(data, _points((0, 0, 0), (1, 1, 1), (1, 0, 0), (0, 1, 1)))
    assert out.tolist() == [0.0, 7.0, 4.0, 3.0]


def test_trilinear_center_is_mean():
    data = _cube_2x2x2()
    out = map_coordinates_3d(data, _points((0.5, 0.5, 0.5)))
    assert out[0] == pytest.approx(3.5)


def test_trilinear_is_linear_along_each_axis():
    data = _cube_2x2x2()
    out = map_coordinates_3d(data, _points((0.25, 0, 0), (0, 0.25, 0), (0, 0, 0.25)))
    assert out.tolist() == pytest.approx([1.0, 0.5, 0.25])


def test_exact_voxel_coordinates_reproduce_data():
    rng = np.random.default_rng(0)
    data = rng.normal(size=(3, 4, 5))
    grid = np.stack(np.meshgrid(np.arange(3), np.arange(4), np.arange(5), indexing="ij"))
    coords = grid.reshape(3, -1).astype(np.float64)
    out = map_coordinates_3d(data, coords)
    assert np.allclose(out, data.ravel())


def test_outside_points_clamp_to_edge_by_default():
    data = _cube_2x2x2()
    out = map_coordinates_3d(data, _points((-1, -1, -1), (5, 5, 5), (-3, 0, 0.5)))
    assert out.tolist() == pytest.approx([0.0, 7.0, 0.5])


def test_fill_value_outside_volume():
    data = _cube_2x2x2()
    out = map_coordinates_3d(data, _points((-0.5, 0, 0), (1, 1, 1), (0, 1.01, 0)), fill_value=99.0)
    assert out.tolist() == [99.0, 7.0, 99.0]


def test_singleton_axis_is_sampled():
    data = np.arange(4, dtype=np.float64).reshape(2, 2, 1)
    out = map_coordinates_3d(data, _points((1, 1, 0), (0.5, 0, 0)))
    assert out.tolist() == pytest.approx([3.0, 1.0])


def test_accepts_homogeneous_batches():
    data = _cube_2x2x2()
    coords = np.array([[1.0], [1.0], [1.0], [1.0]])
    assert map_coordinates_3d(data, coords).tolist() == [7.0]


def test_slice_axis_from_index():
    assert SliceAxis.from_index(2) is SliceAxis.Z
    with pytest.raises(ValueError):
        SliceAxis.from_index(3)


def test_in_plane_pairs():
    assert SliceAxis.X.in_plane == (1, 2)
    assert SliceAxis.Y.in_plane == (0, 2)
    assert SliceAxis.Z.in_plane == (0, 1)


def test_position_2d():
    values = ("x", "y", "z")
    assert position_2d(values, 0) == ("x", "y", "z")
    assert position_2d(values, 1) == ("y", "x", "z")
    assert position_2d(values, 2) == ("z", "x", "y")
    with pytest.raises(ValueError):
        position_2d(values, -1)


def test_slice_grid_covers_both_edges_row_major():
    cube = Cube(0.0, 10.0, -1.0, 2.0, 11.0, 1.0)
    coords = slice_grid_coords(2, 3, 2, 0.5, cube)
    assert coords.shape == (4, 6)
    assert coords[0].tolist() == [0.0, 1.0, 2.0, 0.0, 1.0, 2.0]
    assert coords[1].tolist() == [10.0, 10.0, 10.0, 11.0, 11.0, 11.0]
    assert np.all(coords[2] == 0.5)
    assert np.all(coords[3] == 1.0)


def test_slice_grid_rejects_empty_resolution():
    with pytest.raises(ValueError):
        slice_grid_coords(0, 0, 4, 0.0, Cube.from_shape((4, 4, 4)))


def test_downsample_averages_blocks():
    data = np.arange(16, dtype=np.float64).reshape(4, 4)
    out = downsample_2d(data, 2)
    assert out.tolist() == [[2.5, 4.5], [10.5, 12.5]]


def test_downsample_factor_one_is_identity():
    data = np.arange(6, dtype=np.float64).reshape(2, 3)
    assert np.array_equal(downsample_2d(data, 1), data)
    with pytest.raises(ValueError):
        downsample_2d(data, 0)
