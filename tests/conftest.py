"""Pytest configuration for path tracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts. All kernels run in
    double precision.
    """
    ti.init(arch=ti.cpu, default_fp=ti.f64, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_render_state():
    """Reset scene, render target and random streams around each test.

    This ensures tests are isolated from each other.
    """
    # Import here so module level fields are created after ti.init()
    from pathtrace.core.accumulator import reset_render_target
    from pathtrace.core.sampler import SeededRandom, configure_random
    from pathtrace.scene.intersection import clear_scene

    def _clear_all():
        clear_scene()
        reset_render_target()
        configure_random(SeededRandom(0))

    _clear_all()

    yield

    _clear_all()
