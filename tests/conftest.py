"""Pytest configuration for raytracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session, and small
builders for host-side scene descriptions.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents repeated ti.init() calls; a single CPU
    thread is the deterministic baseline the renderer is tested against.
    """
    ti.init(arch=ti.cpu, cpu_max_num_threads=1)
    yield


@pytest.fixture
def matte():
    """Factory for simple opaque materials."""
    from src.whitted.materials.phong import Material

    def _matte(color=(1.0, 1.0, 1.0), **kwargs):
        params = {"ambient": 1.0, "diffuse": 1.0, "specular": 0.0}
        params.update(kwargs)
        return Material(color=color, **params)

    return _matte
