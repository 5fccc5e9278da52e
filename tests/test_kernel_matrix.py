"""
Tests for kernel matrix assembly.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from kernel_pca.errors import ConfigurationError
from kernel_pca.kernel_matrix import KernelMatrixBuilder
from kernel_pca.kernels import create_kernel
from kernel_pca.sampling import OrderedSelection


@pytest.mark.parametrize("name", ["gaussian", "hyptan", "cosine", "laplacian"])
@pytest.mark.parametrize("block_size", [1, 3, 256])
def test_full_matrix_is_symmetric_and_matches_pairwise(name, block_size, cloud_data):
    kernel = create_kernel(name, bandwidth=1.5, kernel_scale=0.2)
    kernel_matrix = KernelMatrixBuilder(kernel, block_size=block_size).build(cloud_data)
    assert kernel_matrix.shape == (20, 20)
    assert np.array_equal(kernel_matrix, kernel_matrix.T)
    assert_allclose(kernel_matrix, kernel.pairwise(cloud_data, cloud_data), atol=1e-12)


def test_gaussian_matrix_has_unit_diagonal(uniform_data):
    kernel_matrix = KernelMatrixBuilder(create_kernel("gaussian")).build(uniform_data)
    assert_allclose(np.diag(kernel_matrix), 1.0)


def test_build_approximate(cloud_data):
    builder = KernelMatrixBuilder(create_kernel("gaussian"))
    factors = builder.build_approximate(cloud_data, 4, policy=OrderedSelection())
    assert factors.embedding.shape == (20, 4)
    assert factors.selection.rank == 4


def test_builder_requires_kernel():
    with pytest.raises(ConfigurationError):
        KernelMatrixBuilder(None)


def test_builder_rejects_bad_block_size():
    with pytest.raises(ConfigurationError):
        KernelMatrixBuilder(create_kernel("linear"), block_size=0)


@pytest.mark.parametrize("data", [np.empty((3, 0)), np.ones(4), np.ones((2, 2, 2))])
def test_builder_rejects_bad_data(data):
    with pytest.raises(ConfigurationError):
        KernelMatrixBuilder(create_kernel("linear")).build(data)
