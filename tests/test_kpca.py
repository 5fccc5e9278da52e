"""
Tests for the kernel PCA orchestrator and the row-oriented reducer adapter.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal

from kernel_pca import (
    ConfigurationError,
    InvalidDimensionalityError,
    InvalidParameterError,
    KernelPCA,
    KernelPCAReducer,
    KernelPCAState,
    NumericalInstabilityError,
    UnknownKernelError,
    UnknownSamplingSchemeError,
    kernel_pca,
)
from kernel_pca.kernels import GaussianKernel
from kernel_pca.sampling import OrderedSelection

ALL_KERNELS = [
    "linear",
    "gaussian",
    "polynomial",
    "hyptan",
    "laplacian",
    "epanechnikov",
    "cosine",
]


def _reduce(data, kernel, k, **kwargs):
    return KernelPCA(kernel, new_dimensionality=k, **kwargs).apply(data).output


# ------------------------------------------------------------------
# Output shape and values
# ------------------------------------------------------------------


@pytest.mark.parametrize("kernel", ALL_KERNELS)
def test_output_shape_for_every_kernel(kernel, uniform_data):
    output = kernel_pca(uniform_data, kernel, 3)
    assert output.shape == (3, 5)
    assert np.all(np.isfinite(output))


@pytest.mark.parametrize("kernel", ALL_KERNELS)
def test_nystroem_output_shape_for_every_kernel(kernel, cloud_data):
    output = _reduce(
        cloud_data, kernel, 2, nystroem_method=True, rank=4, sampling="ordered"
    )
    assert output.shape == (2, 20)


def test_output_rows_are_scaled_orthogonal_eigenvectors(uniform_data):
    result = KernelPCA("gaussian", new_dimensionality=3).apply(uniform_data)
    assert_allclose(
        result.output @ result.output.T, np.diag(result.eigenvalues**2), atol=1e-10
    )


def test_eigenvalues_are_descending(cloud_data):
    result = KernelPCA("gaussian", new_dimensionality=5, center=True).apply(cloud_data)
    assert np.all(np.diff(result.eigenvalues) <= 0)


def test_matches_direct_eigendecomposition(uniform_data):
    kernel_matrix = GaussianKernel().pairwise(uniform_data, uniform_data)
    expected = np.sort(np.linalg.eigvalsh(kernel_matrix))[::-1][:3]
    result = KernelPCA("gaussian", new_dimensionality=3).apply(uniform_data)
    assert_allclose(result.eigenvalues, expected, rtol=1e-10)


def test_results_are_deterministic(cloud_data):
    first = _reduce(cloud_data, "gaussian", 2, nystroem_method=True, rank=5, random_state=4)
    second = _reduce(cloud_data, "gaussian", 2, nystroem_method=True, rank=5, random_state=4)
    assert_allclose(first, second)


@pytest.mark.parametrize("center", [False, True])
def test_full_rank_nystroem_matches_exact(center, uniform_data):
    exact = _reduce(uniform_data, "gaussian", 3, center=center)
    approximate = _reduce(
        uniform_data,
        "gaussian",
        3,
        center=center,
        nystroem_method=True,
        rank=5,
        sampling="ordered",
    )
    assert_allclose(approximate, exact, atol=1e-6)


def test_accepts_kernel_instance(uniform_data):
    by_instance = _reduce(uniform_data, GaussianKernel(bandwidth=0.5), 2)
    by_name = _reduce(uniform_data, "gaussian", 2, bandwidth=0.5)
    assert_allclose(by_instance, by_name)


def test_accepts_policy_instance(cloud_data):
    output = _reduce(
        cloud_data, "gaussian", 2, nystroem_method=True, rank=3, sampling=OrderedSelection()
    )
    assert output.shape == (2, 20)


# ------------------------------------------------------------------
# Options change the result
# ------------------------------------------------------------------


def test_centering_changes_output(uniform_data):
    plain = _reduce(uniform_data, "linear", 3)
    centred = _reduce(uniform_data, "linear", 3, center=True)
    assert not np.allclose(plain, centred)


@pytest.mark.parametrize(
    "kernel,first,second",
    [
        ("gaussian", {"bandwidth": 1.0}, {"bandwidth": 2.0}),
        ("laplacian", {"bandwidth": 1.0}, {"bandwidth": 2.0}),
        ("epanechnikov", {"bandwidth": 1.0}, {"bandwidth": 2.0}),
        ("polynomial", {"offset": 0.0}, {"offset": 1.0}),
        ("polynomial", {"degree": 1.0}, {"degree": 2.0}),
        ("hyptan", {"offset": 0.0}, {"offset": 1.0}),
        ("hyptan", {"kernel_scale": 1.0}, {"kernel_scale": 2.0}),
    ],
)
def test_kernel_parameters_change_output(kernel, first, second, uniform_data):
    assert not np.allclose(
        _reduce(uniform_data, kernel, 3, **first),
        _reduce(uniform_data, kernel, 3, **second),
    )


def test_kmeans_and_ordered_sampling_differ(cloud_data):
    ordered = _reduce(cloud_data, "gaussian", 2, nystroem_method=True, sampling="ordered")
    kmeans = _reduce(
        cloud_data, "gaussian", 2, nystroem_method=True, sampling="kmeans", random_state=0
    )
    assert not np.allclose(ordered, kmeans)


def test_random_and_ordered_sampling_differ(cloud_data):
    ordered = _reduce(
        cloud_data, "gaussian", 2, nystroem_method=True, rank=3, sampling="ordered"
    )
    outputs = [
        _reduce(
            cloud_data,
            "gaussian",
            2,
            nystroem_method=True,
            rank=3,
            sampling="random",
            random_state=seed,
        )
        for seed in range(10)
    ]
    # A random draw can coincide with the ordered one; ten draws cannot all do so.
    assert any(not np.allclose(ordered, output) for output in outputs)


def test_kmeans_and_random_sampling_differ(cloud_data):
    kmeans = _reduce(
        cloud_data, "gaussian", 2, nystroem_method=True, rank=3, sampling="kmeans", random_state=0
    )
    random = _reduce(
        cloud_data, "gaussian", 2, nystroem_method=True, rank=3, sampling="random", random_state=0
    )
    assert not np.allclose(kmeans, random)


def test_kmeans_with_duplicate_leading_points_stays_finite():
    data = np.repeat(np.array([[0.0, 1.0], [0.0, 1.0]]), 3, axis=1)
    result = KernelPCA(
        "linear", new_dimensionality=1, nystroem_method=True, rank=3, sampling="kmeans"
    ).apply(data)
    assert result.output.shape == (1, 6)
    assert np.all(np.isfinite(result.output))
    assert_array_equal(result.selection.indices, [0, 3, 1])


def test_nystroem_rank_one_ordered(uniform_data):
    result = KernelPCA(
        "gaussian",
        new_dimensionality=1,
        nystroem_method=True,
        rank=1,
        sampling="ordered",
    ).apply(uniform_data)
    assert result.output.shape == (1, 5)
    assert np.all(np.isfinite(result.output))
    assert result.rank == 1
    assert_array_equal(result.selection.indices, [0])


# ------------------------------------------------------------------
# Validation
# ------------------------------------------------------------------


def test_dimensionality_above_point_count(uniform_data):
    with pytest.raises(InvalidDimensionalityError):
        kernel_pca(uniform_data, "linear", 6)


@pytest.mark.parametrize("k", [0, -1, 2.5, "2", True])
def test_invalid_dimensionality(k, uniform_data):
    with pytest.raises(InvalidDimensionalityError):
        kernel_pca(uniform_data, "linear", k)


def test_missing_kernel(uniform_data):
    with pytest.raises(ConfigurationError):
        kernel_pca(uniform_data, None, 2)


def test_unknown_kernel(uniform_data):
    with pytest.raises(UnknownKernelError):
        kernel_pca(uniform_data, "sigmoid", 2)


def test_unknown_sampling_scheme(uniform_data):
    with pytest.raises(UnknownSamplingSchemeError):
        kernel_pca(uniform_data, "gaussian", 2, nystroem_method=True, sampling="farthest")


def test_sampling_ignored_without_nystroem(uniform_data):
    output = kernel_pca(uniform_data, "gaussian", 2, sampling="farthest")
    assert output.shape == (2, 5)


def test_rank_defaults_to_dimensionality(cloud_data):
    result = KernelPCA(
        "gaussian", new_dimensionality=3, nystroem_method=True, sampling="ordered"
    ).apply(cloud_data)
    assert result.rank == 3


def test_dimensionality_above_rank(cloud_data):
    with pytest.raises(InvalidDimensionalityError):
        kernel_pca(cloud_data, "gaussian", 4, nystroem_method=True, rank=3)


def test_rank_above_point_count(uniform_data):
    with pytest.raises(InvalidParameterError):
        kernel_pca(uniform_data, "gaussian", 2, nystroem_method=True, rank=6)


@pytest.mark.parametrize(
    "data",
    [np.ones(5), np.empty((3, 0)), np.array([[1.0, np.nan], [0.0, 1.0]])],
)
def test_invalid_data(data):
    with pytest.raises(ConfigurationError):
        kernel_pca(data, "linear", 1)


def test_degenerate_nystroem_raises():
    with pytest.raises(NumericalInstabilityError):
        kernel_pca(
            np.zeros((3, 5)), "linear", 1, nystroem_method=True, rank=2, sampling="ordered"
        )


def test_partially_degenerate_nystroem_reports_dropped_directions(uniform_data):
    data = uniform_data.copy()
    data[:, 0] = 0.0
    result = KernelPCA(
        "linear", new_dimensionality=1, nystroem_method=True, rank=2, sampling="ordered"
    ).apply(data)
    assert result.dropped_directions == 1
    assert np.all(np.isfinite(result.output))


# ------------------------------------------------------------------
# Lifecycle and summary
# ------------------------------------------------------------------


def test_instances_are_single_use(uniform_data):
    kpca = KernelPCA("gaussian", new_dimensionality=2)
    assert kpca.state is KernelPCAState.UNCONFIGURED
    kpca.apply(uniform_data)
    assert kpca.state is KernelPCAState.DONE
    with pytest.raises(ConfigurationError):
        kpca.apply(uniform_data)


def test_failed_validation_leaves_instance_unconfigured(uniform_data):
    kpca = KernelPCA("gaussian", new_dimensionality=9)
    with pytest.raises(InvalidDimensionalityError):
        kpca.apply(uniform_data)
    assert kpca.state is KernelPCAState.UNCONFIGURED


def test_summary(cloud_data):
    result = KernelPCA(
        "gaussian",
        new_dimensionality=2,
        center=True,
        nystroem_method=True,
        rank=4,
        sampling="random",
        random_state=1,
        bandwidth=0.5,
    ).apply(cloud_data)
    summary = result.summary
    assert summary["kernel"] == "gaussian"
    assert summary["kernel_params"] == {"bandwidth": 0.5}
    assert summary["new_dimensionality"] == 2
    assert summary["center"] is True
    assert summary["nystroem_method"] is True
    assert summary["rank"] == 4
    assert summary["sampling"] == "random"
    assert len(summary["eigenvalues"]) == 2
    assert summary["dropped_directions"] == 0
    assert sum(summary["eigenvalue_ratio"]) == pytest.approx(1.0)


def test_summary_without_nystroem(uniform_data):
    summary = KernelPCA("linear", new_dimensionality=2).apply(uniform_data).summary
    assert summary["rank"] is None
    assert summary["sampling"] is None


# ------------------------------------------------------------------
# Reducer adapter
# ------------------------------------------------------------------


def test_reducer_transposes_rows(cloud_data):
    features = cloud_data.T
    reducer = KernelPCAReducer(n_components=2, kernel="gaussian", kernel_params={"bandwidth": 2.0})
    embedding, summary = reducer.fit_transform(features)
    assert embedding.shape == (20, 2)
    assert_allclose(embedding, _reduce(cloud_data, "gaussian", 2, bandwidth=2.0).T)
    assert summary["kernel"] == "gaussian"
    assert "selected_indices" not in summary


def test_reducer_reports_selected_indices(cloud_data):
    reducer = KernelPCAReducer(
        n_components=2,
        kernel="laplacian",
        nystroem_method=True,
        rank=3,
        sampling="ordered",
    )
    embedding, summary = reducer.fit_transform(cloud_data.T)
    assert embedding.shape == (20, 2)
    assert summary["selected_indices"] == [0, 1, 2]
