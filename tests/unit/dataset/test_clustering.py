"""
Tests for cluster injection and clustered dataset generation.
"""

import numpy as np
import pytest
from scipy.spatial.distance import pdist

from rsasim.dataset import (
    ClusterSpec,
    ClusteringScheme,
    Dataset,
    IT_SCHEME,
    TARGET_TO_LABEL,
    V1_SCHEME,
    apply_clustering,
    assign_labels,
    cluster_similar_classes,
    generate_base_dataset,
    generate_clustered_dataset,
)
from rsasim.errors import InvalidClusterSpec, UnknownTargetId


class TestClusterSimilarClasses:
    """Test blending of selected classes with a shared pattern."""

    def test_zero_sigma_is_identity(self, base_dataset):
        """Test that sigma_level=0 leaves the dataset bit-identical."""
        before = base_dataset.copy()

        result = cluster_similar_classes(base_dataset, [1, 2, 3], 0.0, random_state=0)

        assert result is base_dataset
        assert np.array_equal(result.samples, before.samples)
        assert np.array_equal(result.targets, before.targets)
        assert np.array_equal(result.chunks, before.chunks)

    def test_full_sigma_replaces_with_pattern(self, base_dataset):
        """Test that sigma_level=1 sets selected features exactly to the pattern."""
        n_features = base_dataset.n_features
        scale = np.std(base_dataset.samples, ddof=1)

        # Replay the generator to recover the selected features and pattern
        replay = np.random.RandomState(7)
        cols = replay.permutation(n_features)[:n_features]
        pattern = replay.standard_normal(n_features) * scale

        cluster_similar_classes(base_dataset, [2, 5], 1.0, random_state=np.random.RandomState(7))

        affected = base_dataset.samples[np.isin(base_dataset.targets, [2, 5])]
        for row in affected:
            assert np.array_equal(row[cols], pattern[cols])

    def test_full_sigma_makes_affected_rows_identical(self, base_dataset):
        """Test that no residual of the original samples survives at sigma_level=1."""
        cluster_similar_classes(base_dataset, [1, 4], 1.0, random_state=3)

        affected = base_dataset.samples[np.isin(base_dataset.targets, [1, 4])]
        assert np.all(affected == affected[0])

    def test_number_of_modified_features(self, base_dataset):
        """Test that round(sigma_level * n_features) features carry the pattern."""
        before = base_dataset.copy()

        cluster_similar_classes(base_dataset, [6], 0.5, random_state=0)

        mask = base_dataset.targets == 6
        # Unselected features are only scaled by (1 - sigma_level)
        added = base_dataset.samples[mask] - 0.5 * before.samples[mask]
        n_changed = np.sum(added != 0, axis=1)
        assert np.all(n_changed == 25)

    def test_feature_count_is_rounded(self):
        """Test that the number of pattern features is rounded to the nearest integer."""
        ds = generate_base_dataset(4, n_runs=3, seed=0, n_features=10)
        before = ds.copy()

        # round(0.94 * 10) = 9 features get the pattern
        cluster_similar_classes(ds, [2], 0.94, random_state=0)

        mask = ds.targets == 2
        residual = ds.samples[mask] - (1 - 0.94) * before.samples[mask]
        assert np.all(np.sum(np.isclose(residual, 0.0), axis=1) == 1)

    def test_only_affected_rows_change(self, base_dataset):
        """Test that other targets and sample attributes are untouched."""
        before = base_dataset.copy()

        cluster_similar_classes(base_dataset, [1, 2], 0.6, random_state=0)

        unaffected = ~np.isin(base_dataset.targets, [1, 2])
        assert np.array_equal(base_dataset.samples[unaffected], before.samples[unaffected])
        assert not np.array_equal(base_dataset.samples[~unaffected], before.samples[~unaffected])
        assert np.array_equal(base_dataset.targets, before.targets)
        assert np.array_equal(base_dataset.chunks, before.chunks)
        assert base_dataset.n_features == before.n_features

    def test_monotonic_similarity(self, base_dataset):
        """Test that a stronger sigma_level gives smaller pairwise distances."""
        targets = [1, 2, 3, 4]
        mean_distances = []
        for sigma_level in [0.0, 0.1, 0.3, 0.5, 0.7, 0.9, 1.0]:
            ds = base_dataset.copy()
            cluster_similar_classes(ds, targets, sigma_level, random_state=np.random.RandomState(11))
            affected = ds.samples[np.isin(ds.targets, targets)]
            mean_distances.append(np.mean(pdist(affected)))

        assert np.all(np.diff(mean_distances) < 0)
        assert np.isclose(mean_distances[-1], 0.0)

    def test_reproducible_with_seed(self, base_dataset):
        """Test that the same random state gives the same injection."""
        ds1 = base_dataset.copy()
        ds2 = base_dataset.copy()

        cluster_similar_classes(ds1, [3, 4], 0.5, random_state=99)
        cluster_similar_classes(ds2, [3, 4], 0.5, random_state=99)

        assert np.array_equal(ds1.samples, ds2.samples)

    def test_pattern_scales_with_data(self, base_dataset):
        """Test that the injected pattern follows the amplitude of the data."""
        scaled = base_dataset.copy()
        scaled.samples *= 1000.0

        cluster_similar_classes(base_dataset, [1, 2], 0.8, random_state=5)
        cluster_similar_classes(scaled, [1, 2], 0.8, random_state=5)

        assert np.allclose(scaled.samples, base_dataset.samples * 1000.0)

    def test_empty_target_set(self, base_dataset):
        """Test that an empty target set is rejected."""
        with pytest.raises(InvalidClusterSpec, match="empty"):
            cluster_similar_classes(base_dataset, [], 0.5)

    def test_out_of_range_targets(self, base_dataset):
        """Test that target ids outside 1..C are rejected."""
        with pytest.raises(InvalidClusterSpec, match="outside"):
            cluster_similar_classes(base_dataset, [0, 1], 0.5)
        with pytest.raises(InvalidClusterSpec, match="outside"):
            cluster_similar_classes(base_dataset, [9], 0.5)

    def test_invalid_sigma_level(self, base_dataset):
        """Test that sigma_level outside [0, 1] is rejected."""
        with pytest.raises(InvalidClusterSpec, match="sigma_level"):
            cluster_similar_classes(base_dataset, [1], 1.5)

    def test_non_integer_targets(self, base_dataset):
        """Test that fractional target ids are rejected, not truncated."""
        before = base_dataset.copy()

        with pytest.raises(InvalidClusterSpec, match="must be integers"):
            cluster_similar_classes(base_dataset, [1.7], 0.5, random_state=0)
        assert np.array_equal(base_dataset.samples, before.samples)

    def test_integral_floats_accepted(self, base_dataset):
        """Test that float ids with integral values select the same targets."""
        ds = base_dataset.copy()

        cluster_similar_classes(base_dataset, [1, 2], 0.5, random_state=0)
        cluster_similar_classes(ds, [1.0, 2.0], 0.5, random_state=0)

        assert np.array_equal(base_dataset.samples, ds.samples)

    def test_single_value_dataset(self):
        """Test that a one-value dataset gets a zero pattern instead of NaN."""
        ds = Dataset([[1.0]], [1])

        cluster_similar_classes(ds, [1], 1.0, random_state=0)

        assert np.all(np.isfinite(ds.samples))
        assert np.array_equal(ds.samples, [[0.0]])

    def test_no_matching_observations(self, base_dataset):
        """Test that a target set without observations is rejected."""
        ds = base_dataset.select(base_dataset.targets != 3)

        with pytest.raises(InvalidClusterSpec, match="no observations"):
            cluster_similar_classes(ds, [3], 0.5)


class TestApplyClustering:
    """Test sequential application of clustering schemes."""

    def test_matches_sequential_calls(self, base_dataset):
        """Test that apply_clustering threads one generator through every cluster."""
        manual = base_dataset.copy()
        rng = np.random.RandomState(21)
        for cluster in IT_SCHEME:
            cluster_similar_classes(manual, cluster.targets, cluster.sigma_level, random_state=rng)

        apply_clustering(base_dataset, IT_SCHEME, random_state=21)

        assert np.array_equal(base_dataset.samples, manual.samples)

    def test_order_matters(self, base_dataset):
        """Test that overlapping clusters give different results in different orders."""
        broad = ClusterSpec((1, 2, 3, 4), 0.7, "Animate")
        narrow = ClusterSpec((1, 2), 0.2, "Humans")
        ds1 = base_dataset.copy()
        ds2 = base_dataset.copy()

        apply_clustering(ds1, [broad, narrow], random_state=0)
        apply_clustering(ds2, [narrow, broad], random_state=0)

        assert not np.allclose(ds1.samples, ds2.samples)

    def test_nested_clusters_are_more_similar(self, large_dataset):
        """Test that a nested cluster ends up closer than its parent cluster."""
        scheme = [
            ClusterSpec((1, 2, 3, 4), 0.5, "Animate"),
            ClusterSpec((1, 2), 0.8, "Humans"),
        ]
        apply_clustering(large_dataset, scheme, random_state=0)
        means = large_dataset.mean_by_target().samples

        humans = np.linalg.norm(means[0] - means[1])
        human_animal = np.linalg.norm(means[0] - means[2])
        assert humans < human_animal

    def test_zero_strength_clusters_leave_data(self, base_dataset):
        """Test that a scheme of zero-strength clusters changes nothing."""
        before = base_dataset.copy()
        scheme = ClusteringScheme("flat", (ClusterSpec((1, 2), 0.0), ClusterSpec((3,), 0.0)))

        apply_clustering(base_dataset, scheme, random_state=0)

        assert np.array_equal(base_dataset.samples, before.samples)


class TestAssignLabels:
    """Test target to label mapping."""

    def test_labels_follow_targets(self, base_dataset):
        """Test that every sample gets the label of its target."""
        assign_labels(base_dataset)

        for target, label in zip(base_dataset.targets, base_dataset.labels):
            assert label == TARGET_TO_LABEL[target]

    def test_unknown_target_id(self, base_dataset):
        """Test that a missing mapping entry raises UnknownTargetId."""
        mapping = {t: f"class {t}" for t in range(1, 8)}

        with pytest.raises(UnknownTargetId, match="target id 8") as exc_info:
            assign_labels(base_dataset, mapping)
        assert exc_info.value.target_id == 8
        assert base_dataset.labels is None

    def test_mapping_is_immutable(self):
        """Test that the default mapping cannot be modified."""
        with pytest.raises(TypeError):
            TARGET_TO_LABEL[9] = "robot"


class TestGenerateClusteredDataset:
    """Test ROI dataset generation."""

    def test_it_dataset(self):
        """Test the IT scheme with tutorial parameters."""
        ds, clusters = generate_clustered_dataset(8, 1, 10, 1, 0.6, 42, "IT")

        assert ds.samples.shape == (80, 30)
        assert [c.description for c in clusters] == [
            "Animate",
            "Humans",
            "Animals",
            "Natural",
            "Artificial",
        ]
        assert ds.labels[0] == "human face"
        assert ds.labels[7] == "artificial spiky"

    def test_v1_dataset(self):
        """Test the V1 scheme."""
        ds, clusters = generate_clustered_dataset(8, 1, 4, 1, 0.6, 0, "V1", n_features=20)

        assert [c.description for c in clusters] == ["Round", "Spiky"]
        assert [c.sigma_level for c in clusters] == [0.4, 0.4]
        assert ds.n_features == 20

    def test_reproducible(self):
        """Test that a fixed seed reproduces the dataset exactly."""
        ds1, _ = generate_clustered_dataset(8, 1, 5, 2, 0.6, 7, "IT")
        ds2, _ = generate_clustered_dataset(8, 1, 5, 2, 0.6, 7, "IT")

        assert np.array_equal(ds1.samples, ds2.samples)

    def test_base_and_injections_use_separate_streams(self):
        """Test that an integer seed drives the base data and injections independently."""
        ds, _ = generate_clustered_dataset(8, 1, 10, 1, 0.6, 42, "IT")

        expected = generate_base_dataset(8, n_subjects=1, n_runs=10, n_reps=1, sigma=0.6, seed=42)
        apply_clustering(expected, IT_SCHEME, random_state=np.random.RandomState(42))

        assert np.array_equal(ds.samples, expected.samples)

    def test_injections_do_not_depend_on_run_count(self):
        """Test that the run count does not change which features are clustered."""
        scheme = ClusteringScheme("pair", (ClusterSpec((1, 2), 1.0, "pair"),))

        short, _ = generate_clustered_dataset(4, 1, 2, 1, 0.6, 3, scheme, n_features=12)
        long, _ = generate_clustered_dataset(4, 1, 6, 1, 0.6, 3, scheme, n_features=12)

        # At full strength every clustered row is the injected pattern, whose
        # scale follows the data but whose direction comes from the seed
        short_row = short.samples[short.targets == 1][0]
        long_row = long.samples[long.targets == 1][0]
        assert np.allclose(
            short_row / np.linalg.norm(short_row), long_row / np.linalg.norm(long_row)
        )

    def test_shared_random_state(self):
        """Test that a RandomState instance is consumed by both steps in turn."""
        ds, _ = generate_clustered_dataset(8, 1, 4, 1, 0.6, np.random.RandomState(5), "V1")

        rng = np.random.RandomState(5)
        expected = generate_base_dataset(8, n_runs=4, sigma=0.6, seed=rng)
        apply_clustering(expected, V1_SCHEME, random_state=rng)

        assert np.array_equal(ds.samples, expected.samples)

    def test_custom_scheme(self):
        """Test that an explicit ClusteringScheme is accepted."""
        scheme = ClusteringScheme("pairs", (ClusterSpec((1, 2), 0.9, "first pair"),))
        ds, clusters = generate_clustered_dataset(4, 1, 3, 1, 0.6, 0, scheme, target_to_label={1: "a", 2: "b", 3: "c", 4: "d"})

        assert clusters == [ClusterSpec((1, 2), 0.9, "first pair")]
        assert set(ds.labels) == {"a", "b", "c", "d"}

    def test_unknown_roi(self):
        """Test that an unregistered ROI is rejected."""
        with pytest.raises(ValueError, match="Unknown ROI"):
            generate_clustered_dataset(8, 1, 2, 1, 0.6, 0, "PFC")

    def test_scheme_exceeds_categories(self):
        """Test that a scheme referring to missing categories is rejected."""
        with pytest.raises(InvalidClusterSpec, match="outside 1..4"):
            generate_clustered_dataset(4, 1, 2, 1, 0.6, 0, "IT")


class TestClusterSpec:
    """Test ClusterSpec validation."""

    def test_targets_normalized(self):
        """Test that targets become a tuple of ints."""
        spec = ClusterSpec(np.array([3, 1]), 0.5, "x")

        assert spec.targets == (3, 1)
        assert all(isinstance(t, int) for t in spec.targets)

    def test_empty_targets(self):
        """Test that an empty target set is rejected."""
        with pytest.raises(InvalidClusterSpec):
            ClusterSpec((), 0.5)

    def test_non_integer_targets(self):
        """Test that fractional target ids are rejected."""
        with pytest.raises(InvalidClusterSpec, match="must be integers"):
            ClusterSpec((1, 2.5), 0.5)

    def test_sigma_out_of_range(self):
        """Test that sigma_level outside [0, 1] is rejected."""
        with pytest.raises(InvalidClusterSpec):
            ClusterSpec((1,), -0.1)
