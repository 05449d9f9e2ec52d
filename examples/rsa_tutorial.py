"""
Simulated RSA tutorial with rsasim.

This example demonstrates:
1. Generating a dataset with injected IT-like clusters
2. Decoding categories with leave-one-run-out cross-validation
3. Computing the observed RDM and the categorical model RDMs
4. Regressing the observed RDM onto the models for IT and V1
5. Checking how injection strength affects recovered similarity
"""

import logging

import numpy as np

import rsasim
from rsasim import rsa
from rsasim.dataset import ClusterSpec, apply_clustering, generate_base_dataset


def print_rdm(rdm, labels):
    """Print an RDM as a small text table."""
    width = max(len(str(label)) for label in labels)
    for label, row in zip(labels, rdm):
        values = " ".join(f"{v:5.2f}" for v in row)
        print(f"  {str(label):>{width}}  {values}")


def example_1_it_dataset():
    """Example 1: Inspect a clustered IT dataset."""
    print("\n=== Example 1: Clustered IT Dataset ===")

    ds, clusters = rsasim.generate_clustered_dataset(
        n_categories=8, n_subjects=1, n_runs=10, n_reps=1, sigma=0.6, seed=42, roi="IT"
    )

    print(f"Samples: {ds.samples.shape} (observations x features)")
    print(f"Runs: {len(np.unique(ds.chunks))}, categories: {ds.n_targets}")
    print("Injected clusters:")
    for cluster in clusters:
        print(f"  {cluster.description:<12} targets={cluster.targets} strength={cluster.sigma_level}")

    return ds


def example_2_decoding(ds):
    """Example 2: Cross-validated classification."""
    print("\n=== Example 2: Decoding ===")

    predicted, accuracy = rsasim.classify_and_cross_validate(ds, classifier="lda")
    chance = rsasim.decoding.chance_level(ds.n_targets)
    print(f"LDA accuracy: {accuracy * 100:.2f}% (chance level: {chance * 100:.2f}%)")

    cm = rsasim.decoding.confusion_matrix(ds.targets, predicted, ds.n_targets)
    print("Confusion matrix (rows: true, columns: predicted):")
    print(cm)

    return accuracy


def example_3_observed_and_models(ds):
    """Example 3: Observed RDM, model RDMs and regression."""
    print("\n=== Example 3: Observed RDM and Models ===")

    observed, labels = rsa.compute_observed_rdm(ds, metric="correlation", center_data=True)
    print("Observed RDM (1 - correlation of centered condition means):")
    print_rdm(observed, labels)

    models = rsa.generate_model_rdms(ds.n_targets)
    for model in models:
        print(f"\nModel '{model.description}':")
        print_rdm(model.rdm, labels)

    print("\nSpearman agreement with the observed RDM:")
    for model in models:
        rho = rsa.compare_rdms(observed, model.rdm, method="spearman")
        print(f"  {model.description:<24} {rho:6.3f}")

    result = rsa.rsa_regression(observed, models, method="ols")
    print("\nStandardized betas:")
    for description, beta in result.as_dict().items():
        print(f"  {description:<24} {beta:6.3f}")
    print(f"Best model: {result.best_model()}")

    return result


def example_4_roi_comparison():
    """Example 4: Full pipeline for every ROI."""
    print("\n=== Example 4: IT vs. V1 ===")

    config = rsasim.SimulationConfig(seed=42, n_features=300)
    results = rsasim.run_all_rois(config)

    for roi, result in results.items():
        print(
            f"{roi}: accuracy {result.accuracy * 100:.1f}%, "
            f"best model '{result.regression.best_model()}'"
        )

    return results


def example_5_strength_sweep():
    """Example 5: Within-cluster dissimilarity as injection strength grows."""
    print("\n=== Example 5: Injection Strength Sweep ===")

    for strength in [0.0, 0.2, 0.4, 0.6, 0.8, 1.0]:
        ds = generate_base_dataset(8, n_runs=10, sigma=0.6, seed=0, n_features=200)
        apply_clustering(ds, [ClusterSpec((1, 2, 3, 4), strength, "Animate")], random_state=0)
        observed, _ = rsa.compute_observed_rdm(ds, center_data=False)
        within = rsa.rdm_to_vector(observed[:4, :4]).mean()
        across = observed[:4, 4:].mean()
        print(f"  strength {strength:.1f}: within {within:.3f}, across {across:.3f}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(name)s - %(levelname)s - %(message)s")

    print("rsasim RSA Tutorial")
    print("===================")

    ds = example_1_it_dataset()
    example_2_decoding(ds)
    example_3_observed_and_models(ds)
    example_4_roi_comparison()
    example_5_strength_sweep()

    print("\nAll examples completed!")
