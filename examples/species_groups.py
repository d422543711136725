"""
Split a collection of animals into 4 groups of roughly equal size, keeping
every species together.

The animals are counted per species, the species are partitioned by their
counts, and the groups are joined back onto the individual animals. Finally
all three objectives are compared with two random groupings.

Run:
    python examples/species_groups.py
"""

import numpy as np
import pandas as pd

from multiway import PartitionParams, compare_objectives, partition_frame
from multiway.config import ModelParams

N_GROUPS = 4
SPECIES = ["Aardvark", "Albatross", "Alligator", "Alpaca", "Anole", "Ant", "Anteater"]
LABELS = [1, 2, 3, 4, 5]


def make_table(n_animals: int, seed: int = 324) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    return pd.DataFrame(
        {
            "species": rng.choice(SPECIES, size=n_animals),
            "id": [f"animal-{i:03d}" for i in range(n_animals)],
            "label": rng.choice(LABELS, size=n_animals),
        }
    )


def main() -> None:  # pragma: no cover - example script
    animals = make_table(100)

    # One row per species with its head count and a column per label
    by_species = (
        animals.groupby("species")
        .agg(n_individuals=("id", "size"))
        .join(pd.crosstab(animals["species"], animals["label"]).add_prefix("label_"))
        .reset_index()
    )
    label_columns = [c for c in by_species.columns if c.startswith("label_")]

    # Spread the labels evenly as a secondary goal
    params = PartitionParams(model=ModelParams(alpha=0.1, entropy_cuts=8))
    grouped, solution = partition_frame(
        by_species,
        "n_individuals",
        N_GROUPS,
        "min-range",
        label_columns=label_columns,
        config=params,
    )
    print(grouped[["species", "n_individuals", "Group"]])
    print("Group sizes:", solution.group_sums)

    partitioned = animals.merge(grouped[["species", "Group"]], on="species", how="left")
    print(partitioned.head())

    table = compare_objectives(by_species["n_individuals"].tolist(), N_GROUPS)
    print(table)
    assert (table.sum() == len(animals)).all()


if __name__ == "__main__":
    main()
