"""
app/domain package marker.
"""

from app.domain.census_rows import DATASET_NAMES, TOPIC_DATASETS, DatasetBundle

__all__ = [
    "DATASET_NAMES",
    "DatasetBundle",
    "TOPIC_DATASETS",
]
