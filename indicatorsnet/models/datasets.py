from typing import Iterable, Iterator
import geopandas as gpd
from pydantic import BaseModel, InstanceOf
from ..common.errors import DatasetNotFound
from ..common.values import to_feature_id


class Dataset(BaseModel):
    """Base indicator or georesource addressed by id and by name."""

    id: str | int
    name: str
    data: InstanceOf[gpd.GeoDataFrame]


class Datasets:
    """Collection of datasets resolving both ids and names.

    Parameters
    ----------
    datasets : iterable of Dataset or mapping of str to GeoDataFrame, optional
        Datasets to register. A mapping registers each frame with its key
        used as both id and name.

    Raises
    ------
    ValueError
        If two datasets share an id or a name.
    """

    def __init__(self, datasets: Iterable[Dataset] | dict[str, gpd.GeoDataFrame] | None = None):
        if datasets is None:
            datasets = []
        elif isinstance(datasets, dict):
            datasets = [Dataset(id=key, name=key, data=data) for key, data in datasets.items()]
        self._by_id: dict[str, Dataset] = {}
        self._by_name: dict[str, Dataset] = {}
        for dataset in datasets:
            self.add(dataset)

    def add(self, dataset: Dataset):
        dataset_id = to_feature_id(dataset.id)
        if dataset_id in self._by_id:
            raise ValueError(f"Dataset id {dataset_id!r} is not unique")
        if dataset.name in self._by_name:
            raise ValueError(f"Dataset name {dataset.name!r} is not unique")
        self._by_id[dataset_id] = dataset
        self._by_name[dataset.name] = dataset

    def resolve(self, key: str) -> Dataset:
        """Find a dataset by id, then by name.

        Raises
        ------
        DatasetNotFound
            If neither an id nor a name matches *key*.
        """

        key = to_feature_id(key)
        if key in self._by_id:
            return self._by_id[key]
        if key in self._by_name:
            return self._by_name[key]
        raise DatasetNotFound(key, self._by_name.keys())

    def __getitem__(self, key: str) -> gpd.GeoDataFrame:
        return self.resolve(key).data

    def __contains__(self, key: str) -> bool:
        try:
            self.resolve(key)
        except DatasetNotFound:
            return False
        return True

    def __iter__(self) -> Iterator[Dataset]:
        return iter(self._by_id.values())

    def __len__(self) -> int:
        return len(self._by_id)

    def map(self, func) -> "Datasets":
        """New collection with *func* applied to every dataset frame."""
        return Datasets([Dataset(id=d.id, name=d.name, data=func(d.data)) for d in self])
