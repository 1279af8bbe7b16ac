"""
EventReader service - Single responsibility: Read EDM4eic ROOT files.

Extracts the inclusive kinematics and particle collections using uproot.
No orchestration logic, no state management.
"""

import logging
from typing import Iterator, Optional

import awkward as ak
import uproot

from domain.config import CollectionNames
from domain.errors import ResourceUnavailableError
from domain.events import EventBatch
from services import consts


class EventReader:
    """
    Service for reading event collections from podio ROOT files.

    Holds only configuration; every call opens its own file handle, so one
    reader can be shared across threads.
    """

    def __init__(
        self,
        collections: CollectionNames,
        tree_name: str = consts.DEFAULT_TREE_NAME,
        step_size: int = 10_000
    ):
        """
        Initialize reader.

        Args:
            collections: Names of the collections to read
            tree_name: Name of the event tree
            step_size: Number of entries read per batch
        """
        if step_size <= 0:
            raise ValueError(f"step_size must be positive, got {step_size}")

        self.collections = collections
        self.tree_name = tree_name
        self.step_size = step_size
        self.logger = logging.getLogger(self.__class__.__name__)

    def count_events(self, file_path: str) -> int:
        """
        Open a file and return the number of events in its tree.

        Raises:
            ResourceUnavailableError: If the file or tree cannot be opened
        """
        try:
            with uproot.open(file_path) as root_file:
                return self._get_tree(root_file, file_path).num_entries
        except ResourceUnavailableError:
            raise
        except Exception as e:
            raise ResourceUnavailableError(file_path, f"cannot open input ({e})") from e

    def iterate(self, file_path: str, max_events: Optional[int] = None) -> Iterator[EventBatch]:
        """
        Yield the events of a file in batches of ``step_size`` entries.

        Args:
            file_path: Path or URI to ROOT file
            max_events: Stop after this many events

        Yields:
            EventBatch objects in entry order
        """
        with uproot.open(file_path) as root_file:
            tree = self._get_tree(root_file, file_path)
            n_entries = tree.num_entries
            if max_events is not None:
                n_entries = min(n_entries, max_events)

            missing = self._find_missing_collections(tree)
            for name in missing:
                self.logger.warning(
                    f"Collection '{name}' not found in {file_path}; its events will be skipped"
                )

            for entry_start in range(0, n_entries, self.step_size):
                entry_stop = min(entry_start + self.step_size, n_entries)
                events = self._read_entries(tree, entry_start, entry_stop, missing)
                yield EventBatch(
                    events=events,
                    source=file_path,
                    entry_start=entry_start,
                    event_count=entry_stop - entry_start
                )

    def _get_tree(self, root_file, file_path: str):
        try:
            return root_file[self.tree_name]
        except KeyError:
            raise ResourceUnavailableError(file_path, f"tree '{self.tree_name}' not found")

    def _collection_leaves(self) -> dict[str, dict[str, str]]:
        leaves = {name: consts.KINEMATICS_LEAVES for name in self.collections.kinematics()}
        leaves.update({name: consts.PARTICLE_LEAVES for name in self.collections.particles()})
        return leaves

    def _find_missing_collections(self, tree) -> set[str]:
        missing = set()
        for collection, leaves in self._collection_leaves().items():
            for leaf in leaves.values():
                if self._find_branch(tree, f"{collection}.{leaf}") is None:
                    missing.add(collection)
                    break
        return missing

    def _read_entries(self, tree, entry_start: int, entry_stop: int, missing: set[str]) -> ak.Array:
        """Read one entry range into a record array with one field per collection."""
        collection_events = {}
        for collection, leaves in self._collection_leaves().items():
            if collection in missing:
                collection_events[collection] = ak.Array([[]] * (entry_stop - entry_start))
                continue
            collection_events[collection] = ak.zip({
                field: tree[f"{collection}.{leaf}"].array(entry_start=entry_start, entry_stop=entry_stop)
                for field, leaf in leaves.items()
            })
        return ak.zip(collection_events, depth_limit=1)

    @staticmethod
    def _find_branch(tree, branch_name: str):
        try:
            return tree[branch_name]
        except KeyError:
            return None
