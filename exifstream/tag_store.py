# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Tag store

Copyright 2025 DNAi inc.
"""

from typing import Dict, Iterator, List, Optional

from exifstream.exceptions import ReadOnlyStoreError
from exifstream.tags import Tag


class TagStore:
    """
    Decoded tags keyed by tag id.
    
    Inserting a tag whose id is already present replaces the previous
    one. Once the store is handed to a consumer it is frozen and further
    inserts raise ReadOnlyStoreError.
    
    The store is not thread-safe; a walk that decodes in parallel must
    insert from a single owner.
    
    Example:
        >>> store = read('photo.jpg')
        >>> orientation = store.get(TAG_ORIENTATION)
        >>> if orientation is not None:
        ...     print(orientation.int_value)
    """
    
    def __init__(self):
        self._tags: Dict[int, Tag] = {}
        self._frozen = False
    
    def insert(self, tag: Tag) -> None:
        """
        Add a tag, replacing any tag with the same id.
        
        Raises:
            ReadOnlyStoreError: If the store is frozen
        """
        if self._frozen:
            raise ReadOnlyStoreError("Tag store is read-only")
        self._tags[tag.tag_id] = tag
    
    def get(self, tag_id: int, default: Optional[Tag] = None) -> Optional[Tag]:
        return self._tags.get(tag_id, default)
    
    def freeze(self) -> None:
        self._frozen = True
    
    @property
    def frozen(self) -> bool:
        return self._frozen
    
    def tag_ids(self) -> List[int]:
        return sorted(self._tags)
    
    def as_dict(self) -> Dict[str, str]:
        """Map each tag label to its text value, ordered by tag id."""
        return {self._tags[tag_id].label: self._tags[tag_id].text_value for tag_id in self.tag_ids()}
    
    def __getitem__(self, tag_id: int) -> Tag:
        return self._tags[tag_id]
    
    def __contains__(self, tag_id: object) -> bool:
        return tag_id in self._tags
    
    def __len__(self) -> int:
        return len(self._tags)
    
    def __iter__(self) -> Iterator[Tag]:
        return iter(list(self._tags.values()))
    
    def __repr__(self) -> str:
        return f"TagStore({len(self._tags)} tags)"
