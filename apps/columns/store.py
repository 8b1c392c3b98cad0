"""
Column / sort configuration store
=================================

Keeps the column layout of one list (which columns, in what order, under
which label, which one is sorted) and persists it through a storage port
after every change.

Storage port: any object with
    read(key)  -> str or None
    write(key, text)

Persisted layout (JSON array, one entry per column):
    [{"id": "email", "label": "Email", "visible": true, "order": 1,
      "sortDirection": "asc"}, ...]

Invariant: at most one column carries a sort direction.

Usage:
    store = ColumnConfigStore('contact-list-columns', DEFAULT_COLUMNS, SessionStorage(request.session))
    store.set_sort_direction('company', 'asc')
    store.visible_columns
"""

import json
import logging
from dataclasses import dataclass, replace

logger = logging.getLogger(__name__)

ASC = 'asc'
DESC = 'desc'
SORT_DIRECTIONS = (ASC, DESC)


@dataclass
class ColumnConfig:
    id: str
    label: str
    visible: bool = True
    order: int = 0
    sort_direction: str = None

    def to_dict(self):
        return {
            'id': self.id,
            'label': self.label,
            'visible': self.visible,
            'order': self.order,
            'sortDirection': self.sort_direction,
        }

    @classmethod
    def from_dict(cls, data):
        """
        Raises:
            KeyError / TypeError / ValueError: on a malformed entry
        """
        sort_direction = data.get('sortDirection')
        if sort_direction not in SORT_DIRECTIONS:
            sort_direction = None
        return cls(
            id=str(data['id']),
            label=str(data.get('label') or data['id']),
            visible=bool(data.get('visible', True)),
            order=int(data.get('order', 0)),
            sort_direction=sort_direction,
        )


class ColumnConfigStore:
    """
    Column layout of one list, reconciled against the list's default columns

    Args:
        storage_key (str): e.g. 'contact-list-columns'
        default_columns (list[ColumnConfig]): canonical columns, in catalog order
        storage: storage port (see module docstring)
    """

    def __init__(self, storage_key, default_columns, storage):
        self.storage_key = storage_key
        self.default_columns = [replace(column, sort_direction=None) for column in default_columns]
        self.storage = storage
        self._columns = self._load()

    # ==========================================================================
    # DERIVED VIEWS
    # ==========================================================================

    @property
    def columns(self):
        return list(self._columns)

    @property
    def visible_columns(self):
        return sorted((c for c in self._columns if c.visible), key=lambda c: c.order)

    @property
    def sorted_columns(self):
        return [c for c in self._columns if c.sort_direction]

    @property
    def active_sort(self):
        sorted_columns = self.sorted_columns
        return sorted_columns[0] if sorted_columns else None

    def get(self, column_id):
        for column in self._columns:
            if column.id == column_id:
                return column
        return None

    def is_default(self, column_id):
        return any(column.id == column_id for column in self.default_columns)

    def to_list(self):
        return [column.to_dict() for column in self._columns]

    # ==========================================================================
    # MUTATIONS
    # ==========================================================================

    def toggle_visibility(self, column_id):
        column = self.get(column_id)
        if column is None:
            return
        column.visible = not column.visible
        self._save()

    def rename(self, column_id, label):
        column = self.get(column_id)
        if column is None:
            return
        column.label = label
        self._save()

    def reorder(self, new_order):
        """
        Args:
            new_order: iterable of (column_id, order) pairs; columns not
                       mentioned keep their order
        """
        positions = dict(new_order)
        for column in self._columns:
            if column.id in positions:
                column.order = int(positions[column.id])
        self._columns.sort(key=lambda c: c.order)
        self._save()

    def set_sort_direction(self, column_id, direction):
        """
        Sort by one column. Any other column's direction is cleared.
        None clears this column only.
        """
        if direction is not None and direction not in SORT_DIRECTIONS:
            raise ValueError(f"Invalid sort direction: {direction}")

        column = self.get(column_id)
        if column is None:
            return

        if direction is not None:
            for other in self._columns:
                if other.id != column_id:
                    other.sort_direction = None
        column.sort_direction = direction
        self._save()

    def clear_sort(self):
        for column in self._columns:
            column.sort_direction = None
        self._save()

    def reset_to_defaults(self):
        self._columns = self._fresh_defaults()
        self._save()

    def add_column(self, column):
        if self.get(column.id) is not None:
            return
        last_order = max((c.order for c in self._columns), default=-1)
        self._columns.append(replace(column, order=last_order + 1, sort_direction=None))
        self._save()

    def remove_column(self, column_id):
        remaining = [c for c in self._columns if c.id != column_id]
        if len(remaining) == len(self._columns):
            return
        self._columns = remaining
        self._save()

    # ==========================================================================
    # PERSISTENCE
    # ==========================================================================

    def _fresh_defaults(self):
        return [
            replace(column, visible=True, order=index, sort_direction=None)
            for index, column in enumerate(self.default_columns)
        ]

    def _load(self):
        try:
            text = self.storage.read(self.storage_key)
            if not text:
                return self._fresh_defaults()
            data = json.loads(text)
            if not isinstance(data, list):
                raise ValueError("persisted column state is not a list")
            persisted = [ColumnConfig.from_dict(item) for item in data]
        except Exception as e:
            logger.warning(f"Could not load column state '{self.storage_key}', using defaults: {str(e)}")
            return self._fresh_defaults()

        return self._reconcile(persisted)

    def _reconcile(self, persisted):
        by_id = {column.id: column for column in persisted}
        merged = []

        for index, default in enumerate(self.default_columns):
            saved = by_id.get(default.id)
            if saved is None:
                merged.append(replace(default, visible=True, order=index, sort_direction=None))
            else:
                merged.append(replace(
                    default,
                    label=saved.label,
                    visible=saved.visible,
                    order=saved.order,
                    sort_direction=saved.sort_direction,
                ))

        default_ids = {column.id for column in self.default_columns}
        merged.extend(column for column in persisted if column.id not in default_ids)

        merged.sort(key=lambda c: c.order)

        # a hand-edited or stale state may carry several directions; keep the first
        seen_sort = False
        for column in merged:
            if column.sort_direction and seen_sort:
                column.sort_direction = None
            elif column.sort_direction:
                seen_sort = True

        return merged

    def _save(self):
        try:
            self.storage.write(self.storage_key, json.dumps(self.to_list()))
        except Exception as e:
            logger.error(f"Could not save column state '{self.storage_key}': {str(e)}")
