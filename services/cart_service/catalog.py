import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from pydantic import TypeAdapter, ValidationError

from services.cart_service.models import Item

logger = logging.getLogger(__name__)

DEFAULT_ITEMS_PATH = Path(__file__).parent / "data" / "items.json"

_items_adapter = TypeAdapter(List[Item])


class Catalog:
    """Read-only item lookup, loaded once at startup."""

    def __init__(self, items: Iterable[Item] = ()):
        self._items: Dict[str, Item] = {item.item_id: item for item in items}

    @classmethod
    def from_file(cls, path: Union[str, Path] = DEFAULT_ITEMS_PATH) -> "Catalog":
        """Load items from a JSON array. Any failure yields an empty catalog."""
        try:
            raw = Path(path).read_text(encoding="utf-8")
            items = _items_adapter.validate_python(json.loads(raw))
        except (OSError, ValueError, ValidationError) as e:
            logger.error(f"Failed to load items from {path}: {e}")
            return cls()

        logger.info(f"Loaded {len(items)} catalog items from {path}")
        return cls(items)

    def get_item(self, item_id: str) -> Optional[Item]:
        return self._items.get(item_id)

    def exists(self, item_id: str) -> bool:
        return item_id in self._items

    def list_all(self) -> List[Item]:
        return list(self._items.values())

    def validate_item(self, item_id) -> Optional[str]:
        """Return an error message if item_id is not a known catalog ID, else None."""
        if not item_id or not isinstance(item_id, str):
            return "Item ID is required and must be a string"

        if not self.exists(item_id):
            return f"Item with ID {item_id} does not exist"

        return None

    def __len__(self) -> int:
        return len(self._items)
