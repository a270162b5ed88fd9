from typing import Any

from pydantic import ConfigDict
from pydantic.main import BaseModel


class BaseModelWithMethods(BaseModel):
    """Base model with to_json/to_dict helpers, populated by field name or API alias."""

    model_config = ConfigDict(populate_by_name=True)

    def to_json(self, **kwargs: Any) -> str:
        """Serialize with the API's camelCase keys."""
        kwargs.setdefault("by_alias", True)
        kwargs.setdefault("exclude_none", True)
        return self.model_dump_json(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Plain dict with the API's camelCase keys."""
        return self.model_dump(by_alias=True, exclude_none=True)
