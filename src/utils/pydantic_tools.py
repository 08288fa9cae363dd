from typing import Any

from pydantic import BaseModel, ConfigDict


class BaseModelWithMethods(BaseModel):
    """Base model with dict/json helpers shared by every response model."""

    def to_json(self, **kwargs: Any) -> str:
        return self.model_dump_json(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()


class FrozenModel(BaseModelWithMethods):
    """Immutable value object. Derived records are never mutated after creation."""

    model_config = ConfigDict(frozen=True)
