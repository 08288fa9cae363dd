import dataclasses
import json
from datetime import date, datetime
from enum import Enum


class EnhancedJSONEncoder(json.JSONEncoder):
    def default(self, o):
        if dataclasses.is_dataclass(o) and not isinstance(o, type):
            return dataclasses.asdict(o)
        # Handle Pydantic models
        if hasattr(o, "model_dump"):
            return o.model_dump(mode="json")
        if isinstance(o, Enum):
            return o.value
        if isinstance(o, (datetime, date)):
            return o.isoformat()
        return super().default(o)


def dumps(data) -> str:
    return json.dumps(data, cls=EnhancedJSONEncoder)
