# src/models/base.py
from typing import Any, Dict
from pydantic import BaseModel, ConfigDict


class ApiModel(BaseModel):
    """Base de los payloads de entrada: campos desconocidos se rechazan."""

    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        str_strip_whitespace=True,
        use_enum_values=True,
    )

    def changes(self) -> Dict[str, Any]:
        """Sólo los campos enviados por el cliente (para updates parciales)."""
        return self.model_dump(exclude_unset=True, by_alias=True)
