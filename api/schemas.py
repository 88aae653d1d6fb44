from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel


class FilterCriteriaModel(BaseModel):
    date_from: Optional[str] = None
    date_to: Optional[str] = None
    category: Optional[str] = "__all__"


class MetaColumnsResponse(BaseModel):
    columns: List[str]
    roles: Dict[str, Optional[str]]
    schema_kinds: Dict[str, str]
    row_count: int


class MetaListResponse(BaseModel):
    values: List[str]
