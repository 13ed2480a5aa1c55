from typing import Any, List
from pydantic import BaseModel, Field, field_validator

from data_aggregator.services.items import U32_MAX, decode_items

# Input schema for /data endpoint
class DataRequest(BaseModel):
    data: List[Any]  # Strings and unsigned 32-bit integers, in any order

    @field_validator('data')
    def classify_data_items(cls, v):
        # Turn each raw JSON value into an IntItem or TextItem, rejecting anything else
        return decode_items(v)

    model_config = {"extra": "ignore"}  # Unknown top-level keys are accepted and dropped

# Output schema for /data endpoint
class DataResponse(BaseModel):
    string_len: int = Field(ge=0, le=U32_MAX)  # Total length of all strings
    int_sum: int = Field(ge=0, le=U32_MAX)     # Sum of all integers
