from pydantic import AliasChoices, BaseModel, BeforeValidator, Field
from typing import Annotated, List

from .fields import Bytes, parse_list


class Log(BaseModel):
    model_config = {
        "arbitrary_types_allowed": False,
        "populate_by_name": True,
    }

    address: str = Field(default="", validation_alias=AliasChoices("Address", "address"))
    topics: Annotated[List[Bytes], BeforeValidator(parse_list)] = Field(
        default_factory=list,
        validation_alias=AliasChoices("Topics", "topics"),
    )
    data: Bytes = Field(default=b"", validation_alias=AliasChoices("data", "Data"))
