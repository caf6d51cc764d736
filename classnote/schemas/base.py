from typing import Annotated
from pydantic import BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel

# Required text: surrounding whitespace trimmed, must not be empty afterwards
NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python. ORM rows validate directly."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
