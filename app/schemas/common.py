from typing import Annotated
from fastapi import Path
from pydantic import Field

# Upper bound of a 32-bit INTEGER primary key; larger values can never match a row
MAX_ID = 2**31 - 1

# Primary key reference inside a request body
EntityId = Annotated[int, Field(ge=1, le=MAX_ID)]

# Primary key taken from the URL path
PathId = Annotated[int, Path(ge=1, le=MAX_ID)]


def is_valid_id(value: int) -> bool:
    return 1 <= value <= MAX_ID
