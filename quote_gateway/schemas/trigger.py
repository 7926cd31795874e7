"""
Inbound trigger shapes.

Exactly one shape applies per invocation; ``kind`` discriminates them so the
core never inspects optional fields of a raw event.
"""
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class PathSymbolTrigger(BaseModel):
    kind: Literal["path"] = "path"
    symbol: str


class DelimitedListTrigger(BaseModel):
    kind: Literal["delimited"] = "delimited"
    symbols: str


class ExplicitListTrigger(BaseModel):
    kind: Literal["list"] = "list"
    symbols: list[str]


class DefaultTrigger(BaseModel):
    kind: Literal["default"] = "default"


Trigger = Annotated[
    Union[PathSymbolTrigger, DelimitedListTrigger, ExplicitListTrigger, DefaultTrigger],
    Field(discriminator="kind"),
]
