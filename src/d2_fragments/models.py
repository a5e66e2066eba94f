from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Category = Literal["component", "flow", "sequence", "grid", "mixed", "simple"]


class Block(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    code: str
    start_line: int = Field(alias="startLine", ge=0)
    end_line: int = Field(alias="endLine", ge=0)
    label: str | None = None
    children: list["Block"] | None = None


Block.model_rebuild()  # necessary for recursive types


class BlockMetadata(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    shape_count: int = Field(alias="shapeCount", ge=0)
    connection_count: int = Field(alias="connectionCount", ge=0)
    nesting_depth: int = Field(alias="nestingDepth", ge=0)
    category: Category
    has_styles: bool = Field(alias="hasStyles")
    has_classes: bool = Field(alias="hasClasses")
    top_identifiers: list[str] = Field(alias="topIdentifiers", max_length=5)


class LineSpan(BaseModel):
    """Character range of one document line, end exclusive of the newline."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_: int = Field(alias="from", ge=0)
    to: int = Field(ge=0)


class Diagnostic(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_: int = Field(alias="from", ge=0)
    to: int = Field(ge=0)
    severity: Literal["error"] = "error"
    message: str
