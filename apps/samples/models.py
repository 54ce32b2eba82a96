from typing import Optional
from sqlmodel import SQLModel, Field


class SampleBase(SQLModel):
    name: str = Field(max_length=100)


class Sample(SampleBase, table=True):
    # Singular table name, no pluralizing
    __tablename__ = "sample"
    id: Optional[int] = Field(default=None, primary_key=True)


class SampleCreate(SampleBase):
    """Request body for create/update; validates the name length."""
    pass
