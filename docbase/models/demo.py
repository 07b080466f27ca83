from typing import Optional, List
from pydantic import BaseModel as PydanticBaseModel, Field
from docbase.models.base import Model, MetaModel


class DemoCreate(PydanticBaseModel):
    """Schema for creating a demo record"""
    name: str = Field(..., min_length=1, max_length=100)
    desc: Optional[str] = Field("", max_length=500)
    reference: int = Field(0, ge=0, description="Number of times the record is referenced")


class DemoUpdate(PydanticBaseModel):
    """Schema for updating a demo record"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    desc: Optional[str] = Field(None, max_length=500)
    reference: Optional[int] = Field(None, ge=0)


class Demo(Model):
    """Demo document model"""
    name: str
    desc: Optional[str] = ""
    reference: int = 0

    class Settings:
        name = "demo"
        indexes = [
            "name",
            "meta.merchant_id",
        ]


class DemoResponse(PydanticBaseModel):
    """Schema for demo responses"""
    id: str
    name: str
    desc: Optional[str] = ""
    reference: int = 0
    meta: MetaModel

    @classmethod
    def from_document(cls, demo: Demo) -> "DemoResponse":
        return cls(
            id=str(demo.id),
            name=demo.name,
            desc=demo.desc,
            reference=demo.reference,
            meta=demo.meta,
        )


class DemoList(PydanticBaseModel):
    """Schema for listing demo records"""
    total: int
    demos: List[DemoResponse] = []
