from typing import Any, Mapping, Optional, Type, TypeVar, TYPE_CHECKING

from beanie import Document
from pydantic import BaseModel as PydanticBaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from docbase.models.handler import ModelHandler

M = TypeVar("M", bound="Model")


class MetaModel(PydanticBaseModel):
    """Audit metadata embedded in every document under the `meta` key"""
    # Tenant scope (e.g. group name)
    namespace: str = ""
    # Merchant or branch the record belongs to
    merchant_id: str = ""
    # Operator that created the record
    founder: str = ""
    # Operator that last changed the record
    updater: str = ""
    # Account owning the record
    account_id: str = ""
    created_at: str = ""
    updated_at: str = ""
    # Epoch seconds
    created_time: int = 0
    updated_time: int = 0
    status: bool = False
    # Deleted records are flagged, never physically removed
    deleted: bool = False
    # Lowest role level allowed to read the record
    access_level: int = Field(default=0, ge=0)


class MetaContext(PydanticBaseModel):
    """Per-operation binding of request values, database handle and collection name"""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    values: Mapping[str, Any] = Field(default_factory=dict)
    database: Any = None
    collection: str


class Model(Document):
    """Base document for all entities that carry audit metadata.

    Domain types subclass it and name their collection in Settings:

        class Demo(Model):
            name: str

            class Settings:
                name = "demo"

        handler = Demo.handler()
        demo_id = await handler.create(Demo(name="x"))
    """
    meta: MetaModel = Field(default_factory=MetaModel)

    @classmethod
    def handler(
        cls: Type[M],
        context: Optional[Mapping[str, Any]] = None,
    ) -> "ModelHandler[M]":
        """Bind a persistence handler for this document type to the given request context"""
        from docbase.models.handler import ModelHandler

        return ModelHandler(cls, context=context)


def copy_meta(src: Model, dest: Model) -> None:
    """Copy the audit metadata of src onto dest"""
    dest.meta = src.meta.model_copy()


def not_deleted(filter_query: Optional[Mapping[str, Any]] = None) -> dict:
    """Restrict a filter to documents that have not been soft deleted"""
    result_filter = dict(filter_query) if filter_query else {}
    if "meta.deleted" not in result_filter:
        result_filter["meta.deleted"] = {"$ne": True}
    return result_filter
