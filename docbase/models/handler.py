"""
Persistence handler shared by every audited document type.

A handler binds one document type to the identity values of the current
request and implements the CRUD operations as single driver calls, stamping
the audit metadata on the way in.
"""
import logging
from typing import Any, Generic, List, Mapping, Optional, Tuple, Type, TypeVar, Union

from beanie.exceptions import DocumentNotFound
from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BaseModel as PydanticBaseModel, Field

from docbase.database.connection import get_database
from docbase.models.base import MetaContext, Model
from docbase.utils.context import (
    ACCOUNT_KEY,
    MERCHANT_KEY,
    NAMESPACE_KEY,
    OPERATOR_KEY,
    get_request_context,
    get_value_from_ctx,
)
from docbase.utils.time_utils import now_stamp

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Model)

NIL_OBJECT_ID = ObjectId("000000000000000000000000")

# Keys owned by the handler that a partial update may not overwrite
_PROTECTED_FIELDS = {"_id", "id", "meta"}


def _is_protected(key: str) -> bool:
    """Protected fields, their dotted sub-paths and update operators"""
    return key.startswith("$") or key.split(".", 1)[0] in _PROTECTED_FIELDS


class ListOptions(PydanticBaseModel):
    """Pagination and ordering for list queries"""
    skip: Optional[int] = Field(default=None, ge=0)
    limit: Optional[int] = Field(default=None, ge=1)
    sort: Optional[List[Tuple[str, int]]] = None


def to_object_id(id: str) -> ObjectId:
    """Parse a hex identifier; malformed values map to the nil id, which matches nothing"""
    try:
        return ObjectId(id)
    except (InvalidId, TypeError):
        logger.warning(f"Invalid object id: {id!r}")
        return NIL_OBJECT_ID


class ModelHandler(Generic[T]):
    """CRUD operations for one document type, bound to a request context"""

    def __init__(self, document_model: Type[T], context: Optional[Mapping[str, Any]] = None):
        self.document_model = document_model
        self.context = MetaContext(
            values=context if context is not None else get_request_context(),
            database=get_database(),
            collection=document_model.get_settings().name,
        )

    @property
    def collection(self):
        return self.context.database[self.context.collection]

    def _ctx_value(self, key: str) -> str:
        return get_value_from_ctx(self.context.values, key)

    async def create(self, document: T) -> str:
        """
        Stamp audit fields from the request context and insert the document.

        Returns:
            str: Hex string of the generated ObjectId
        """
        readable, epoch = now_stamp()
        operator = self._ctx_value(OPERATOR_KEY)

        meta = document.meta
        meta.created_time = epoch
        meta.updated_time = epoch
        meta.created_at = readable
        meta.updated_at = readable
        meta.namespace = self._ctx_value(NAMESPACE_KEY)
        meta.merchant_id = self._ctx_value(MERCHANT_KEY)
        meta.account_id = self._ctx_value(ACCOUNT_KEY)
        meta.founder = operator
        meta.updater = operator

        await document.insert()
        logger.debug(f"Inserted {self.context.collection} document {document.id}")
        return str(document.id)

    async def get_one(self, id: str) -> T:
        """Fetch a document by id; raises DocumentNotFound when it does not exist"""
        return await self.get_by({"_id": to_object_id(id)})

    async def get_by(self, filter_query: Mapping[str, Any]) -> T:
        """Fetch the first document matching an arbitrary filter"""
        document = await self.document_model.find_one(dict(filter_query))
        if document is None:
            raise DocumentNotFound(f"No {self.context.collection} document matches {dict(filter_query)}")
        return document

    async def update(self, id: str, fields: Union[Mapping[str, Any], PydanticBaseModel]) -> None:
        """
        Apply a partial update and re-stamp the updater and update time.

        Args:
            id: Hex id of the document
            fields: Fields to $set; unset fields of a pydantic model are skipped

        Raises:
            DocumentNotFound: No document has the given id
        """
        if isinstance(fields, PydanticBaseModel):
            fields = fields.model_dump(exclude_unset=True)

        readable, epoch = now_stamp()
        update_data = {k: v for k, v in fields.items() if not _is_protected(k)}
        update_data["meta.updater"] = self._ctx_value(OPERATOR_KEY)
        update_data["meta.updated_time"] = epoch
        update_data["meta.updated_at"] = readable

        result = await self.collection.update_one(
            {"_id": to_object_id(id)}, {"$set": update_data}
        )
        if result.matched_count < 1:
            raise DocumentNotFound(f"{self.context.collection} document {id} not found")

    async def delete(self, id: str) -> None:
        """Remove a document by id; deleting a missing document is not an error"""
        result = await self.collection.delete_one({"_id": to_object_id(id)})
        if result.deleted_count < 1:
            logger.info(f"{self.context.collection} document {id} not found during delete")

    async def soft_delete(self, id: str) -> None:
        """
        Flag a document as deleted without removing it.

        The current document is re-read so the metadata written back keeps its
        creation fields. Repeated calls keep the flag set.
        """
        object_id = to_object_id(id)
        document = await self.get_by({"_id": object_id})

        readable, epoch = now_stamp()
        document.meta.updater = self._ctx_value(OPERATOR_KEY)
        document.meta.updated_time = epoch
        document.meta.updated_at = readable
        document.meta.deleted = True

        result = await self.collection.update_one(
            {"_id": object_id}, {"$set": {"meta": document.meta.model_dump()}}
        )
        if result.matched_count < 1:
            raise DocumentNotFound(f"{self.context.collection} document {id} not found")

    async def get_list(self, filter_query: Mapping[str, Any]) -> Tuple[int, List[T]]:
        """Return the number of matching documents and all of them"""
        return await self.get_list_with_options(filter_query, None)

    async def get_list_with_options(
        self,
        filter_query: Mapping[str, Any],
        options: Optional[ListOptions],
    ) -> Tuple[int, List[T]]:
        """
        Count the documents matching the filter and fetch one page of them.

        Returns:
            int: Total number of matching documents, independent of pagination
            list: The documents of the requested page
        """
        filter_query = dict(filter_query)
        total = await self.document_model.find(filter_query).count()

        options = options or ListOptions()
        documents = await self.document_model.find(
            filter_query,
            skip=options.skip,
            limit=options.limit,
            sort=options.sort,
        ).to_list()
        return total, documents
