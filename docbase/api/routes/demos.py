import logging
from typing import Optional
from fastapi import APIRouter, HTTPException, Query, status
from pymongo import ASCENDING, DESCENDING
from docbase.models.demo import Demo, DemoCreate, DemoUpdate, DemoResponse, DemoList
from docbase.models.base import not_deleted
from docbase.models.handler import ListOptions

logger = logging.getLogger(__name__)

router = APIRouter()


def parse_sort(sort: Optional[str]):
    """Parse "name,-reference" into [("name", 1), ("reference", -1)]"""
    if not sort:
        return None
    fields = []
    for item in sort.split(","):
        item = item.strip()
        if not item:
            continue
        if item.startswith("-"):
            fields.append((item[1:], DESCENDING))
        else:
            fields.append((item.lstrip("+"), ASCENDING))
    return fields or None


@router.post("/demos", response_model=DemoResponse, status_code=status.HTTP_201_CREATED)
async def create_demo(demo: DemoCreate):
    """Create a new demo record"""
    new_demo = Demo(
        name=demo.name,
        desc=demo.desc,
        reference=demo.reference,
    )

    handler = Demo.handler()
    try:
        await handler.create(new_demo)
    except Exception as e:
        logger.error(f"Failed to create demo record: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Database error: {str(e)}"
        )

    return DemoResponse.from_document(new_demo)


@router.get("/demos/{demo_id}", response_model=DemoResponse)
async def get_demo(demo_id: str):
    """Get a demo record by ID"""
    demo = await Demo.handler().get_one(demo_id)
    return DemoResponse.from_document(demo)


@router.get("/demos", response_model=DemoList)
async def list_demos(
    name: Optional[str] = None,
    skip: Optional[int] = Query(None, ge=0),
    limit: Optional[int] = Query(None, ge=1, le=500),
    sort: Optional[str] = Query(None, description="Comma separated fields, prefix with - for descending"),
    include_deleted: bool = False,
):
    """List demo records with the total number of matches"""
    query_filter = {}
    if name:
        query_filter["name"] = name
    if not include_deleted:
        query_filter = not_deleted(query_filter)

    options = ListOptions(skip=skip, limit=limit, sort=parse_sort(sort))
    total, demos = await Demo.handler().get_list_with_options(query_filter, options)

    return DemoList(
        total=total,
        demos=[DemoResponse.from_document(demo) for demo in demos],
    )


@router.put("/demos/{demo_id}", response_model=DemoResponse)
async def update_demo(demo_id: str, demo_update: DemoUpdate):
    """Update a demo record"""
    handler = Demo.handler()
    update_data = demo_update.model_dump(exclude_unset=True)
    if update_data:
        await handler.update(demo_id, update_data)

    demo = await handler.get_one(demo_id)
    return DemoResponse.from_document(demo)


@router.put("/demos/{demo_id}/soft-delete", response_model=DemoResponse)
async def soft_delete_demo(demo_id: str):
    """Flag a demo record as deleted, keeping the document"""
    handler = Demo.handler()
    await handler.soft_delete(demo_id)

    demo = await handler.get_one(demo_id)
    return DemoResponse.from_document(demo)


@router.delete("/demos/{demo_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_demo(demo_id: str):
    """Delete a demo record. Deleting an unknown record succeeds."""
    await Demo.handler().delete(demo_id)
    return None
