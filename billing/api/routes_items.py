from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from billing.api.schemas import ItemCreateRequest, ItemUpdateRequest
from billing.api.utils import item_payload, user_payload
from billing.core.security import get_current_user
from billing.domain.catalog.service import create_item, delete_item, find_all_items, find_item, update_item
from billing.domain.users.aggregates import User
from billing.persistence.pg import get_session

router = APIRouter(tags=["items"])


@router.get("/")
def home(user: User = Depends(get_current_user), session: Session = Depends(get_session)):
    items = find_all_items(session)
    return {"view": "index", "user": user_payload(user), "items": [item_payload(item) for item in items]}


@router.get("/items", dependencies=[Depends(get_current_user)])
def list_items(session: Session = Depends(get_session)):
    items = find_all_items(session)
    return {"view": "itemList", "count": len(items), "items": [item_payload(item) for item in items]}


@router.post("/api/items", status_code=status.HTTP_201_CREATED, dependencies=[Depends(get_current_user)])
def add_item(body: ItemCreateRequest, session: Session = Depends(get_session)):
    item = create_item(session, name=body.name, price=body.price, description=body.description)
    return item_payload(item)


@router.get("/api/items/{item_id}", dependencies=[Depends(get_current_user)])
def get_item(item_id: str, session: Session = Depends(get_session)):
    return item_payload(find_item(session, item_id))


@router.post("/api/items/{item_id}", dependencies=[Depends(get_current_user)])
def edit_item(item_id: str, body: ItemUpdateRequest, session: Session = Depends(get_session)):
    item = update_item(session, item_id, body.model_dump(exclude_unset=True))
    return item_payload(item)


@router.post("/api/items/{item_id}/delete", dependencies=[Depends(get_current_user)])
def remove_item(item_id: str, session: Session = Depends(get_session)):
    delete_item(session, item_id)
    return {"deleted": item_id}
