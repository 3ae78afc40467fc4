"""Business settings: arbitrary key/value entries and document numbering."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.core.security import get_current_user
from backend.app.db.session import get_db
from backend.app.models.enums import DocumentType
from backend.app.models.setting import Setting
from backend.app.models.user import User
from backend.app.schemas.settings import NextNumberRead, NumberingSettings, SettingRead, SettingWrite
from backend.app.services.numbering import NumberingService, NumberingSettingsResolver
from backend.app.services.settings_store import SettingsStore

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/", response_model=List[SettingRead])
async def list_settings(
    category: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    store = SettingsStore(db)
    if category:
        return [
            SettingRead(key=key, value=value, category=category)
            for key, value in store.get_category(category).items()
        ]
    return [SettingRead(key=row.key, value=store.get(row.key), category=row.category) for row in store.all()]


@router.get("/numbering/{doc_type}", response_model=NumberingSettings)
async def get_numbering_settings(
    doc_type: DocumentType, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    return NumberingSettingsResolver(SettingsStore(db)).get(doc_type)


@router.put("/numbering/{doc_type}", response_model=NumberingSettings)
async def update_numbering_settings(
    doc_type: DocumentType,
    payload: NumberingSettings,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    resolver = NumberingSettingsResolver(SettingsStore(db))
    resolver.set(doc_type, payload)
    return resolver.get(doc_type)


@router.get("/numbering/{doc_type}/next", response_model=NextNumberRead)
async def preview_next_number(
    doc_type: DocumentType, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    return NextNumberRead(document_type=doc_type.value, next_number=NumberingService(db).next_for_table(doc_type))


@router.get("/{key}", response_model=SettingRead)
async def get_setting(key: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    row = db.get(Setting, key)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Setting not found")
    return SettingRead(key=key, value=SettingsStore(db).get(key), category=row.category)


@router.put("/{key}", response_model=SettingRead)
async def put_setting(
    key: str,
    payload: SettingWrite,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    row = SettingsStore(db).set(key, payload.value, category=payload.category)
    return SettingRead(key=row.key, value=payload.value, category=row.category)


@router.delete("/{key}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_setting(key: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    if not SettingsStore(db).delete(key):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Setting not found")
