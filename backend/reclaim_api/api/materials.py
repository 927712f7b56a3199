from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, Response, UploadFile, status
from pydantic import ValidationError
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile as StarletteUploadFile

from reclaim_api.core.auth import require_auth
from reclaim_api.db.session import get_db
from reclaim_api.models.user import User
from reclaim_api.schemas.material import (
    ImportSummaryRead,
    MaterialPage,
    MaterialPayload,
    MaterialRead,
    MaterialStatsRead,
)
from reclaim_api.services import materials as materials_service
from reclaim_api.services import spreadsheets as spreadsheets_service
from reclaim_api.services.errors import (
    InvalidMaterialError,
    MaterialNotFoundError,
    PictureNotFoundError,
    SpreadsheetImportError,
)
from reclaim_api.services.materials import PictureFile

router = APIRouter(prefix="/api/materials", tags=["materials"])
logger = logging.getLogger("reclaim_api.api")


@contextmanager
def _service_errors() -> Iterator[None]:
    try:
        yield
    except MaterialNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Material not found") from exc
    except PictureNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Picture not found") from exc
    except InvalidMaterialError as exc:
        raise HTTPException(status_code=422, detail=exc.errors) from exc
    except SpreadsheetImportError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def _payload_from(raw: Any) -> MaterialPayload:
    if isinstance(raw, (bytes, str)):
        try:
            raw = json.loads(raw or "{}")
        except ValueError as exc:
            raise HTTPException(status_code=400, detail="Material must be valid JSON") from exc
    if not isinstance(raw, dict):
        raise HTTPException(status_code=400, detail="Material must be a JSON object")
    try:
        return MaterialPayload.model_validate(raw)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False)) from exc


async def _picture_files(uploads: list[Any]) -> list[PictureFile]:
    files = []
    for upload in uploads:
        if not isinstance(upload, StarletteUploadFile):
            continue
        files.append(
            PictureFile(
                file_name=upload.filename or "picture",
                content=await upload.read(),
                content_type=upload.content_type or "application/octet-stream",
            )
        )
    return files


@router.get("", response_model=MaterialPage)
def list_materials(
    db: Session = Depends(get_db),
    category: str | None = None,
    material_type: str | None = Query(default=None, alias="type"),
    condition: str | None = None,
    query: str | None = None,
    page: int = Query(default=0, ge=0),
    size: int | None = Query(default=None, ge=1, le=500),
) -> MaterialPage:
    result = materials_service.search_materials(
        db,
        category=category,
        material_type=material_type,
        condition=condition,
        query=query,
        page=page,
        size=size,
    )
    return MaterialPage(
        content=[MaterialRead.model_validate(material) for material in result["content"]],
        total_elements=result["total_elements"],
        total_pages=result["total_pages"],
        number=result["number"],
        size=result["size"],
    )


@router.get("/stats", response_model=MaterialStatsRead)
def get_stats(db: Session = Depends(get_db)) -> MaterialStatsRead:
    return MaterialStatsRead(**materials_service.get_stats(db))


@router.post("/import-excel", response_model=ImportSummaryRead)
async def import_excel(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    user: User | None = Depends(require_auth),
) -> ImportSummaryRead:
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")
    with _service_errors():
        summary = spreadsheets_service.import_materials(db, content, user=user)
    return ImportSummaryRead(**summary)


@router.get("/export-excel")
def export_excel(db: Session = Depends(get_db)) -> Response:
    content = spreadsheets_service.export_materials(db)
    file_name = f"materials_{date.today():%Y%m%d}.xlsx"
    return Response(
        content=content,
        media_type=spreadsheets_service.XLSX_CONTENT_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )


@router.get("/excel-template")
def excel_template() -> Response:
    return Response(
        content=spreadsheets_service.build_template(),
        media_type=spreadsheets_service.XLSX_CONTENT_TYPE,
        headers={"Content-Disposition": 'attachment; filename="materials_template.xlsx"'},
    )


@router.get("/pictures/{picture_id}")
def get_picture(picture_id: int, db: Session = Depends(get_db)) -> Response:
    with _service_errors():
        picture = materials_service.get_picture(db, picture_id)
    return Response(
        content=picture.content,
        media_type=picture.content_type,
        headers={"Content-Disposition": f'inline; filename="{picture.file_name}"'},
    )


@router.get("/{material_id}", response_model=MaterialRead)
def get_material(material_id: int, db: Session = Depends(get_db)) -> MaterialRead:
    with _service_errors():
        material = materials_service.get_material(db, material_id)
    return MaterialRead.model_validate(material)


@router.post("", response_model=MaterialRead, status_code=status.HTTP_201_CREATED)
async def create_material(
    request: Request,
    db: Session = Depends(get_db),
    user: User | None = Depends(require_auth),
) -> MaterialRead:
    """Accept a JSON body, or multipart with a ``material`` JSON part and ``pictures`` files."""
    content_type = request.headers.get("content-type", "")
    pictures: list[PictureFile] = []
    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        raw = form.get("material")
        if isinstance(raw, StarletteUploadFile):
            raw = await raw.read()
        if raw is None:
            raise HTTPException(status_code=400, detail="Multipart body must include a 'material' part")
        payload = _payload_from(raw)
        pictures = await _picture_files(form.getlist("pictures"))
    else:
        try:
            body = await request.json()
        except ValueError as exc:
            raise HTTPException(status_code=400, detail="Material must be valid JSON") from exc
        payload = _payload_from(body)

    with _service_errors():
        material = materials_service.create_material(db, payload, user=user, pictures=pictures)
    return MaterialRead.model_validate(material)


@router.put("/{material_id}", response_model=MaterialRead)
def update_material(
    material_id: int,
    body: dict[str, Any],
    db: Session = Depends(get_db),
    user: User | None = Depends(require_auth),
) -> MaterialRead:
    payload = _payload_from(body)
    with _service_errors():
        material = materials_service.update_material(db, material_id, payload, user=user)
    return MaterialRead.model_validate(material)


@router.delete("/{material_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_material(
    material_id: int,
    db: Session = Depends(get_db),
    user: User | None = Depends(require_auth),
) -> Response:
    with _service_errors():
        materials_service.delete_material(db, material_id, user=user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{material_id}/pictures", response_model=MaterialRead)
async def add_pictures(
    material_id: int,
    pictures: list[UploadFile] = File(...),
    db: Session = Depends(get_db),
    user: User | None = Depends(require_auth),
) -> MaterialRead:
    files = await _picture_files(pictures)
    with _service_errors():
        material = materials_service.add_pictures(db, material_id, files, user=user)
    return MaterialRead.model_validate(material)


@router.delete("/{material_id}/pictures/{picture_id}", response_model=MaterialRead)
def delete_picture(
    material_id: int,
    picture_id: int,
    db: Session = Depends(get_db),
    user: User | None = Depends(require_auth),
) -> MaterialRead:
    with _service_errors():
        material = materials_service.delete_picture(db, material_id, picture_id, user=user)
    return MaterialRead.model_validate(material)


@router.put("/{material_id}/pictures/{picture_id}/primary", response_model=MaterialRead)
def set_primary_picture(
    material_id: int,
    picture_id: int,
    db: Session = Depends(get_db),
    user: User | None = Depends(require_auth),
) -> MaterialRead:
    with _service_errors():
        material = materials_service.set_primary_picture(db, material_id, picture_id, user=user)
    return MaterialRead.model_validate(material)
