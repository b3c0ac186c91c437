from pathlib import Path
from typing import Any

from fastapi import APIRouter, Body, Depends, File, HTTPException, Response, UploadFile
from sqlalchemy.orm import Session

from employee_imports.core.config import settings
from employee_imports.core.deps import get_db, get_file_import_id
from employee_imports.core.errors import DecodeError, NotFoundError, StorageError, ValidationError
from employee_imports.schemas.file_imports import FileImportOut, MessageOut
from employee_imports.services.file_imports import (
    create_import,
    delete_import,
    export_import,
    get_import,
    import_spreadsheet,
    list_imports,
    update_import,
)
from employee_imports.services.tabular import XLSX_MEDIA_TYPE

router = APIRouter()

NOT_FOUND = "Importation non trouvée"


def _invalid(errors: dict) -> HTTPException:
    return HTTPException(status_code=400, detail={"error": "Données invalides", "issues": errors})


def _no_store(response: Response) -> None:
    # listings must reflect every mutation immediately
    response.headers["Cache-Control"] = "no-store"


@router.get("", response_model=list[FileImportOut])
def get_file_imports(response: Response, db: Session = Depends(get_db)):
    _no_store(response)
    return list_imports(db)


@router.post("", response_model=FileImportOut, status_code=201)
def post_file_import(payload: Any = Body(...), db: Session = Depends(get_db)):
    try:
        return create_import(db, payload)
    except ValidationError as e:
        raise _invalid(e.errors)
    except StorageError:
        raise HTTPException(status_code=500, detail="Erreur serveur lors de la sauvegarde.")


@router.post("/upload", response_model=FileImportOut, status_code=201)
def upload_file_import(file: UploadFile = File(...), db: Session = Depends(get_db)):
    if not file.filename or not file.filename.lower().endswith(".xlsx"):
        raise HTTPException(status_code=400, detail="Seuls les fichiers .xlsx sont acceptés")

    blob = file.file.read(settings.UPLOAD_MAX_BYTES + 1)
    if len(blob) > settings.UPLOAD_MAX_BYTES:
        raise HTTPException(status_code=400, detail="Fichier trop volumineux")

    try:
        return import_spreadsheet(db, Path(file.filename).name, blob)
    except DecodeError:
        raise HTTPException(status_code=400, detail="Fichier Excel illisible")
    except ValidationError as e:
        raise _invalid(e.errors)
    except StorageError:
        raise HTTPException(status_code=500, detail="Erreur serveur lors de la sauvegarde.")


@router.get("/{file_import_id}", response_model=FileImportOut)
def get_file_import(
    response: Response,
    file_import_id: int = Depends(get_file_import_id),
    db: Session = Depends(get_db),
):
    _no_store(response)
    try:
        return get_import(db, file_import_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail=NOT_FOUND)


@router.put("/{file_import_id}", response_model=FileImportOut)
def put_file_import(
    file_import_id: int = Depends(get_file_import_id),
    payload: Any = Body(...),
    db: Session = Depends(get_db),
):
    try:
        return update_import(db, file_import_id, payload)
    except ValidationError as e:
        raise _invalid(e.errors)
    except NotFoundError:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    except StorageError:
        raise HTTPException(status_code=500, detail="Erreur lors de la mise à jour")


@router.delete("/{file_import_id}", response_model=MessageOut)
def delete_file_import_endpoint(
    file_import_id: int = Depends(get_file_import_id),
    db: Session = Depends(get_db),
):
    try:
        delete_import(db, file_import_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    except StorageError:
        raise HTTPException(status_code=500, detail="Erreur serveur lors de la suppression")
    return MessageOut(message="Importation supprimée avec succès")


@router.get("/{file_import_id}/export")
def export_file_import(
    file_import_id: int = Depends(get_file_import_id),
    db: Session = Depends(get_db),
):
    try:
        blob = export_import(db, file_import_id, settings.EXPORT_SHEET_TITLE)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Aucun employé trouvé")
    return Response(
        content=blob,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename=employes_{file_import_id}.xlsx"},
    )
