from fastapi import APIRouter
from employee_imports.api.routers import file_imports

api_router = APIRouter()
api_router.include_router(file_imports.router, prefix="/file-imports", tags=["file-imports"])
