"""FastAPI application serving a sidebar index read-only."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, List, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel

from .. import codec
from ..index import SidebarIndex
from ..models import Entry, IndexFormatError
from ..stores import IndexStore


class HealthResponse(BaseModel):
    status: str


class EntryModel(BaseModel):
    name: str
    summary: str


class CategoriesResponse(BaseModel):
    categories: List[str]


class CategoryResponse(BaseModel):
    category: str
    entries: List[EntryModel]


class EntryRow(BaseModel):
    category: str
    name: str
    summary: str


class EntriesResponse(BaseModel):
    entries: List[EntryRow]


class RefreshResponse(BaseModel):
    reloaded: bool
    fingerprint: Optional[str] = None


async def _current(store: IndexStore) -> SidebarIndex:
    # First use reads the file under a lock; keep that off the event loop.
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, store.current)


def _entry_model(entry: Entry) -> EntryModel:
    return EntryModel(name=entry.name, summary=entry.summary)


def create_app(store: IndexStore) -> FastAPI:
    """Create the FastAPI application exposing sidebar lookups."""

    app = FastAPI(title="DocIndex Service", version="1.0.0")

    async def get_store() -> IndexStore:
        return store

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/categories", response_model=CategoriesResponse)
    async def list_categories(store: IndexStore = Depends(get_store)) -> CategoriesResponse:
        index = await _current(store)
        return CategoriesResponse(categories=sorted(index.categories()))

    @app.get("/categories/{category}", response_model=CategoryResponse)
    async def category_entries(
        category: str, store: IndexStore = Depends(get_store)
    ) -> CategoryResponse:
        index = await _current(store)
        entries = index.get(category)
        return CategoryResponse(
            category=category, entries=[_entry_model(entry) for entry in entries]
        )

    @app.get("/categories/{category}/{name}", response_model=EntryModel)
    async def entry_detail(
        category: str, name: str, store: IndexStore = Depends(get_store)
    ) -> EntryModel:
        index = await _current(store)
        entry = index.lookup(category, name)
        if entry is None:
            raise HTTPException(status_code=404, detail=f"{category}/{name} not found")
        return _entry_model(entry)

    @app.get("/entries", response_model=EntriesResponse)
    async def all_entries(store: IndexStore = Depends(get_store)) -> EntriesResponse:
        index = await _current(store)
        rows = [
            EntryRow(category=category, name=entry.name, summary=entry.summary)
            for category, entry in index.all_entries()
        ]
        return EntriesResponse(entries=rows)

    @app.get("/sidebar-items.js", response_class=PlainTextResponse)
    async def sidebar_script(store: IndexStore = Depends(get_store)) -> PlainTextResponse:
        index = await _current(store)
        return PlainTextResponse(
            codec.dumps(index, "js"), media_type="application/javascript"
        )

    @app.get("/sidebar-items.json")
    async def sidebar_json(store: IndexStore = Depends(get_store)) -> JSONResponse:
        index = await _current(store)
        return JSONResponse(content=index.to_mapping())

    @app.post("/refresh", response_model=RefreshResponse)
    async def refresh(store: IndexStore = Depends(get_store)) -> RefreshResponse:
        loop = asyncio.get_running_loop()
        reloaded = await loop.run_in_executor(None, store.refresh)
        return RefreshResponse(reloaded=reloaded, fingerprint=store.fingerprint)

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(IndexFormatError)
    async def format_error_handler(_: Any, exc: IndexFormatError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    return app


def run_service(
    path: Path,
    host: str = "127.0.0.1",
    port: int = 8000,
    *,
    fmt: Optional[str] = None,
    strict: bool = True,
) -> None:  # pragma: no cover - integration path
    import uvicorn

    store = IndexStore(path, fmt, strict=strict)
    store.current()
    uvicorn.run(create_app(store), host=host, port=port)
