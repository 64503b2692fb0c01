from pathlib import Path
import sys

import pytest_asyncio
from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request, status
from httpx import AsyncClient, ASGITransport
from pydantic import BaseModel

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from microservices_common.core.binding import require_json_body, session_id  # noqa: E402
from microservices_common.core.exceptions import (  # noqa: E402
    ClientException,
    NotFoundException,
    RequestBindingError,
)
from microservices_common.core.handlers import register_exception_handlers  # noqa: E402


class ItemIn(BaseModel):
    name: str
    quantity: int = 1


def build_app(hide_exceptions: bool, debug: bool = False) -> FastAPI:
    app = FastAPI(debug=debug)
    register_exception_handlers(app, hide_exceptions=hide_exceptions)

    @app.get("/items/{item_id}")
    async def get_item(item_id: int):
        raise NotFoundException(f"item {item_id} not found")

    @app.post("/items", dependencies=[Depends(require_json_body)], status_code=status.HTTP_201_CREATED)
    async def create_item(item: ItemIn):
        return {"name": item.name, "quantity": item.quantity}

    @app.post("/imports", dependencies=[Depends(require_json_body)])
    async def import_items(request: Request):
        return {"imported": len(await request.json())}

    @app.get("/search")
    async def search(limit: int = Query(...)):
        return {"limit": limit}

    @app.get("/session")
    async def whoami(sid: str = Depends(session_id)):
        return {"sessionid": sid}

    @app.get("/pages")
    async def pages(x_page: int = Header()):
        return {"page": x_page}

    @app.get("/conflict")
    async def conflict():
        raise ClientException("name already taken", status_code=status.HTTP_409_CONFLICT)

    @app.get("/unclassified")
    async def unclassified():
        raise ClientException("nobody gave me a status")

    @app.get("/binding")
    async def binding():
        raise RequestBindingError("Missing cookie 'tenant' for method parameter")

    @app.get("/forbidden")
    async def forbidden():
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden bucket")

    @app.get("/boom")
    async def boom():
        raise RuntimeError("connection string postgres://admin:secret@db")

    return app


async def _client(hide_exceptions: bool, debug: bool = False):
    # Server errors are re-raised by Starlette after the 500 body is sent.
    transport = ASGITransport(app=build_app(hide_exceptions, debug=debug), raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest_asyncio.fixture
async def client():
    async for c in _client(hide_exceptions=True):
        yield c


@pytest_asyncio.fixture
async def verbose_client():
    async for c in _client(hide_exceptions=False):
        yield c


@pytest_asyncio.fixture
async def debug_client():
    async for c in _client(hide_exceptions=True, debug=True):
        yield c
