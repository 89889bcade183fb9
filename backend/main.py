from fastapi import FastAPI, Request
import uvicorn
from fastapi.middleware.cors import CORSMiddleware
from db.database import create_db_and_tables, engine
from core.logging import add_context, clear_context, configure_logging
from routers.inventory import router as inventory_router
from routers.images import router as images_router
from routers.pantry import router as pantry_router
from contextlib import asynccontextmanager

configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_db_and_tables()
    yield
    await engine.dispose()


app = FastAPI(
    title="Pantry Tracker API",
    description="API for tracking pantry items and their photos",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def bind_request_context(request: Request, call_next):
    clear_context()
    add_context(method=request.method, path=request.url.path)
    return await call_next(request)


# Image upload routes
app.include_router(images_router, prefix="/images", tags=["images"])

# Inventory routes
app.include_router(inventory_router, prefix="/inventory", tags=["inventory"])
app.include_router(pantry_router, prefix="/pantry", tags=["pantry"])

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
