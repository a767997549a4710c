import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from index_studio.routers.auth import router as auth_router
from index_studio.routers.catalog import router as catalog_router
from index_studio.routers.formulas import router as formulas_router
from index_studio.routers.layers import router as layers_router
from index_studio.routers.navigation import router as navigation_router

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Index Studio - Spectral Index Layers")

cors_origins = os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(catalog_router)
app.include_router(formulas_router)
app.include_router(layers_router)
app.include_router(navigation_router)


@app.get("/health")
async def health():
    return {"status": "ok", "service": "backend"}
