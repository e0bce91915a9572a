from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from chronograph.db import create_all
from chronograph.graph_db import DBGraphStore
from chronograph.settings import API_DEBUG, API_HOST, API_PORT, settings
from .deps import get_settings, get_store
from .versioner import NodeOut, node_out, router as versioner_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_all()
    yield


app = FastAPI(
    title=settings.api_title,
    version="0.1.0",
    description="HTTP layer over the Chronograph entity versioning engine.",
    lifespan=lifespan,
)

# --- CORS ----------------------------------------------------------
# Dev-only origins; tighten for production.
origins = [
    "http://localhost:5173",    # Vite dev server default port
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)

# --- Include Routers ----------------------------------------------------------
app.include_router(versioner_router)

# ---------- health-check ----------
@app.get("/")
def root(cfg=Depends(get_settings)):
    return {"status": "ok", "msg": f"{cfg.api_title} is alive"}

# ---------- GET /nodes/{node_id} ----------
@app.get("/nodes/{node_id}", response_model=NodeOut)
def get_node(node_id: int, store: DBGraphStore = Depends(get_store)):
    """Return one node (Entity, State or reference node) with its labels and properties."""
    graph = store.load()
    if not graph.has_node(node_id):
        raise HTTPException(status_code=404, detail="Node not found")
    return node_out(graph, node_id)

# ---------- GET /graph ----------
@app.get("/graph")
def get_graph(store: DBGraphStore = Depends(get_store)):
    """
    Return the whole property graph for visualization.

    Nodes carry their labels and properties; links carry their type and
    properties (``date`` / ``endDate`` on history edges).
    """
    return store.load().to_json()


# ---------------------------------------------------------------------
# Dev server:  python -m api.main
# ---------------------------------------------------------------------
if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.main:app", host=API_HOST, port=API_PORT, reload=API_DEBUG)
