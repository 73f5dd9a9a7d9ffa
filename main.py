import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
from routers.exercises import router as exercises_router
from sessions import SessionStore

logger = logging.getLogger("combined-ops")
logging.basicConfig(level=logging.INFO)

app = FastAPI(title="Sumrise Maths – Combined Operations API")

# Allow calls from the Next.js dev server and production site
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# One in-memory session store per app instance
app.state.sessions = SessionStore()
logger.info(
    "session store ready (max_sessions=%d, history_size=%d)",
    app.state.sessions.max_sessions,
    app.state.sessions.history_size,
)


@app.get("/")
def health_root():
    return {"ok": True}


app.include_router(exercises_router)  # /sessions/..., /exercises/...
