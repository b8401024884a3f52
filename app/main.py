# app/main.py
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .config import CORS_ORIGINS, LOG_LEVEL
from .auth.session_gate import SessionGateMiddleware
from .routers import auth, places, labels

handler = logging.StreamHandler()
handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
logging.basicConfig(level=LOG_LEVEL, handlers=[handler])
logger = logging.getLogger("app")

app = FastAPI(
    title="Places Dashboard",
    description="Admin dashboard API for travel places and their labels",
    version="1.0.0",
)

# Session gate runs inside CORS so preflight responses keep their headers
app.add_middleware(SessionGateMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(auth.router)
app.include_router(places.router)
app.include_router(labels.router)

logger.warning("Dashboard login is a placeholder: any non-empty credentials set an unsigned isAuthenticated cookie.")
