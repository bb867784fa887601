from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kiosk_overlay.config import logger
from kiosk_overlay.services.overlay_service import build_default_orchestrator
from kiosk_overlay.services.processing_state import ProcessingSessions

from .routers import router

# Initialize FastAPI application
app = FastAPI(
    title="Kiosk Overlay API",
    description="AI try-on overlays with guaranteed fallback for retail kiosks",
    version="1.0.0",
)

app.state.orchestrator = build_default_orchestrator()
app.state.sessions = ProcessingSessions()

app.include_router(router)


# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # kiosk and storefront origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


logger.info("Kiosk Overlay API initialized successfully")
