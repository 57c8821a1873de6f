import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from accordo.api.routes import router as negotiation_router
from accordo.config import get_settings

settings = get_settings()
settings.assert_llm_configured()
logging.basicConfig(level=settings.log_level.upper())

app = FastAPI(title=settings.app_name)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(negotiation_router)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
