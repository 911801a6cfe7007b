import os
import logging
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from pydantic import BaseModel

from pwmeter.core.config import ConfigManager
from pwmeter.core.dictionary import load_dictionary
from pwmeter.core.errors import ConfigurationError
from pwmeter.core.evaluator import EvaluationResult, Presentation, StrengthEvaluator
from pwmeter.core.logger import setup_logging
from pwmeter.core.meter import MeterState
from pwmeter.core.password import strength_report

logger = logging.getLogger("pwmeter.main")

# ---------------------------------------------------------------------------
# Environment configuration
# ---------------------------------------------------------------------------
DEBUG = os.environ.get("DEBUG", "false").lower() == "true"
DICTIONARY_PATH = os.environ.get("PWMETER_DICTIONARY", "")

# ---------------------------------------------------------------------------
# FastAPI application – docs only exposed in DEBUG mode
# ---------------------------------------------------------------------------
app = FastAPI(
    title="pwmeter",
    version="1.0.0",
    docs_url="/docs" if DEBUG else None,
    redoc_url="/redoc" if DEBUG else None,
    openapi_url="/openapi.json" if DEBUG else None,
)

# ---------------------------------------------------------------------------
# Shared state: the dictionary is decoded once and only ever read
# ---------------------------------------------------------------------------
dictionary = load_dictionary(DICTIONARY_PATH or None)
config = ConfigManager()


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------
class PasswordStrengthRequest(BaseModel):
    password: Any = ""
    username: Optional[str] = None


# ---------------------------------------------------------------------------
# Health endpoint
# ---------------------------------------------------------------------------
@app.get("/health", tags=["System"])
async def health_check():
    """Liveness probe – returns 200 when the app is running."""
    return {"status": "ok", "version": app.version, "dictionary_words": len(dictionary)}


# ---------------------------------------------------------------------------
# Strength endpoints
# ---------------------------------------------------------------------------
@app.post("/api/password-strength")
async def check_password_strength(req: PasswordStrengthRequest):
    """
    Returns entropy, range, rule results and feedback for a candidate password.
    The password is NEVER logged or echoed back.
    """
    evaluator = StrengthEvaluator(dictionary, config.get_settings())
    password = req.password if isinstance(req.password, str) else ""
    return strength_report(evaluator, password, username=req.username)


@app.websocket("/ws/strength")
async def strength_stream(websocket: WebSocket):
    """
    Live meter for one password field. Every text frame is the field's
    current value; a binary frame reads as an empty value. A frame is
    answered only when the value changed.
    """
    await websocket.accept()
    settings = config.get_settings()
    meter = MeterState(settings)

    def on_change(result: EvaluationResult) -> Presentation:
        logger.debug("Live update: entropy=%d range=%s", result.entropy, result.label)
        return Presentation.APPLY

    evaluator = StrengthEvaluator(dictionary, settings, on_change=on_change)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            observation = evaluator.observe(message.get("text"))
            if observation is None:
                continue
            meter.update(observation)
            payload = observation.result.as_dict()
            payload["presentation"] = observation.presentation.value
            payload["classes"] = list(meter.classes)
            await websocket.send_json(payload)
    except WebSocketDisconnect:
        logger.debug("Strength stream closed")


# ---------------------------------------------------------------------------
# Settings & logs
# ---------------------------------------------------------------------------
@app.get("/api/settings")
async def get_settings():
    return config.get_settings().as_dict()


@app.post("/api/settings")
async def update_settings(settings: Dict[str, Any] = Body(...)):
    try:
        config.update_settings(settings)
    except ConfigurationError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return {"status": "updated"}


@app.get("/api/logs")
async def get_logs(limit: int = 200):
    return setup_logging().get_logs(limit=limit)


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------
@app.on_event("startup")
async def startup_event():
    setup_logging()
    logger.info(
        "pwmeter started with %d dictionary words, %d ranges, %d rules",
        len(dictionary), len(config.get_settings().ranges), len(config.get_settings().rules),
    )
