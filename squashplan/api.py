"""
REST API for the squash scheduling backend.
Thin wrappers around domain logic and persistence.
"""
from __future__ import annotations

import logging
import sqlite3
from contextlib import asynccontextmanager, contextmanager
from typing import Any, AsyncGenerator, Generator

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, Field

from squashplan.auth import create_access_token, decode_token, hash_password, verify_password
from squashplan.config import get_settings
from squashplan.persistence import (
    PlayerRepository,
    UserRepository,
    get_connection,
    get_db_path,
    init_db,
)
from squashplan.services.schedule_service import (
    NotScheduleOwnerError,
    ScheduleNotFoundError,
    ScheduleService,
    ScheduleValidationError,
)
from squashplan.services.scheduling import InvalidArgumentError

logger = logging.getLogger(__name__)

_MAX_PASSWORD_BYTES = 72


def _truncate_password(s: str) -> str:
    """Ensure password is at most 72 UTF-8 bytes."""
    b = s.encode("utf-8")
    if len(b) <= _MAX_PASSWORD_BYTES:
        return s
    return b[:_MAX_PASSWORD_BYTES].decode("utf-8", errors="replace")


@contextmanager
def db_conn() -> Generator:
    """Yield a DB connection, ensure close on exit."""
    conn = get_connection()
    try:
        yield conn
    finally:
        conn.close()


# ---------- Lifespan ----------
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    init_db(db_path=get_db_path())
    logger.info("Database ready at %s", get_db_path())
    yield


# ---------- FastAPI app ----------
app = FastAPI(
    title="Squash Schedule API",
    description="Players, accounts and round-robin schedules for squash sessions",
    version="0.1.0",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_settings().cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

security = HTTPBearer(auto_error=False)


# ---------- Request/Response models ----------


class SignupRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=6)


class LoginRequest(BaseModel):
    username: str
    password: str


class CreatePlayerRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)


class PreviewScheduleRequest(BaseModel):
    player_ids: list[str] = Field(default_factory=list, description="Selected player ids")
    court_count: int = Field(default=1, ge=1, description="Available courts; labels only")


class CreateScheduleRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    player_ids: list[str] = Field(..., description="At least 2 distinct player ids")
    court_count: int = Field(default=1, ge=1)


def _get_current_user_id(credentials: HTTPAuthorizationCredentials | None = Depends(security)) -> str | None:
    """Return user_id from JWT or None if no/invalid token."""
    if credentials is None:
        return None
    return decode_token(credentials.credentials)


def _require_user_id(user_id: str | None = Depends(_get_current_user_id)) -> str:
    """Token must decode and name an existing user (tokens outlive a reset database)."""
    if user_id is None:
        raise HTTPException(status_code=401, detail="Login required")
    with db_conn() as conn:
        if UserRepository().get(conn, user_id) is None:
            raise HTTPException(status_code=401, detail="Unknown user; please log in again")
    return user_id


# ---------- Endpoints ----------


@app.post("/signup")
def signup(req: SignupRequest) -> dict[str, Any]:
    """Create account. Passwords hashed, never stored plain."""
    with db_conn() as conn:
        user_repo = UserRepository()
        if user_repo.get_by_username(conn, req.username):
            raise HTTPException(status_code=400, detail="Username already taken")
        try:
            user = user_repo.create_with_password(
                conn, req.username, hash_password(_truncate_password(req.password)), name=req.username
            )
        except sqlite3.IntegrityError:
            # Lost a race with a concurrent signup for the same username
            raise HTTPException(status_code=400, detail="Username already taken")
        token = create_access_token(user.id)
        return {"user_id": user.id, "username": user.username, "token": token}


@app.post("/login")
def login(req: LoginRequest) -> dict[str, Any]:
    """Login. Returns JWT token."""
    with db_conn() as conn:
        user = UserRepository().get_by_username(conn, req.username)
        if user is None or not user.password_hash or not verify_password(_truncate_password(req.password), user.password_hash):
            raise HTTPException(status_code=401, detail="Invalid username or password")
        token = create_access_token(user.id)
        return {"user_id": user.id, "username": user.username, "token": token}


@app.get("/players")
def get_players(user_id: str = Depends(_require_user_id)) -> dict[str, Any]:
    """List all players, ordered by name."""
    with db_conn() as conn:
        return {"players": [p.to_dict() for p in PlayerRepository().list_all(conn)]}


@app.post("/players")
def create_player(req: CreatePlayerRequest, user_id: str = Depends(_require_user_id)) -> dict[str, Any]:
    name = req.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Player name is required")
    with db_conn() as conn:
        player = PlayerRepository().create(conn, name, created_by=user_id)
        return player.to_dict()


@app.post("/schedules/preview")
def preview_schedule(req: PreviewScheduleRequest, user_id: str = Depends(_require_user_id)) -> dict[str, Any]:
    """Generate rounds for the selected players without saving."""
    with db_conn() as conn:
        try:
            rounds = ScheduleService().preview(conn, req.player_ids, req.court_count)
        except (ScheduleValidationError, InvalidArgumentError) as e:
            raise HTTPException(status_code=400, detail=str(e))
        return {"court_count": req.court_count, "rounds": [r.to_dict() for r in rounds]}


@app.post("/schedules")
def create_schedule(req: CreateScheduleRequest, user_id: str = Depends(_require_user_id)) -> dict[str, Any]:
    """Generate and save a schedule. Returns the stored schedule grouped by round."""
    with db_conn() as conn:
        try:
            detail = ScheduleService().create_schedule(conn, req.name, req.court_count, user_id, req.player_ids)
        except (ScheduleValidationError, InvalidArgumentError) as e:
            raise HTTPException(status_code=400, detail=str(e))
        detail["is_owner"] = True
        return detail


@app.get("/schedules")
def list_schedules(user_id: str = Depends(_require_user_id)) -> dict[str, Any]:
    with db_conn() as conn:
        return {"schedules": [s.to_dict() for s in ScheduleService().list_schedules(conn)]}


@app.get("/schedules/{schedule_id}")
def get_schedule(schedule_id: str, user_id: str = Depends(_require_user_id)) -> dict[str, Any]:
    """Saved schedule with matches grouped by round. is_owner is true for the creator."""
    with db_conn() as conn:
        try:
            detail = ScheduleService().get_schedule(conn, schedule_id)
        except ScheduleNotFoundError:
            raise HTTPException(status_code=404, detail="Schedule not found")
        detail["is_owner"] = user_id == detail["schedule"]["created_by"]
        return detail


@app.delete("/schedules/{schedule_id}")
def delete_schedule(schedule_id: str, user_id: str = Depends(_require_user_id)) -> dict[str, Any]:
    with db_conn() as conn:
        try:
            ScheduleService().delete_schedule(conn, schedule_id, user_id)
        except ScheduleNotFoundError:
            raise HTTPException(status_code=404, detail="Schedule not found")
        except NotScheduleOwnerError as e:
            raise HTTPException(status_code=403, detail=str(e))
        return {"deleted": schedule_id}


# ---------- Run with: uvicorn squashplan.api:app --reload ----------
