"""
API routes for roster, teams, schedule, results and publication.
"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from celery.result import AsyncResult

from app.models import (
    Player, Gender, FormatSelection, GameFormat, GameVariant, BalanceStrategy,
    MatchSide, ErrorKind, OperationResult
)
from app.services.league_night import LeagueNight, build_league_night
from app.services.team_balancer import summarize_team
from app.services.schedule_generator import format_description
from app.services.rule_generator import RuleKind, pick_rule
from app.services.roster_io import parse_roster_csv, export_roster_csv
from app.core.config import DEFAULT_TEAM_SIZE, ALLOWED_TEAM_SIZES, MIN_SKILL, MAX_SKILL
from app.core.celery_app import celery_app
from app.core.logging_config import get_logger
from app.tasks.rule_tasks import generate_rule_task

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["league-night"])

ERROR_STATUS = {
    ErrorKind.INSUFFICIENT_PLAYERS: 400,
    ErrorKind.INSUFFICIENT_TEAMS: 400,
    ErrorKind.VALIDATION_FAILURE: 400,
    ErrorKind.STORE_FAILURE: 502,
    ErrorKind.GENERATION_FAILURE: 503,
}

_league_night: Optional[LeagueNight] = None


def get_league_night() -> LeagueNight:
    """Process-wide session, built and loaded on first use."""
    global _league_night
    if _league_night is None:
        _league_night = build_league_night()
        loaded = _league_night.load()
        if not loaded.success:
            logger.error("Initial load failed: %s", loaded.error)
    return _league_night


def _check(result: OperationResult) -> OperationResult:
    if not result.success:
        status = ERROR_STATUS.get(result.error_kind, 500)
        kind = result.error_kind.value if result.error_kind else "Error"
        raise HTTPException(status_code=status, detail={"error": kind, "message": result.error})
    return result


class PlayerRequest(BaseModel):
    """Request model for adding or editing a player."""
    name: str
    gender: Gender
    skill: int = Field(ge=MIN_SKILL, le=MAX_SKILL)
    present: Optional[bool] = None


class PlayerResponse(BaseModel):
    id: str
    name: str
    gender: str
    skill: int
    present: bool


class TeamResponse(BaseModel):
    name: str
    players: List[PlayerResponse]
    avg_skill: float
    guy_count: int
    gal_count: int


class MatchResponse(BaseModel):
    id: str
    team_a: str
    team_b: str
    result_a: Optional[int] = None
    result_b: Optional[int] = None
    court: str
    complete: bool


class RuleResponse(BaseModel):
    name: str
    description: str


class GenerateTeamsRequest(BaseModel):
    team_size: int = DEFAULT_TEAM_SIZE
    strategy: Optional[BalanceStrategy] = None


class MovePlayerRequest(BaseModel):
    player_id: str
    team_name: str
    index: Optional[int] = None


class FormatRequest(BaseModel):
    format: GameFormat
    variant: GameVariant = GameVariant.STANDARD
    hint: Optional[str] = None
    points_to_win: Optional[int] = Field(default=None, ge=1)


class GenerateScheduleRequest(BaseModel):
    team_size: int = DEFAULT_TEAM_SIZE


class ResultRequest(BaseModel):
    side: MatchSide
    value: Optional[int] = None


class RuleRequest(BaseModel):
    kind: RuleKind
    hint: Optional[str] = None


class ImportRequest(BaseModel):
    csv_text: str


class SnapshotResponse(BaseModel):
    """What the public view renders."""
    teams: List[TeamResponse]
    format: str
    game_format: str
    variant: str
    description: str
    schedule: List[MatchResponse]
    active_rule: Optional[RuleResponse] = None
    points_to_win: int


def _team_response(team) -> dict:
    summary = summarize_team(team)
    return {
        "name": team.name,
        "players": [p.to_dict() for p in team.players],
        "avg_skill": summary.avg_skill,
        "guy_count": summary.guy_count,
        "gal_count": summary.gal_count,
    }


def _match_response(match) -> dict:
    return {**match.to_dict(), "complete": match.is_complete}


def _snapshot_response(snapshot) -> dict:
    selection = snapshot.selection
    return {
        "teams": [_team_response(t) for t in snapshot.teams],
        "format": snapshot.format,
        "game_format": selection.format.value,
        "variant": selection.variant.value,
        "description": format_description(selection),
        "schedule": [_match_response(m) for m in snapshot.schedule],
        "active_rule": snapshot.active_rule.to_dict() if snapshot.active_rule else None,
        "points_to_win": snapshot.points_to_win,
    }


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}


# Roster

@router.get("/players", response_model=List[PlayerResponse])
async def list_players(night: LeagueNight = Depends(get_league_night)):
    return [p.to_dict() for p in sorted(night.pool.players, key=lambda p: p.name.lower())]


@router.post("/players/reload", response_model=List[PlayerResponse])
async def reload_players(night: LeagueNight = Depends(get_league_night)):
    """Reload the roster from the player store."""
    _check(night.pool.load(night.player_store))
    return [p.to_dict() for p in night.pool.players]


@router.get("/players/check-in")
async def check_in_summary(night: LeagueNight = Depends(get_league_night)):
    """Present counts for the check-in screen."""
    return night.pool.counts()


@router.post("/players", response_model=PlayerResponse, status_code=201)
async def add_player(request: PlayerRequest, night: LeagueNight = Depends(get_league_night)):
    result = _check(night.pool.add_player(night.player_store, request.name, request.gender.value, request.skill))
    return result.data.to_dict()


@router.put("/players/{player_id}", response_model=PlayerResponse)
async def update_player(player_id: str, request: PlayerRequest,
                        night: LeagueNight = Depends(get_league_night)):
    existing = night.pool.get(player_id)
    if existing is None:
        raise HTTPException(status_code=404, detail=f"Player not found: {player_id}")

    present = existing.present if request.present is None else request.present
    player = Player(id=player_id, name=request.name, gender=request.gender,
                    skill=request.skill, present=present)
    _check(night.pool.update_player(night.player_store, player))
    return player.to_dict()


@router.delete("/players/{player_id}")
async def delete_player(player_id: str, night: LeagueNight = Depends(get_league_night)):
    if night.pool.get(player_id) is None:
        raise HTTPException(status_code=404, detail=f"Player not found: {player_id}")
    _check(night.delete_player(player_id))
    return {"success": True, "message": "The player has been removed from the roster."}


@router.post("/players/{player_id}/presence", response_model=PlayerResponse)
async def toggle_presence(player_id: str, night: LeagueNight = Depends(get_league_night)):
    result = _check(night.pool.toggle_presence(night.player_store, player_id))
    return result.data.to_dict()


@router.post("/players/reset-presence")
async def reset_presence(night: LeagueNight = Depends(get_league_night)):
    """Mark everyone away at the start of a new night."""
    _check(night.pool.reset_presence(night.player_store))
    return {"success": True, **night.pool.counts()}


@router.post("/players/import")
async def import_players(request: ImportRequest, night: LeagueNight = Depends(get_league_night)):
    """
    Import players from CSV text (name,gender,skill).

    Invalid rows are skipped; the import fails only when none are valid.
    """
    parsed = _check(parse_roster_csv(request.csv_text))
    imported = _check(night.pool.import_players(night.player_store, parsed.data["records"]))
    return {
        "success": True,
        "imported": len(imported.data),
        "skipped": parsed.data["skipped"],
    }


@router.get("/players/export", response_class=PlainTextResponse)
async def export_players(night: LeagueNight = Depends(get_league_night)):
    return PlainTextResponse(
        export_roster_csv(night.pool.players),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=players.csv"},
    )


# Teams

def _check_team_size(team_size: int):
    if team_size not in ALLOWED_TEAM_SIZES:
        raise HTTPException(
            status_code=400,
            detail=f"Team size must be one of {ALLOWED_TEAM_SIZES}, got {team_size}"
        )


@router.get("/teams", response_model=List[TeamResponse])
async def list_teams(night: LeagueNight = Depends(get_league_night)):
    return [_team_response(t) for t in night.teams]


@router.post("/teams/generate", response_model=List[TeamResponse])
async def generate_teams(request: GenerateTeamsRequest, night: LeagueNight = Depends(get_league_night)):
    """
    Generate balanced teams from the present players.

    Clears the current schedule, since it refers to the old teams.
    """
    _check_team_size(request.team_size)
    result = _check(night.generate_teams(request.team_size, request.strategy))
    return [_team_response(t) for t in result.data]


@router.post("/teams/move", response_model=List[TeamResponse])
async def move_team_player(request: MovePlayerRequest, night: LeagueNight = Depends(get_league_night)):
    _check(night.move_player(request.player_id, request.team_name, request.index))
    return [_team_response(t) for t in night.teams]


@router.delete("/teams")
async def clear_teams(night: LeagueNight = Depends(get_league_night)):
    night.clear_teams()
    return {"success": True, "message": "All teams have been cleared and the schedule has been reset."}


# Format and schedule

@router.put("/format")
async def set_format(request: FormatRequest, night: LeagueNight = Depends(get_league_night)):
    """
    Select the game format and King-of-the-Court variant.

    Power-Up Round and King's Ransom attach a rule. If the rule cannot be
    generated the format still changes and the error is reported alongside.
    """
    result = night.set_format(FormatSelection(request.format, request.variant), request.hint)
    if request.points_to_win:
        night.points_to_win = request.points_to_win

    response = {
        "format": night.selection.format.value,
        "variant": night.selection.variant.value,
        "description": format_description(night.selection),
        "active_rule": night.active_rule.to_dict() if night.active_rule else None,
        "points_to_win": night.points_to_win,
    }
    if not result.success:
        response["rule_error"] = result.error
    return response


@router.get("/schedule", response_model=List[MatchResponse])
async def get_schedule(night: LeagueNight = Depends(get_league_night)):
    return [_match_response(m) for m in night.ledger.matches]


@router.post("/schedule/generate", response_model=List[MatchResponse])
async def generate_schedule(request: GenerateScheduleRequest, night: LeagueNight = Depends(get_league_night)):
    """Generate matches for the selected format."""
    _check_team_size(request.team_size)
    result = _check(night.generate_schedule(request.team_size))
    return [_match_response(m) for m in result.data]


@router.put("/schedule/{match_id}/result", response_model=MatchResponse)
async def set_result(match_id: str, request: ResultRequest, night: LeagueNight = Depends(get_league_night)):
    result = _check(night.set_result(match_id, request.side, request.value))
    return _match_response(result.data)


@router.post("/schedule/save")
async def save_results(night: LeagueNight = Depends(get_league_night)):
    result = _check(night.save_results())
    return {"success": True, **result.data}


# Publication

@router.post("/publish", response_model=SnapshotResponse)
async def publish(night: LeagueNight = Depends(get_league_night)):
    """Publish teams, format, schedule and rule to the public view."""
    result = _check(night.publish())
    return _snapshot_response(result.data)


@router.get("/public/snapshot", response_model=SnapshotResponse)
async def public_snapshot(night: LeagueNight = Depends(get_league_night)):
    """Read-only view of the last published night (defaults when nothing was published)."""
    result = _check(night.gateway.fetch_latest())
    return _snapshot_response(result.data)


# Rules

@router.post("/rules/generate", response_model=RuleResponse)
async def generate_rule(request: RuleRequest, night: LeagueNight = Depends(get_league_night)):
    result = _check(pick_rule(night.rule_generator, request.kind, request.hint, night.rng,
                              previous=night.active_rule))
    return result.data.to_dict()


@router.post("/rules/async")
async def generate_rule_async(request: RuleRequest):
    """
    Start async rule generation.

    Returns:
        dict: Task ID for polling status
    """
    try:
        task = generate_rule_task.delay(request.kind.value, request.hint)
        return {
            "task_id": task.id,
            "status": "PENDING",
            "message": "Rule generation started"
        }
    except Exception as e:
        logger.error("Failed to start rule task: %s", e)
        raise HTTPException(status_code=503, detail=f"Failed to start task: {str(e)}")


@router.get("/rules/status/{task_id}")
async def get_rule_status(task_id: str):
    """
    Get status of an async rule generation task.

    Args:
        task_id: Celery task ID
    """
    try:
        task_result = AsyncResult(task_id, app=celery_app)

        if task_result.state == "SUCCESS":
            return {"task_id": task_id, "status": "SUCCESS", "result": task_result.result}
        if task_result.state == "FAILURE":
            return {"task_id": task_id, "status": "FAILURE", "message": str(task_result.info)}
        return {
            "task_id": task_id,
            "status": task_result.state,
            "message": f"Task state: {task_result.state}"
        }
    except Exception as e:
        logger.error("Failed to get task status for %s: %s", task_id, e)
        raise HTTPException(status_code=503, detail=f"Failed to get task status: {str(e)}")
