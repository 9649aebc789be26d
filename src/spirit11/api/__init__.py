"""REST API for the spirit11 player catalog."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Literal, Sequence

from fastapi import Body, FastAPI, File, Form, HTTPException, Query, UploadFile
from fastapi.responses import JSONResponse, Response

from spirit11.api.schemas import (
    BatchIngestResponse,
    InvalidPlayerResponse,
    PlayerResponse,
    StatLeaderResponse,
    TeamEvaluationRequest,
    TeamEvaluationResponse,
    TournamentSummaryResponse,
)
from spirit11.catalog import (
    PlayerFilter,
    evaluate_team,
    export_players_to_csv,
    filter_players,
    summarize_tournament,
)
from spirit11.catalog.summary import StatLeader
from spirit11.config import get_rules
from spirit11.engine import compute_derived_metrics
from spirit11.ingest import (
    IngestReport,
    coerce_stats,
    find_negative_stats,
    ingest_batch,
    ingest_performance_record,
    normalize_update,
    read_player_csv,
)
from spirit11.models import Category, DerivedMetrics, PlayerRecord
from spirit11.persistence import PlayerStore


logger = logging.getLogger("uvicorn.error")


def _parse_mapping(mapping_str: str | None) -> dict[str, str]:
    if not mapping_str:
        return {}
    try:
        data = json.loads(mapping_str)
    except json.JSONDecodeError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid mapping JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise HTTPException(status_code=400, detail="Mapping must be a JSON object")
    return {str(key): value for key, value in data.items()}


def _leader_response(leader: StatLeader | None) -> StatLeaderResponse | None:
    if leader is None:
        return None
    return StatLeaderResponse(name=leader.name, university=leader.university, value=leader.value)


def _batch_response(
    store: PlayerStore,
    payload: Sequence[Any],
    records: list[PlayerRecord],
    report: IngestReport,
) -> JSONResponse:
    stored = store.add_players(records)
    response = BatchIngestResponse(
        message=f"{len(stored)} players added successfully",
        added_count=len(stored),
        invalid_count=report.invalid_count,
        players=[PlayerResponse.from_player(player) for player in stored],
        invalid_players=[
            InvalidPlayerResponse(index=row.index, data=payload[row.index], error=row.error)
            for row in report.invalid_rows
        ],
    )
    return JSONResponse(status_code=201, content=response.model_dump(mode="json", by_alias=True))


def create_app(db_path: Path | str | None = None) -> FastAPI:
    app = FastAPI(title="spirit11 player catalog")
    store = PlayerStore(db_path or Path(__file__).resolve().parent.parent / "spirit11.sqlite")
    app.state.player_store = store

    def _fetch_player_or_404(player_id: str):
        player = store.get_player(player_id)
        if player is None:
            raise HTTPException(status_code=404, detail="Player not found")
        return player

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/metrics", response_model=DerivedMetrics)
    async def metrics(stats: dict[str, Any] = Body(...)) -> DerivedMetrics:
        return compute_derived_metrics(stats)

    @app.get("/players", response_model=list[PlayerResponse])
    async def list_players(
        search: str | None = None,
        category: Category | None = None,
        sort_by: Literal["points", "value", "name", "runs", "wickets"] | None = None,
        direction: Literal["asc", "desc"] = "desc",
        limit: int | None = Query(None, ge=0),
    ) -> list[PlayerResponse]:
        players = store.list_players(search=search, category=category)
        criteria = PlayerFilter(sort_by=sort_by, sort_direction=direction, limit=limit)
        return [PlayerResponse.from_player(player) for player in filter_players(players, criteria)]

    @app.get("/players/export.csv")
    async def export_csv(category: Category | None = None):
        players = store.list_players(category=category)
        return Response(
            content=export_players_to_csv(players),
            media_type="text/csv",
            headers={"Content-Disposition": 'attachment; filename="players.csv"'},
        )

    @app.get("/players/{player_id}", response_model=PlayerResponse)
    async def get_player(player_id: str) -> PlayerResponse:
        return PlayerResponse.from_player(_fetch_player_or_404(player_id))

    @app.post("/players", response_model=None)
    async def add_players(payload: Any = Body(...)) -> JSONResponse:
        if isinstance(payload, list):
            if not payload:
                raise HTTPException(
                    status_code=400,
                    detail="Empty array provided. For a single player, send an object not an array.",
                )
            rows = [item if isinstance(item, dict) else {} for item in payload]
            records, report = ingest_batch(rows, reject_negative=True)
            return _batch_response(store, payload, records, report)

        if not isinstance(payload, dict):
            raise HTTPException(status_code=400, detail="Invalid player data format")
        result = ingest_performance_record(payload, reject_negative=True)
        if not result.is_valid or result.record is None:
            raise HTTPException(status_code=400, detail=result.error)
        player = store.add_player(result.record)
        logger.info("Added player %s (%s)", player.name, player.player_id)
        response = PlayerResponse.from_player(player)
        return JSONResponse(status_code=201, content=response.model_dump(mode="json", by_alias=True))

    @app.post("/players/upload", response_model=None)
    async def upload_players(
        players: UploadFile = File(...),
        mapping: str | None = Form(None),
    ) -> JSONResponse:
        contents = await players.read()
        if not contents:
            raise HTTPException(status_code=400, detail="players file is empty")
        try:
            text = contents.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise HTTPException(status_code=400, detail="players file must be UTF-8 encoded") from exc

        rows = read_player_csv(text)
        if not rows:
            raise HTTPException(status_code=400, detail="players file has no rows")
        try:
            records, report = ingest_batch(rows, mapping=_parse_mapping(mapping), reject_negative=True)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return _batch_response(store, rows, records, report)

    @app.put("/players/{player_id}", response_model=PlayerResponse)
    async def update_player(player_id: str, changes: dict[str, Any] = Body(...)) -> PlayerResponse:
        _fetch_player_or_404(player_id)
        negative = find_negative_stats(coerce_stats(normalize_update(changes)))
        if negative:
            raise HTTPException(status_code=400, detail=f"{negative[0]} cannot be negative")
        try:
            player = store.update_player(player_id, changes)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Player not found") from exc
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return PlayerResponse.from_player(player)

    @app.delete("/players/{player_id}")
    async def delete_player(player_id: str) -> dict[str, str]:
        if not store.delete_player(player_id):
            raise HTTPException(status_code=404, detail="Player not found")
        return {"deleted": player_id}

    @app.get("/summary", response_model=TournamentSummaryResponse)
    async def summary() -> TournamentSummaryResponse:
        result = summarize_tournament(store.list_players())
        return TournamentSummaryResponse(
            total_players=result.total_players,
            total_runs=result.total_runs,
            total_wickets=result.total_wickets,
            highest_run_scorer=_leader_response(result.highest_run_scorer),
            highest_wicket_taker=_leader_response(result.highest_wicket_taker),
            category_counts=result.category_counts,
        )

    @app.post("/team/evaluate", response_model=TeamEvaluationResponse)
    async def evaluate(request: TeamEvaluationRequest) -> TeamEvaluationResponse:
        try:
            rules = get_rules(request.rules)
        except KeyError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        players = []
        missing = []
        for player_id in request.player_ids:
            player = store.get_player(player_id)
            if player is None:
                missing.append(player_id)
            else:
                players.append(player)
        if missing:
            raise HTTPException(
                status_code=400,
                detail=f"Unknown players: {', '.join(missing)}",
            )
        result = evaluate_team(players, rules)
        return TeamEvaluationResponse(
            player_ids=result.player_ids,
            total_value=result.total_value,
            total_points=result.total_points,
            budget=result.budget,
            remaining_budget=result.remaining_budget,
            is_valid=result.is_valid,
            errors=result.errors,
        )

    return app


__all__ = ["create_app"]
