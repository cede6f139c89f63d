"""HTTP API for TextDiff Analyzer.

Exposes the group and text set operations the frontend issues as callbacks,
the per-group comparison, and JSON import/export of the whole state.
"""

import logging
import threading
from typing import Any, Optional

from fastapi import Body, FastAPI, HTTPException, Query

from config import Config, get_config
from diff_engine import DEFAULT_LOOKAHEAD
from domain.errors import GroupNotFound, InvalidReorder, MalformedSnapshot
from domain.models import TextSource
from mappers import comparison_to_dto, group_to_dto, state_to_dto, text_set_to_dto
from models import (
    ActiveGroupRequest, ComparisonResponse, CreateTextSetRequest, GroupDTO,
    MoveRequest, RenameRequest, ReorderRequest, SelectRequest, SelectionRequest,
    StateResponse, TextSetDTO, TranscriptRequest,
)
from ports.snapshot_store import SnapshotStorePort
from stores.groups import DiffGroup, GroupStore
from use_cases.add_transcript import AddTranscriptUseCase, TranscriptResult
from use_cases.compare import CompareGroupUseCase, CompareRequest, DiffCache

logger = logging.getLogger(__name__)


def create_app(
    store: Optional[GroupStore] = None,
    snapshot_store: Optional[SnapshotStorePort] = None,
    cfg: Optional[Config] = None,
) -> FastAPI:
    cfg = cfg or get_config()
    if store is None:
        store = GroupStore(default_group_name=cfg.default_group_name)

    if snapshot_store is not None:
        payload = snapshot_store.load()
        if payload is not None:
            try:
                store.restore(payload, snapshot_store.active_group_id())
            except MalformedSnapshot as e:
                logger.warning(f"Ignoring saved snapshot: {e}")

    cache = DiffCache(max_entries=cfg.diff_cache_size)
    compare = CompareGroupUseCase(store, cache=cache, lookahead=cfg.diff_lookahead or DEFAULT_LOOKAHEAD)
    add_transcript = AddTranscriptUseCase(store)
    # Sync handlers run in a threadpool; store mutations must stay serialized
    lock = threading.Lock()

    app = FastAPI(title="TextDiff Analyzer", version="0.1.0")
    app.state.store = store
    app.state.diff_cache = cache

    def _persist() -> None:
        if snapshot_store is None:
            return
        # The change is already applied in memory, so a failed save is only logged
        try:
            snapshot_store.save(store.snapshot(), store.active_group_id)
        except OSError as e:
            logger.error(f"Failed to save snapshot: {e}")

    def _group(group_id: str) -> DiffGroup:
        group = store.get(group_id)
        if group is None:
            raise HTTPException(status_code=404, detail=f"Group not found: {group_id}")
        return group

    def _require_text_set(group: DiffGroup, text_set_id: str) -> None:
        if text_set_id not in group.sets:
            raise HTTPException(status_code=404, detail=f"Text set not found: {text_set_id}")

    @app.get("/health")
    def health():
        return {"status": "ok", "groups": len(store), "config": cfg.as_dict()}

    @app.get("/v1/state", response_model=StateResponse)
    def get_state():
        with lock:
            return state_to_dto(store)

    # Groups

    @app.post("/v1/groups", response_model=GroupDTO, status_code=201)
    def add_group():
        with lock:
            group = store.add_group()
            _persist()
            return group_to_dto(group)

    @app.patch("/v1/groups/{group_id}", response_model=GroupDTO)
    def rename_group(group_id: str, req: RenameRequest):
        with lock:
            group = _group(group_id)
            if not store.rename_group(group_id, req.name):
                raise HTTPException(status_code=422, detail="Group name must not be blank")
            _persist()
            return group_to_dto(group)

    @app.delete("/v1/groups/{group_id}", response_model=StateResponse)
    def remove_group(group_id: str):
        with lock:
            _group(group_id)
            if store.remove_group(group_id):
                _persist()
            return state_to_dto(store)

    @app.put("/v1/active-group", response_model=StateResponse)
    def set_active_group(req: ActiveGroupRequest):
        with lock:
            _group(req.group_id)
            store.set_active(req.group_id)
            _persist()
            return state_to_dto(store)

    # Text sets

    @app.post("/v1/groups/{group_id}/text-sets", response_model=TextSetDTO, status_code=201)
    def add_text_set(group_id: str, req: CreateTextSetRequest):
        with lock:
            group = _group(group_id)
            ts = group.sets.add(req.name, req.content, TextSource(req.source))
            _persist()
            return text_set_to_dto(ts)

    @app.post("/v1/groups/{group_id}/transcripts", response_model=TextSetDTO, status_code=201)
    def add_transcript_text_set(group_id: str, req: TranscriptRequest):
        with lock:
            try:
                ts = add_transcript.execute(TranscriptResult(
                    group_id=group_id,
                    filename=req.filename,
                    content=req.content,
                    parameters=req.parameters,
                    streaming=req.streaming,
                ))
            except GroupNotFound as e:
                raise HTTPException(status_code=404, detail=str(e))
            _persist()
            return text_set_to_dto(ts)

    @app.patch("/v1/groups/{group_id}/text-sets/{text_set_id}", response_model=TextSetDTO)
    def rename_text_set(group_id: str, text_set_id: str, req: RenameRequest):
        with lock:
            group = _group(group_id)
            _require_text_set(group, text_set_id)
            if not group.sets.rename(text_set_id, req.name):
                raise HTTPException(status_code=422, detail="Text set name must not be blank")
            _persist()
            return text_set_to_dto(group.sets.get(text_set_id))

    @app.delete("/v1/groups/{group_id}/text-sets/{text_set_id}", response_model=GroupDTO)
    def remove_text_set(group_id: str, text_set_id: str):
        with lock:
            group = _group(group_id)
            if group.sets.remove(text_set_id):
                _persist()
            return group_to_dto(group)

    @app.delete("/v1/groups/{group_id}/text-sets", response_model=GroupDTO)
    def clear_text_sets(group_id: str):
        with lock:
            group = _group(group_id)
            group.sets.clear()
            _persist()
            return group_to_dto(group)

    @app.put("/v1/groups/{group_id}/order", response_model=GroupDTO)
    def reorder_text_sets(group_id: str, req: ReorderRequest):
        with lock:
            group = _group(group_id)
            try:
                group.sets.reorder(req.ids)
            except InvalidReorder as e:
                raise HTTPException(status_code=400, detail=str(e))
            _persist()
            return group_to_dto(group)

    @app.post("/v1/groups/{group_id}/text-sets/{text_set_id}/move", response_model=GroupDTO)
    def move_text_set(group_id: str, text_set_id: str, req: MoveRequest):
        with lock:
            group = _group(group_id)
            _require_text_set(group, text_set_id)
            group.sets.move(text_set_id, req.index)
            _persist()
            return group_to_dto(group)

    # Selection

    @app.put("/v1/groups/{group_id}/selection/{text_set_id}", response_model=GroupDTO)
    def select_text_set(group_id: str, text_set_id: str, req: SelectRequest):
        with lock:
            group = _group(group_id)
            _require_text_set(group, text_set_id)
            store.select_set(group_id, text_set_id, req.included)
            _persist()
            return group_to_dto(group)

    @app.put("/v1/groups/{group_id}/selection", response_model=GroupDTO)
    def set_selection(group_id: str, req: SelectionRequest):
        with lock:
            group = _group(group_id)
            group.sets.set_selection(req.ids)
            _persist()
            return group_to_dto(group)

    # Comparison

    @app.get("/v1/groups/{group_id}/comparison", response_model=ComparisonResponse)
    def get_comparison(
        group_id: str,
        ignore_punctuation: bool = Query(False),
        diff: bool = Query(True),
    ):
        with lock:
            _group(group_id)
            comparison = compare.execute(CompareRequest(
                group_id=group_id,
                ignore_punctuation=ignore_punctuation,
                diff_enabled=diff,
            ))
            if comparison is None:
                return ComparisonResponse(comparison=None)
            return ComparisonResponse(comparison=comparison_to_dto(comparison))

    # Import / export

    @app.get("/v1/export")
    def export_state():
        with lock:
            return store.snapshot()

    @app.post("/v1/import", response_model=StateResponse)
    def import_state(
        payload: Any = Body(...),
        active_group_id: Optional[str] = Query(None, alias="activeGroupId"),
    ):
        with lock:
            try:
                store.restore(payload, active_group_id)
            except MalformedSnapshot as e:
                logger.info(f"Rejected import: {e}")
                raise HTTPException(status_code=400, detail=str(e))
            cache.clear()
            _persist()
            return state_to_dto(store)

    return app
