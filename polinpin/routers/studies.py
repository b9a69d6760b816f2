from typing import Optional
from fastapi import APIRouter, Body, Depends, Request, Response

from polinpin.models.observation import Observation, StudyResults, StudyStatistics
from polinpin.models.study import Study
from polinpin.routers.auth import get_token
from polinpin.core.errors import UnauthenticatedError

router = APIRouter(tags=["studies"])


async def get_editor(request: Request, token: Optional[str] = Depends(get_token)) -> Optional[str]:
    """Username behind the bearer token, or None when editor auth is switched off."""
    if not request.app.state.require_editor_auth:
        return None
    if not token:
        raise UnauthenticatedError("Missing session token")
    return request.app.state.session_manager.resolve(token)


@router.get("/tree-test/{study_id}", response_model=Study)
async def view_study(request: Request, study_id: str):
    return request.app.state.study_service.get_study(study_id)


@router.post("/completed/tree-test/{study_id}")
async def complete_study(request: Request, study_id: str, observation: Optional[Observation] = Body(None)):
    request.app.state.study_service.complete_study(study_id, observation)
    return Response(status_code=200)


@router.get("/editor/tree-test/{study_id}", response_model=Study)
async def edit_study(request: Request, study_id: str, editor=Depends(get_editor)):
    return request.app.state.study_service.get_study(study_id)


@router.post("/editor/tree-test/{study_id}")
async def save_study(request: Request, study_id: str, study: Study, editor=Depends(get_editor)):
    request.app.state.study_service.put_study(study_id, study)
    return Response(status_code=200)


@router.get("/editor/tree-test/{study_id}/results", response_model=StudyResults)
async def study_results(request: Request, study_id: str, editor=Depends(get_editor)):
    return request.app.state.study_service.results(study_id)


@router.get("/editor/tree-test/{study_id}/statistics", response_model=StudyStatistics)
async def study_statistics(request: Request, study_id: str, editor=Depends(get_editor)):
    return request.app.state.study_service.statistics(study_id)
