"""Session routes — the idea and tools carried between screens.

Endpoints:
  GET    /session — Current draft and the last run, if any
  PUT    /session — Replace the draft (drops the last run)
  DELETE /session — Start over
"""

from fastapi import APIRouter, Depends, Response, status

from ..schemas.session_schema import SessionDraft, SessionStateResponse
from ..services.auth_dependency import CurrentUser, get_current_user
from ..services.session_state import SessionState, SessionStore, get_session_store

router = APIRouter(
    prefix="/session",
    tags=["Session"],
)


def _to_response(state: SessionState) -> SessionStateResponse:
    return SessionStateResponse(
        business_idea=state.idea_text,
        selected_tools=list(state.selected_tools),
        last_run=state.last_run,
    )


@router.get("", response_model=SessionStateResponse, response_model_exclude_none=True)
def get_session(
    current_user: CurrentUser = Depends(get_current_user),
    store: SessionStore = Depends(get_session_store),
) -> SessionStateResponse:
    return _to_response(store.get(current_user.id))


@router.put("", response_model=SessionStateResponse, response_model_exclude_none=True)
def put_session(
    payload: SessionDraft,
    current_user: CurrentUser = Depends(get_current_user),
    store: SessionStore = Depends(get_session_store),
) -> SessionStateResponse:
    state = store.get(current_user.id).with_draft(payload.business_idea, payload.selected_tools)
    store.put(current_user.id, state)
    return _to_response(state)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def clear_session(
    current_user: CurrentUser = Depends(get_current_user),
    store: SessionStore = Depends(get_session_store),
) -> Response:
    store.clear(current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
