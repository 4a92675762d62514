"""Sign-in state for the current application instance."""

from fastapi import APIRouter, Depends, status

from .. import schemas
from ..session import SessionContext, get_session

router = APIRouter(prefix="/session", tags=["Session"])


def _describe(context: SessionContext) -> schemas.SessionOut:
    current = context.current
    return schemas.SessionOut(
        authenticated=current is not None,
        offline=context.offline,
        email=current.email if current else None,
        signed_in_at=current.signed_in_at if current else None,
    )


@router.get("/", response_model=schemas.SessionOut)
def read_session(context: SessionContext = Depends(get_session)):
    return _describe(context)


@router.post("/", response_model=schemas.SessionOut, status_code=status.HTTP_201_CREATED)
def sign_in(payload: schemas.SessionIn, context: SessionContext = Depends(get_session)):
    context.sign_in(payload.email)
    return _describe(context)


@router.delete("/", status_code=status.HTTP_204_NO_CONTENT)
def sign_out(context: SessionContext = Depends(get_session)):
    context.sign_out()
