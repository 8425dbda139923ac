"""
Team API Endpoints
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.banners import next_sort_order
from app.api.common import apply_changes, get_or_404
from app.core.auth import TokenUser, require_admin
from app.core.database import get_db
from app.domain.content import TeamMember as TeamMemberOut, TeamMemberCreate, TeamMemberUpdate
from app.models import TeamMember

logger = logging.getLogger(__name__)

public_router = APIRouter()
admin_router = APIRouter()


@public_router.get("")
async def list_active_team(db: Session = Depends(get_db)):
    """Active members, founders first"""
    try:
        rows = (
            db.query(TeamMember)
            .filter(TeamMember.is_active.is_(True))
            .order_by(TeamMember.is_founder.desc(), TeamMember.sort_order.asc(), TeamMember.created_at.asc())
            .all()
        )
        return {"status": "success", "data": [TeamMemberOut.model_validate(m).to_dict() for m in rows]}

    except Exception as e:
        logger.exception(f"Error fetching team members: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch team members")


@admin_router.get("")
async def list_team(user: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    try:
        rows = db.query(TeamMember).order_by(TeamMember.sort_order.asc(), TeamMember.created_at.asc()).all()
        return {"status": "success", "data": [TeamMemberOut.model_validate(m).to_dict() for m in rows]}

    except Exception as e:
        logger.exception(f"Error fetching team members: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch team members")


@admin_router.post("", status_code=201)
async def create_team_member(
    payload: TeamMemberCreate,
    user: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    try:
        member = TeamMember(sort_order=next_sort_order(db, TeamMember), **payload.model_dump())
        db.add(member)
        db.commit()
        db.refresh(member)

        return {"status": "success", "data": TeamMemberOut.model_validate(member).to_dict()}

    except Exception as e:
        db.rollback()
        logger.exception(f"Error creating team member: {e}")
        raise HTTPException(status_code=500, detail="Failed to create team member")


@admin_router.put("/{member_id}")
async def update_team_member(
    member_id: int,
    payload: TeamMemberUpdate,
    user: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    try:
        member = get_or_404(db, TeamMember, member_id, "Team member")
        apply_changes(member, payload.model_dump(exclude_unset=True))

        db.commit()
        db.refresh(member)
        return {"status": "success", "data": TeamMemberOut.model_validate(member).to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error updating team member {member_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update team member")


@admin_router.delete("/{member_id}")
async def delete_team_member(member_id: int, user: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    try:
        member = get_or_404(db, TeamMember, member_id, "Team member")
        db.delete(member)
        db.commit()
        return {"status": "success", "message": "Team member deleted"}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error deleting team member {member_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete team member")
