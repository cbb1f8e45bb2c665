"""
Dashboard aggregates.

Every count is restricted to the location ids of the caller's AccessContext.
"""

from typing import Iterable, List, Optional
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from valet_backend.app.core.access_scope import AccessContext
from valet_backend.app.models.enums import ACTIVE_PARKING_STATUSES, BlockEntryStatus
from valet_backend.app.models.location import Location
from valet_backend.app.models.role import RoleMaster
from valet_backend.app.models.user import User
from valet_backend.app.models.valet_transaction import BlockEntry, ValetTransaction
from valet_backend.app.schemas.dashboard import AdminDashboard, ManagerDashboard, OwnerDashboard, RoleCount
from valet_backend.app.schemas.location import LocationResponse


async def _count(db: AsyncSession, query) -> int:
    result = await db.execute(query)
    return int(result.scalar() or 0)


async def count_transactions(db: AsyncSession, location_ids: Optional[Iterable[str]] = None) -> int:
    """Total valet transactions; all locations when location_ids is None."""
    query = select(func.count(ValetTransaction.transaction_id))
    if location_ids is not None:
        query = query.where(ValetTransaction.location_id.in_(list(location_ids)))
    return await _count(db, query)


async def count_active_parkings(db: AsyncSession, location_ids: Iterable[str]) -> int:
    return await _count(
        db,
        select(func.count(ValetTransaction.transaction_id)).where(
            ValetTransaction.location_id.in_(list(location_ids)),
            ValetTransaction.status.in_(ACTIVE_PARKING_STATUSES),
        )
    )


async def count_available_blocks(db: AsyncSession, location_id: str) -> int:
    return await _count(
        db,
        select(func.count(BlockEntry.block_entry_id)).where(
            BlockEntry.location_id == location_id,
            BlockEntry.status == BlockEntryStatus.AVAILABLE,
        )
    )


async def active_user_counts(db: AsyncSession) -> List[RoleCount]:
    result = await db.execute(
        select(RoleMaster.role_name, func.count(User.user_id).label("count"))
        .join(RoleMaster, User.role_id == RoleMaster.role_id)
        .where(User.status == True)
        .group_by(RoleMaster.role_name)
        .order_by(RoleMaster.role_name)
    )
    return [RoleCount(role_name=row.role_name, count=row.count) for row in result.all()]


def _locations(locations: Iterable[Location]) -> List[LocationResponse]:
    return [LocationResponse.model_validate(location) for location in locations]


async def admin_dashboard(db: AsyncSession, context: AccessContext) -> AdminDashboard:
    # ADMIN's context already holds every active location
    return AdminDashboard(
        locations=_locations(context.locations),
        userStats=await active_user_counts(db),
        totalTransactions=await count_transactions(db),
    )


async def owner_dashboard(db: AsyncSession, context: AccessContext, location_ids: List[str]) -> OwnerDashboard:
    if not location_ids:
        return OwnerDashboard(locations=[], totalTransactions=0, activeParkings=0)

    wanted = set(location_ids)
    return OwnerDashboard(
        locations=_locations(loc for loc in context.locations if loc.location_id in wanted),
        totalTransactions=await count_transactions(db, location_ids),
        activeParkings=await count_active_parkings(db, location_ids),
    )


async def manager_dashboard(db: AsyncSession, context: AccessContext) -> ManagerDashboard:
    if not context.locations:
        return ManagerDashboard(location=None, totalTransactions=0, activeParkings=0, availableBlocks=0)

    # A manager runs a single location; with several grants the newest wins.
    location: Location = context.locations[0]
    location_id = location.location_id
    return ManagerDashboard(
        location=LocationResponse.model_validate(location),
        totalTransactions=await count_transactions(db, [location_id]),
        activeParkings=await count_active_parkings(db, [location_id]),
        availableBlocks=await count_available_blocks(db, location_id),
    )
