# limocontrol/routers/dashboard.py
from fastapi import APIRouter, Depends

from ..deps import get_current_identity, get_store
from ..schemas import DashboardSummary
from ..services.trips import dashboard_summary
from ..store import Store
from ..utils.security import Identity

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard", response_model=DashboardSummary)
def api_dashboard(identity: Identity = Depends(get_current_identity), store: Store = Depends(get_store)):
    # non-admins get totals over their own trips only
    return dashboard_summary(store, identity)
