# limocontrol/routers/companies.py
from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ..deps import get_store, unwrap
from ..schemas import ActiveFlag, Company, CompanyFields
from ..store import Store

router = APIRouter(prefix="/companies", tags=["companies"])


@router.get("", response_model=list[Company])
def api_list_companies(store: Store = Depends(get_store)):
    return store.companies.list()


@router.post("", response_model=Company, status_code=status.HTTP_201_CREATED)
def api_create_company(payload: CompanyFields, store: Store = Depends(get_store)):
    return store.companies.create(payload)


@router.put("/{company_id}", response_model=Company)
def api_update_company(company_id: str, payload: CompanyFields, store: Store = Depends(get_store)):
    return unwrap(store.companies.update(company_id, payload))


@router.patch("/{company_id}/active", response_model=Company)
def api_set_company_active(company_id: str, payload: ActiveFlag, store: Store = Depends(get_store)):
    return unwrap(store.companies.set_active(company_id, payload.active))


# 409 while trips still point at the company
@router.delete("/{company_id}", response_model=Company)
def api_delete_company(company_id: str, store: Store = Depends(get_store)):
    return unwrap(store.companies.delete(company_id))
